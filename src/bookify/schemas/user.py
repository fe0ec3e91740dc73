"""
Pydantic schemas for the User entity.
Input models for registration and output models without the password hash.
"""

from pydantic import BaseModel, EmailStr, ConfigDict, Field

class UserCreate(BaseModel):
    """
    Payload for registering a user.

    Attributes:
        name (str): Display name.
        email (EmailStr): Login email.
        password (str): Plain-text password, hashed before storage.
    """
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

class UserBrief(BaseModel):
    id: int
    name: str
    email: EmailStr

    model_config = ConfigDict(from_attributes=True)

class UserSchema(UserBrief):
    """
    Output schema for a user (never includes the password).

    Attributes:
        role (str): 'admin' or 'user'.
        is_active (bool): Whether the account can log in.
    """
    role: str
    is_active: bool
