"""
Configuration module for Bookify.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration: database URL, admin email
management, Google Books integration and recommendation limits.

Usage:
    Import the `settings` object to access configuration throughout the project.
"""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import List, Optional

load_dotenv()

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        LOG_LEVEL (str): Root logging level used by the API and the scripts.
        ADMIN_EMAILS (str): Comma-separated list of emails registered as admins.
        GOOGLE_BOOKS_API_KEY (Optional[str]): API key for Google Books; requests go out without one when unset.
        GOOGLE_BOOKS_SEARCH_TIMEOUT (float): Seconds allowed for a metadata search.
        COVER_DOWNLOAD_TIMEOUT (float): Seconds allowed for a cover image download.
        MEDIA_ROOT (str): Directory under which downloaded covers are stored.
        RECOMMENDATION_LIMIT (int): Size of the "show more" recommendation list.
        SIMILAR_BOOKS_LIMIT (int): Size of the similar-books list on the book detail page.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./bookify.db")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ADMIN_EMAILS: str = os.getenv("ADMIN_EMAILS", "")

    GOOGLE_BOOKS_API_KEY: Optional[str] = None
    GOOGLE_BOOKS_SEARCH_TIMEOUT: float = 10.0
    COVER_DOWNLOAD_TIMEOUT: float = 30.0
    MEDIA_ROOT: str = "./storage/public"

    RECOMMENDATION_LIMIT: int = 12
    SIMILAR_BOOKS_LIMIT: int = 6

    @property
    def list_admin_emails(self) -> List[str]:
        """
        Returns the list of admin emails parsed from ADMIN_EMAILS.

        Returns:
            List[str]: Lower-cased admin email addresses.
        """
        return [email.strip().lower() for email in self.ADMIN_EMAILS.split(',') if email.strip()]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
