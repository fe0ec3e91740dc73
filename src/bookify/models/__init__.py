from .book import Book
from .review import Review
from .favorite import Favorite
from .user import User

__all__ = ["Book", "Review", "Favorite", "User"]
