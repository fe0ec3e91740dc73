from .crud_user import get_user_by_email, get_user_by_id, create_user, authenticate_user
from .crud_book import (
    list_books,
    count_books,
    list_genres,
    get_book_by_id,
    get_book_by_title_author,
    create_book,
    update_book,
    delete_book,
)
from .crud_review import (
    DuplicateReviewError,
    create_review,
    update_review,
    delete_review,
    admin_delete_review,
    bulk_delete_reviews,
    get_review_by_id,
    get_user_review_for_book,
    get_reviews_for_book,
    count_reviews_for_book,
    get_reviews_by_user,
    get_all_reviews_admin,
)
from .crud_favorite import (
    toggle_favorite,
    remove_favorite,
    is_favorited,
    list_favorite_books,
    count_favorite_books,
    favorite_statistics,
    admin_favorite_statistics,
)
from .crud_stats import public_stats, book_statistics, dashboard

__all__ = [
    "get_user_by_email",
    "get_user_by_id",
    "create_user",
    "authenticate_user",
    "list_books",
    "count_books",
    "list_genres",
    "get_book_by_id",
    "get_book_by_title_author",
    "create_book",
    "update_book",
    "delete_book",
    "DuplicateReviewError",
    "create_review",
    "update_review",
    "delete_review",
    "admin_delete_review",
    "bulk_delete_reviews",
    "get_review_by_id",
    "get_user_review_for_book",
    "get_reviews_for_book",
    "count_reviews_for_book",
    "get_reviews_by_user",
    "get_all_reviews_admin",
    "toggle_favorite",
    "remove_favorite",
    "is_favorited",
    "list_favorite_books",
    "count_favorite_books",
    "favorite_statistics",
    "admin_favorite_statistics",
    "public_stats",
    "book_statistics",
    "dashboard",
]
