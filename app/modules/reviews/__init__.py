# app/modules/reviews/__init__.py
from .router import router
from .service import ReviewsService
from .repository import ReviewsRepository

__all__ = [
    "router",
    "ReviewsService",
    "ReviewsRepository"
]
