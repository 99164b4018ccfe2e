# app/modules/users/__init__.py
"""
Users module

- Registration after sign-in
- Role lookup for the signed-in user
- Admin user list and admin promotion
- Active riders list for assignment

Architecture:
- router.py: endpoints
- service.py: business rules
- repository.py: data access
- schemas.py: request/response models
"""

from .router import router
from .service import UsersService
from .repository import UsersRepository

__all__ = [
    "router",
    "UsersService",
    "UsersRepository"
]
