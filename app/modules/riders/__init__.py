# app/modules/riders/__init__.py
"""
Riders module - rider onboarding

Application state machine:
- pending -> active (admin approval, user role becomes rider)
- active <-> penalty (admin toggle, role unchanged)
- pending/active/penalty -> removed (reject or withdraw, role back to user)

Also serves the rider's own deliveries with earnings summary.
"""

from .router import router
from .service import RidersService
from .repository import RidersRepository

__all__ = [
    "router",
    "RidersService",
    "RidersRepository"
]
