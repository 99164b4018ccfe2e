# app/modules/cashouts/__init__.py
"""
Cash-out module - rider payouts

Riders request a payout; approving it settles every delivered parcel
of that rider that was not cashed out yet.
"""

from .router import router
from .service import CashoutsService
from .repository import CashoutsRepository

__all__ = [
    "router",
    "CashoutsService",
    "CashoutsRepository"
]
