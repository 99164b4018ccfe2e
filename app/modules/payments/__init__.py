# app/modules/payments/__init__.py
"""
Payments module

- Card payment intents through the payment gateway
- Recording confirmed payments (idempotent per transaction id)
- Payment history
"""

from .router import router
from .service import PaymentsService
from .repository import PaymentsRepository

__all__ = [
    "router",
    "PaymentsService",
    "PaymentsRepository"
]
