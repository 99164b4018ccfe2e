# app/modules/parcels/__init__.py
"""
Parcels module - booking lifecycle

pending -> paid -> assigned -> picked_up -> in_transit -> delivered

- Booking and cancellation (pending only)
- Admin rider assignment
- Rider status updates with commission split on delivery
- Public tracking by tracing id
"""

from .router import router
from .service import ParcelsService, calculate_commission
from .repository import ParcelsRepository

__all__ = [
    "router",
    "ParcelsService",
    "ParcelsRepository",
    "calculate_commission"
]
