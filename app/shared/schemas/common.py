# app/shared/schemas/common.py
from pydantic import BaseModel, Field
from typing import Any, List, Optional
from datetime import datetime
from enum import Enum
import math


class UserRole(str, Enum):
    USER = "user"
    RIDER = "rider"
    ADMIN = "admin"


class ParcelStatus(str, Enum):
    """Parcel lifecycle, in the order it advances"""
    PENDING = "pending"
    PAID = "paid"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


PARCEL_STATUS_ORDER = [status.value for status in ParcelStatus]


class RiderApplicationStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    PENALTY = "penalty"


class CashoutStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Canonical form used for storage and comparison"""
    if value is None:
        return None
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("Invalid email address")
    return value


class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)


class PaginatedResponse(BaseModel):
    items: List[Any]
    total: int
    page: int
    size: int
    pages: int

    @classmethod
    def build(cls, items: List[Any], total: int, page: int, size: int) -> "PaginatedResponse":
        return cls(
            items=items,
            total=total,
            page=page,
            size=size,
            pages=math.ceil(total / size) if size else 0
        )
