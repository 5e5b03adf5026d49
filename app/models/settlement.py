from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import Field
from app.models.base import MongoModel, utcnow


class PaymentMethod(str, Enum):
    UPI = "UPI"
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"
    OTHER = "Other"


class Settlement(MongoModel):
    """A recorded payment between two members. Append-only."""
    group_id: str
    from_member_id: str
    to_member_id: str
    amount_cents: int
    method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    settled_at: datetime = Field(default_factory=utcnow)
