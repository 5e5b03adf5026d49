from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from app.models.settlement import PaymentMethod
from app.schemas.ledger import BalanceResponse


class SettlementCreate(BaseModel):
    from_member_id: str
    to_member_id: str
    amount_cents: int
    method: Optional[PaymentMethod] = None
    notes: Optional[str] = Field(None, max_length=500)


class SettlementResponse(BaseModel):
    id: str
    group_id: str
    from_member_id: str
    to_member_id: str
    amount_cents: int
    method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    settled_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        return str(value)


class SettlementWithBalances(BaseModel):
    settlement: SettlementResponse
    balances: List[BalanceResponse]
