from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from app.schemas.ledger import BalanceResponse


class ExpenseCreate(BaseModel):
    group_id: str
    payer_id: str
    total_cents: int
    member_ids: List[str]
    description: str = Field("", max_length=200)
    category: Optional[str] = None


class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, max_length=200)
    total_cents: Optional[int] = None
    member_ids: Optional[List[str]] = None
    category: Optional[str] = None


class ShareResponse(BaseModel):
    member_id: str
    amount_cents: int
    percentage: float

    model_config = {"from_attributes": True}


class ExpenseResponse(BaseModel):
    id: str
    group_id: str
    description: str
    payer_id: str
    total_cents: int
    shares: List[ShareResponse]
    category: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        return str(value)


class ExpenseWithBalances(BaseModel):
    expense: ExpenseResponse
    balances: List[BalanceResponse]


class DeletedExpense(BaseModel):
    deleted_expense: ExpenseResponse
    balances: List[BalanceResponse]
