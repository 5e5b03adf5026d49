from typing import List
from pydantic import BaseModel


class BalanceResponse(BaseModel):
    """Net balance of one member (positive = is owed)."""
    member_id: str
    balance_cents: int

    model_config = {"from_attributes": True}


class TransferResponse(BaseModel):
    """Suggested payment from a debtor to a creditor."""
    from_member_id: str
    to_member_id: str
    amount_cents: int

    model_config = {"from_attributes": True}


class RecalculationResponse(BaseModel):
    old_balances: List[BalanceResponse]
    new_balances: List[BalanceResponse]
    changed: bool
