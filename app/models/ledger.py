"""
Ledger model - derived net balances of one group.

Design principles:
- One document per group, replaced wholesale on every write
- Positive balance = owed to the member, negative = the member owes
- Never authoritative: always reconstructible from expenses and settlements
- All amounts in integer cents
"""

from typing import Dict, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from app.models.base import utcnow


class BalanceEntry(BaseModel):
    member_id: str
    balance_cents: int = 0


class Transfer(BaseModel):
    """A suggested payment that moves both parties toward zero."""
    from_member_id: str
    to_member_id: str
    amount_cents: int


class GroupLedger(BaseModel):
    """
    Stored balance snapshot for a group.

    Invariants:
    - sum(balance_cents) == 0
    - version increases by one on every replace
    """
    model_config = ConfigDict(populate_by_name=True)

    group_id: str = Field(validation_alias="_id", serialization_alias="_id")
    balances: List[BalanceEntry] = []
    version: int = 0
    updated_at: datetime = Field(default_factory=utcnow)

    def as_map(self) -> Dict[str, int]:
        return {entry.member_id: entry.balance_cents for entry in self.balances}
