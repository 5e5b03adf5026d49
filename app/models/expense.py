"""
Expense model - a payment made by one member on behalf of a group.

Design principles:
- All amounts in integer cents
- Shares always sum exactly to total_cents
- Only the payer may edit or delete an expense
"""

from typing import List, Optional
from pydantic import BaseModel

from app.models.base import MongoModel


class ExpenseShare(BaseModel):
    """One member's part of an expense."""
    member_id: str
    amount_cents: int
    percentage: float  # informational only, e.g. 33.33


class Expense(MongoModel):
    group_id: str
    description: str = ""
    payer_id: str
    total_cents: int
    shares: List[ExpenseShare] = []
    category: Optional[str] = None

    def member_ids(self) -> List[str]:
        return [s.member_id for s in self.shares]
