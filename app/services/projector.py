"""
Expense projector - computes group balances from history.

Core algorithm:
1. Seed every known member at 0
2. For each expense: the payer gains the total, every share holder loses
   their share (a payer who is also in the split nets total - own share)
3. For each settlement: the sender gains the amount, the receiver loses it

The fold is pure and order independent, so recomputing from an unchanged
history always yields the same balances. Cost is linear in the number of
shares plus settlements of the group; very large histories would want an
incremental updater reconciled against this full projection.
"""

from typing import Dict, Iterable

from app.core.errors import ConsistencyFault
from app.models.expense import Expense
from app.models.settlement import Settlement


def project(
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement] = (),
    members: Iterable[str] = (),
) -> Dict[str, int]:
    """Fold expenses (and settlements) into {member_id: balance_cents}."""
    balances: Dict[str, int] = {member_id: 0 for member_id in members}

    for expense in expenses:
        # paid - owed per member; for a payer inside the split this is the
        # net amount fronted for the others
        payer = expense.payer_id
        balances[payer] = balances.get(payer, 0) + expense.total_cents
        for share in expense.shares:
            balances[share.member_id] = balances.get(share.member_id, 0) - share.amount_cents

    for settlement in settlements:
        apply_transfer(
            balances,
            settlement.from_member_id,
            settlement.to_member_id,
            settlement.amount_cents,
        )

    return dict(sorted(balances.items()))


def apply_transfer(balances: Dict[str, int], from_id: str, to_id: str, amount_cents: int) -> Dict[str, int]:
    """Apply a payment from_id -> to_id in place and return the map."""
    balances[from_id] = balances.get(from_id, 0) + amount_cents
    balances[to_id] = balances.get(to_id, 0) - amount_cents
    return balances


def balance_sum(balances: Dict[str, int]) -> int:
    return sum(balances.values())


def check_zero_sum(group_id: str, balances: Dict[str, int]) -> None:
    """Raise ConsistencyFault when balances do not cancel out."""
    total = balance_sum(balances)
    if total != 0:
        raise ConsistencyFault(
            f"Balances of group {group_id} sum to {total} instead of 0"
        )
