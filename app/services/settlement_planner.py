"""
Settlement planner - greedy min-cash-flow over a balance snapshot.

Creditors are sorted by balance descending and debtors by balance ascending
(most negative first); equal balances are ordered by member id. The current
debtor pays the current creditor min(credit, debt), and whichever side reaches
zero is dropped. Every step clears at least one member and the last clears
two, so c creditors and d debtors produce at most c + d - 1 transfers. This is
not a global optimum for every distribution.
"""

import logging
from typing import Dict, List

from app.core.errors import ConsistencyFault
from app.models.ledger import Transfer

logger = logging.getLogger(__name__)

# Half a minor unit: with integer cents every non-zero balance takes part.
EPSILON = 0.5


def plan(balances: Dict[str, int]) -> List[Transfer]:
    """Transfers that zero every balance when applied."""
    total = sum(balances.values())
    if total != 0:
        raise ConsistencyFault(f"Cannot plan settlement for balances summing to {total}")

    creditors = [[member_id, amount] for member_id, amount in balances.items() if amount > EPSILON]
    debtors = [[member_id, -amount] for member_id, amount in balances.items() if amount < -EPSILON]

    creditors.sort(key=lambda c: (-c[1], c[0]))
    debtors.sort(key=lambda d: (-d[1], d[0]))

    transfers: List[Transfer] = []
    i = 0
    j = 0

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        amount = min(creditor[1], debtor[1])
        transfers.append(Transfer(
            from_member_id=debtor[0],
            to_member_id=creditor[0],
            amount_cents=amount,
        ))

        creditor[1] -= amount
        debtor[1] -= amount

        if creditor[1] < EPSILON:
            i += 1
        if debtor[1] < EPSILON:
            j += 1

    logger.debug(
        "Planned %d transfers for %d creditors and %d debtors",
        len(transfers), len(creditors), len(debtors),
    )
    return transfers
