import logging
from typing import Dict, Optional, Tuple

from app.core.errors import InvalidInputError
from app.models.settlement import PaymentMethod, Settlement
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.settlement_repo import SettlementRepository
from app.services.projector import apply_transfer, check_zero_sum

logger = logging.getLogger(__name__)


class SettlementRecorder:
    """Applies a confirmed payment to the ledger and logs it."""

    def __init__(self, ledger_repo: LedgerRepository, settlement_repo: SettlementRepository):
        self.ledger_repo = ledger_repo
        self.settlement_repo = settlement_repo

    async def record(
        self,
        group_id: str,
        from_member_id: str,
        to_member_id: str,
        amount_cents: int,
        method: Optional[PaymentMethod] = None,
        notes: Optional[str] = None
    ) -> Tuple[Dict[str, int], Settlement]:
        """
        Record from_member_id paying to_member_id.

        The payer's balance moves up by amount_cents and the payee's down by
        the same amount. The amount does not have to match a planned transfer;
        partial payments are allowed.

        Caller holds the group lock and has checked membership.
        """
        if from_member_id == to_member_id:
            raise InvalidInputError("A member cannot settle with themselves")

        balances = await self.ledger_repo.get(group_id)
        updated = apply_transfer(dict(balances), from_member_id, to_member_id, amount_cents)
        check_zero_sum(group_id, updated)

        # The log entry goes first: a recompute folds it in even if the
        # ledger write below fails.
        settlement = await self.settlement_repo.append(Settlement(
            group_id=group_id,
            from_member_id=from_member_id,
            to_member_id=to_member_id,
            amount_cents=amount_cents,
            method=method,
            notes=notes,
        ))
        ledger = await self.ledger_repo.set(group_id, updated)

        logger.info(
            "Settlement recorded: %s paid %s %d in group %s via %s",
            from_member_id, to_member_id, amount_cents, group_id,
            settlement.method or "unknown method",
        )
        return ledger.as_map(), settlement
