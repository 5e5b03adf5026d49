"""
LedgerService - the single entry point to group balances and settlements.

Every path that changes a group's balances runs here under that group's
lock:

    Idle -> Recomputing -> Idle

An expense create/update/delete persists the expense, re-reads the group's
whole expense history and settlement log, projects fresh balances, checks that
they sum to zero and only then replaces the stored ledger. Settlements skip
the recompute and apply their delta through the SettlementRecorder.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.config import settings
from app.core.errors import (
    ConsistencyFault,
    ForbiddenError,
    MembershipError,
    NotFoundError,
    RecomputeTimeout,
)
from app.models.expense import Expense
from app.models.ledger import BalanceEntry, Transfer
from app.models.settlement import PaymentMethod, Settlement
from app.repositories.expense_repo import ExpenseRepository
from app.repositories.group_repo import GroupRepository
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.settlement_repo import SettlementRepository
from app.services import settlement_planner
from app.services.locks import GroupLockRegistry, group_locks
from app.services.projector import check_zero_sum, project
from app.services.settlement_recorder import SettlementRecorder
from app.utils.expense_validation import equal_split, validate_amount

logger = logging.getLogger(__name__)


def sorted_balances(balances: Dict[str, int]) -> List[BalanceEntry]:
    """Largest creditor first, ties by member id."""
    return [
        BalanceEntry(member_id=member_id, balance_cents=amount)
        for member_id, amount in sorted(balances.items(), key=lambda b: (-b[1], b[0]))
    ]


class LedgerService:
    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        locks: GroupLockRegistry = group_locks,
        read_timeout: Optional[float] = None
    ):
        self.expense_repo = ExpenseRepository(db)
        self.settlement_repo = SettlementRepository(db)
        self.ledger_repo = LedgerRepository(db)
        self.group_repo = GroupRepository(db)
        self.recorder = SettlementRecorder(self.ledger_repo, self.settlement_repo)
        self.locks = locks
        self.read_timeout = settings.LEDGER_READ_TIMEOUT_SECONDS if read_timeout is None else read_timeout

    # ===== EXPENSES =====

    async def create_expense(
        self,
        actor_id: str,
        group_id: str,
        payer_id: str,
        total_cents: int,
        member_ids: List[str],
        description: str = "",
        category: Optional[str] = None
    ) -> Tuple[Expense, List[BalanceEntry]]:
        """Create an equally split expense and recompute the group."""
        members = await self._require_member(actor_id, group_id)
        shares = equal_split(total_cents, member_ids)
        self._require_in_group(members, [payer_id, *member_ids])

        async with self.locks.hold(group_id):
            expense = await self.expense_repo.create_expense(Expense(
                group_id=group_id,
                description=description,
                payer_id=payer_id,
                total_cents=total_cents,
                shares=shares,
                category=category,
            ))
            balances = await self._recompute(group_id)

        logger.info("Expense created: %s in group %s", expense.id, group_id)
        return expense, sorted_balances(balances)

    async def update_expense(
        self,
        actor_id: str,
        expense_id: str,
        description: Optional[str] = None,
        total_cents: Optional[int] = None,
        member_ids: Optional[List[str]] = None,
        category: Optional[str] = None
    ) -> Tuple[Expense, List[BalanceEntry]]:
        """Edit an expense (payer only); splits are redone when amount or members change."""
        group_id = (await self._require_payer(actor_id, expense_id, "edit")).group_id
        members = await self._require_member(actor_id, group_id)

        async with self.locks.hold(group_id):
            # Another edit may have landed while waiting for the lock
            expense = await self._require_payer(actor_id, expense_id, "edit")

            new_total = None
            shares = None
            if total_cents is not None or member_ids is not None:
                new_total = total_cents if total_cents is not None else expense.total_cents
                new_members = member_ids if member_ids is not None else expense.member_ids()
                shares = equal_split(new_total, new_members)
                if member_ids is not None:
                    self._require_in_group(members, member_ids)

            updated = await self.expense_repo.update_expense(
                expense_id,
                description=description,
                category=category,
                total_cents=new_total,
                shares=shares,
            )
            if updated is None:
                raise NotFoundError("Expense not found")
            balances = await self._recompute(group_id)

        logger.info("Expense updated: %s in group %s", expense_id, group_id)
        return updated, sorted_balances(balances)

    async def delete_expense(
        self,
        actor_id: str,
        expense_id: str
    ) -> Tuple[Expense, List[BalanceEntry]]:
        """Delete an expense (payer only) and recompute the group."""
        group_id = (await self._require_payer(actor_id, expense_id, "delete")).group_id
        await self._require_member(actor_id, group_id)

        async with self.locks.hold(group_id):
            expense = await self._require_payer(actor_id, expense_id, "delete")
            if not await self.expense_repo.delete_expense(expense_id):
                raise NotFoundError("Expense not found")
            balances = await self._recompute(group_id)

        logger.info("Expense deleted: %s from group %s - balances recalculated", expense_id, group_id)
        return expense, sorted_balances(balances)

    async def get_expense(self, actor_id: str, expense_id: str) -> Expense:
        expense = await self.expense_repo.get_expense(expense_id)
        if expense is None:
            raise NotFoundError("Expense not found")
        await self._require_member(actor_id, expense.group_id)
        return expense

    async def list_expenses(self, actor_id: str, group_id: str) -> List[Expense]:
        await self._require_member(actor_id, group_id)
        return await self.expense_repo.list_by_group(group_id, limit=settings.EXPENSE_LIST_LIMIT)

    # ===== BALANCES =====

    async def get_balances(self, actor_id: str, group_id: str) -> List[BalanceEntry]:
        await self._require_member(actor_id, group_id)
        return sorted_balances(await self.ledger_repo.get(group_id))

    async def get_settlement_plan(self, actor_id: str, group_id: str) -> List[Transfer]:
        """Debt simplification over the current snapshot; no lock, no writes."""
        await self._require_member(actor_id, group_id)
        balances = await self.ledger_repo.get(group_id)
        transfers = settlement_planner.plan(balances)
        logger.info("Calculated %d settlements for group %s", len(transfers), group_id)
        return transfers

    async def recalculate_balances(self, actor_id: str, group_id: str) -> dict:
        """
        Rebuild a group's balances from its full history.

        Repair path for a ledger that drifted or missed a write (for example
        after a timed-out recompute). Safe to run at any time.
        """
        await self._require_member(actor_id, group_id)

        async with self.locks.hold(group_id):
            old_balances = await self.ledger_repo.get(group_id)
            new_balances = await self._recompute(group_id)

        changed = old_balances != new_balances
        if changed:
            logger.warning("Recalculation changed balances of group %s", group_id)
        return {
            "old_balances": sorted_balances(old_balances),
            "new_balances": sorted_balances(new_balances),
            "changed": changed,
        }

    # ===== SETTLEMENTS =====

    async def record_settlement(
        self,
        actor_id: str,
        group_id: str,
        from_member_id: str,
        to_member_id: str,
        amount_cents: int,
        method: Optional[PaymentMethod] = None,
        notes: Optional[str] = None
    ) -> Tuple[List[BalanceEntry], Settlement]:
        members = await self._require_member(actor_id, group_id)
        validate_amount(amount_cents, "Settlement amount")
        self._require_in_group(members, [from_member_id, to_member_id])

        async with self.locks.hold(group_id):
            try:
                balances, settlement = await self.recorder.record(
                    group_id, from_member_id, to_member_id, amount_cents, method, notes
                )
            except ConsistencyFault as exc:
                logger.critical("Consistency fault in group %s: %s", group_id, exc.detail)
                raise

        return sorted_balances(balances), settlement

    async def get_settlement_history(self, actor_id: str, group_id: str) -> List[Settlement]:
        await self._require_member(actor_id, group_id)
        return await self.settlement_repo.list_by_group(group_id)

    # ===== GROUP LIFECYCLE =====

    async def purge_group(self, group_id: str) -> int:
        """
        Cascade for a deleted group: drop its ledger and expenses.

        The settlement log is kept. Returns the number of deleted expenses.
        """
        async with self.locks.hold(group_id):
            await self.ledger_repo.delete(group_id)
            deleted = await self.expense_repo.delete_by_group(group_id)

        logger.info("Purged ledger of group %s (%d expenses)", group_id, deleted)
        return deleted

    # ===== PRIVATE HELPERS =====

    async def _recompute(self, group_id: str) -> Dict[str, int]:
        """Project the group's history and replace its ledger. Caller holds the lock."""
        previous = await self.ledger_repo.get(group_id)

        try:
            expenses, settlements = await asyncio.wait_for(
                asyncio.gather(
                    self.expense_repo.history(group_id),
                    self.settlement_repo.list_by_group(group_id),
                ),
                timeout=self.read_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Recompute of group %s timed out; ledger left unchanged", group_id)
            raise RecomputeTimeout(f"Reading history of group {group_id} timed out")

        # Members already on the ledger keep an entry even at zero
        balances = project(expenses, settlements, members=previous.keys())

        try:
            check_zero_sum(group_id, balances)
        except ConsistencyFault as exc:
            logger.critical("Consistency fault in group %s: %s", group_id, exc.detail)
            raise

        ledger = await self.ledger_repo.set(group_id, balances)
        logger.info(
            "Updated balances for group %s using full recalculation (%d expenses, %d settlements)",
            group_id, len(expenses), len(settlements),
        )
        return ledger.as_map()

    async def _require_member(self, actor_id: str, group_id: str) -> Set[str]:
        members = await self.group_repo.get_member_ids(group_id)
        if members is None:
            raise NotFoundError("Group not found")
        if actor_id not in members:
            raise ForbiddenError("You are not a member of this group")
        return members

    async def _require_payer(self, actor_id: str, expense_id: str, action: str) -> Expense:
        expense = await self.expense_repo.get_expense(expense_id)
        if expense is None:
            raise NotFoundError("Expense not found")
        if expense.payer_id != actor_id:
            raise ForbiddenError(f"Only the person who paid can {action} this expense")
        return expense

    @staticmethod
    def _require_in_group(members: Set[str], member_ids: Iterable[str]) -> None:
        outsiders = sorted(set(member_ids) - members)
        if outsiders:
            raise MembershipError(f"Not members of this group: {', '.join(outsiders)}")
