"""
LedgerRepository - per-group balance store.

Balances are never incremented in place: every write replaces the whole map
of a group in a single document upsert, so a reader always sees one complete
snapshot and an interrupted recompute leaves the previous one untouched.
"""

from typing import Dict, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.base import utcnow
from app.models.ledger import BalanceEntry, GroupLedger


class LedgerRepository:
    """Repository for group balance snapshots."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["ledgers"]

    async def get_ledger(self, group_id: str) -> Optional[GroupLedger]:
        """Stored snapshot including version, or None."""
        doc = await self.collection.find_one({"_id": group_id})
        if not doc:
            return None
        return GroupLedger(**doc)

    async def get(self, group_id: str) -> Dict[str, int]:
        """{member_id: balance_cents}; empty when the group has no ledger yet."""
        ledger = await self.get_ledger(group_id)
        if ledger is None:
            return {}
        return ledger.as_map()

    async def set(self, group_id: str, balances: Dict[str, int]) -> GroupLedger:
        """Atomically replace the balances of a group."""
        entries = [
            BalanceEntry(member_id=member_id, balance_cents=amount).model_dump()
            for member_id, amount in sorted(balances.items())
        ]

        doc = await self.collection.find_one_and_update(
            {"_id": group_id},
            {
                "$set": {"balances": entries, "updated_at": utcnow()},
                "$inc": {"version": 1}
            },
            upsert=True,
            return_document=True
        )
        return GroupLedger(**doc)

    async def delete(self, group_id: str) -> bool:
        """Remove every balance entry of a group."""
        result = await self.collection.delete_one({"_id": group_id})
        return result.deleted_count > 0
