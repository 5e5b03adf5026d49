from typing import List
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.settlement import Settlement


class SettlementRepository:
    """Append-only settlement log. Records are never updated or deleted."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["settlements"]

    async def append(self, settlement: Settlement) -> Settlement:
        result = await self.collection.insert_one(settlement.to_document())
        settlement.id = result.inserted_id
        return settlement

    async def list_by_group(self, group_id: str) -> List[Settlement]:
        """Settlements of a group, newest first."""
        cursor = self.collection.find({"group_id": group_id}).sort(
            [("settled_at", -1), ("_id", -1)]
        )
        docs = await cursor.to_list(None)
        return [Settlement(**doc) for doc in docs]
