from typing import Optional, Set
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.base import parse_object_id


class GroupRepository:
    """Read-only view of group membership (groups are owned elsewhere)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["groups"]

    async def get_member_ids(self, group_id: str) -> Optional[Set[str]]:
        """Member ids of a group, or None if the group does not exist."""
        doc = await self.collection.find_one({"_id": parse_object_id(group_id) or group_id})
        if not doc:
            return None
        return {str(member["user_id"]) for member in doc.get("members", [])}
