from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.base import parse_object_id, utcnow
from app.models.expense import Expense, ExpenseShare


class ExpenseRepository:
    """Expense database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["expenses"]

    async def create_expense(self, expense: Expense) -> Expense:
        """Insert a new expense."""
        result = await self.collection.insert_one(expense.to_document())
        expense.id = result.inserted_id
        return expense

    async def get_expense(self, expense_id: str) -> Optional[Expense]:
        """Get an expense by id."""
        oid = parse_object_id(expense_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        if doc:
            return Expense(**doc)
        return None

    async def list_by_group(self, group_id: str, limit: Optional[int] = None) -> List[Expense]:
        """Expenses of a group, newest first."""
        cursor = self.collection.find({"group_id": group_id}).sort(
            [("created_at", -1), ("_id", -1)]
        )
        if limit:
            cursor = cursor.limit(limit)
        docs = await cursor.to_list(None)
        return [Expense(**doc) for doc in docs]

    async def history(self, group_id: str) -> List[Expense]:
        """Full expense history of a group, oldest first."""
        cursor = self.collection.find({"group_id": group_id}).sort(
            [("created_at", 1), ("_id", 1)]
        )
        docs = await cursor.to_list(None)
        return [Expense(**doc) for doc in docs]

    async def update_expense(
        self,
        expense_id: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        total_cents: Optional[int] = None,
        shares: Optional[List[ExpenseShare]] = None
    ) -> Optional[Expense]:
        """Update the editable fields of an expense."""
        oid = parse_object_id(expense_id)
        if oid is None:
            return None

        updates = {"updated_at": utcnow()}
        if description is not None:
            updates["description"] = description
        if category is not None:
            updates["category"] = category
        if total_cents is not None:
            updates["total_cents"] = total_cents
        if shares is not None:
            updates["shares"] = [share.model_dump() for share in shares]

        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": updates},
            return_document=True
        )
        if doc:
            return Expense(**doc)
        return None

    async def delete_expense(self, expense_id: str) -> bool:
        """Hard delete an expense."""
        oid = parse_object_id(expense_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def delete_by_group(self, group_id: str) -> int:
        """Cascade delete for a removed group."""
        result = await self.collection.delete_many({"group_id": group_id})
        return result.deleted_count
