"""Tests for ledger, expense, settlement and group repositories."""
import pytest
from bson import ObjectId

from app.models.expense import Expense
from app.models.settlement import Settlement
from app.repositories.expense_repo import ExpenseRepository
from app.repositories.group_repo import GroupRepository
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.settlement_repo import SettlementRepository
from app.utils.expense_validation import equal_split


def make_expense(group_id="g1", payer_id="alice", total_cents=300):
    return Expense(
        group_id=group_id,
        payer_id=payer_id,
        total_cents=total_cents,
        shares=equal_split(total_cents, ["alice", "bob", "carol"]),
        description="Dinner",
    )


@pytest.mark.asyncio
class TestLedgerRepository:
    """Balance store: get / set / delete."""

    async def test_get_missing_group_is_empty(self, test_db):
        repo = LedgerRepository(test_db)

        assert await repo.get("nope") == {}
        assert await repo.get_ledger("nope") is None

    async def test_set_then_get(self, test_db):
        repo = LedgerRepository(test_db)

        await repo.set("g1", {"alice": 200, "bob": -100, "carol": -100})

        assert await repo.get("g1") == {"alice": 200, "bob": -100, "carol": -100}

    async def test_set_replaces_whole_map(self, test_db):
        repo = LedgerRepository(test_db)
        await repo.set("g1", {"alice": 200, "bob": -200})

        await repo.set("g1", {"carol": 50, "dave": -50})

        assert await repo.get("g1") == {"carol": 50, "dave": -50}

    async def test_set_bumps_version(self, test_db):
        repo = LedgerRepository(test_db)

        first = await repo.set("g1", {"alice": 0})
        second = await repo.set("g1", {"alice": 0})

        assert first.version == 1
        assert second.version == 2

    async def test_groups_are_independent(self, test_db):
        repo = LedgerRepository(test_db)
        await repo.set("g1", {"alice": 10, "bob": -10})
        await repo.set("g2", {"alice": -7, "dave": 7})

        assert await repo.get("g1") == {"alice": 10, "bob": -10}
        assert await repo.get("g2") == {"alice": -7, "dave": 7}

    async def test_delete(self, test_db):
        repo = LedgerRepository(test_db)
        await repo.set("g1", {"alice": 10, "bob": -10})

        assert await repo.delete("g1") is True
        assert await repo.get("g1") == {}
        assert await repo.delete("g1") is False


@pytest.mark.asyncio
class TestExpenseRepository:

    async def test_create_and_get(self, test_db):
        repo = ExpenseRepository(test_db)

        created = await repo.create_expense(make_expense())
        fetched = await repo.get_expense(str(created.id))

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.total_cents == 300
        assert [s.amount_cents for s in fetched.shares] == [100, 100, 100]

    async def test_get_invalid_id(self, test_db):
        repo = ExpenseRepository(test_db)

        assert await repo.get_expense("not-an-object-id") is None
        assert await repo.get_expense(str(ObjectId())) is None

    async def test_list_by_group_newest_first(self, test_db):
        repo = ExpenseRepository(test_db)
        first = await repo.create_expense(make_expense(total_cents=100))
        second = await repo.create_expense(make_expense(total_cents=200))
        await repo.create_expense(make_expense(group_id="g2"))

        listed = await repo.list_by_group("g1")
        history = await repo.history("g1")

        assert [e.id for e in listed] == [second.id, first.id]
        assert [e.id for e in history] == [first.id, second.id]

    async def test_list_by_group_limit(self, test_db):
        repo = ExpenseRepository(test_db)
        for _ in range(3):
            await repo.create_expense(make_expense())

        assert len(await repo.list_by_group("g1", limit=2)) == 2

    async def test_update_expense(self, test_db):
        repo = ExpenseRepository(test_db)
        created = await repo.create_expense(make_expense())

        updated = await repo.update_expense(
            str(created.id),
            description="Lunch",
            total_cents=100,
            shares=equal_split(100, ["alice", "bob", "carol"])
        )

        assert updated.description == "Lunch"
        assert updated.total_cents == 100
        assert [s.amount_cents for s in updated.shares] == [34, 33, 33]

    async def test_delete_expense(self, test_db):
        repo = ExpenseRepository(test_db)
        created = await repo.create_expense(make_expense())

        assert await repo.delete_expense(str(created.id)) is True
        assert await repo.get_expense(str(created.id)) is None
        assert await repo.delete_expense(str(created.id)) is False

    async def test_delete_by_group(self, test_db):
        repo = ExpenseRepository(test_db)
        await repo.create_expense(make_expense())
        await repo.create_expense(make_expense())
        await repo.create_expense(make_expense(group_id="g2"))

        assert await repo.delete_by_group("g1") == 2
        assert await repo.history("g1") == []
        assert len(await repo.history("g2")) == 1


@pytest.mark.asyncio
class TestSettlementRepository:

    async def test_newest_first(self, test_db):
        repo = SettlementRepository(test_db)
        for amount in (10, 20, 30):
            await repo.append(Settlement(
                group_id="g1", from_member_id="bob", to_member_id="alice", amount_cents=amount
            ))

        history = await repo.list_by_group("g1")

        assert [s.amount_cents for s in history] == [30, 20, 10]
        assert all(isinstance(s.id, ObjectId) for s in history)


@pytest.mark.asyncio
class TestGroupRepository:

    async def test_member_ids(self, test_db, group):
        repo = GroupRepository(test_db)

        assert await repo.get_member_ids(group) == {"alice", "bob", "carol"}

    async def test_missing_group(self, test_db):
        repo = GroupRepository(test_db)

        assert await repo.get_member_ids("nope") is None

    async def test_object_id_group(self, test_db):
        group_oid = ObjectId()
        member_oid = ObjectId()
        await test_db["groups"].insert_one({"_id": group_oid, "members": [{"user_id": member_oid}]})

        members = await GroupRepository(test_db).get_member_ids(str(group_oid))

        assert members == {str(member_oid)}
