import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from app.core.auth import create_access_token
from app.services.ledger_service import LedgerService
from app.services.locks import GroupLockRegistry

TEST_MONGODB_DB = "splitledger_test"

GROUP_ID = "trip-goa"
MEMBERS = ["alice", "bob", "carol"]


@pytest_asyncio.fixture
async def test_db():
    """In-memory MongoDB database, fresh per test."""
    client = AsyncMongoMockClient()
    return client[TEST_MONGODB_DB]


@pytest_asyncio.fixture
async def group(test_db):
    """A group of three members, as written by the group service."""
    await test_db["groups"].insert_one({
        "_id": GROUP_ID,
        "name": "Goa Trip",
        "members": [{"user_id": member_id} for member_id in MEMBERS]
    })
    return GROUP_ID


@pytest_asyncio.fixture
async def other_group(test_db):
    """A second group sharing one member with the first."""
    await test_db["groups"].insert_one({
        "_id": "flat-rent",
        "name": "Flat",
        "members": [{"user_id": "alice"}, {"user_id": "dave"}]
    })
    return "flat-rent"


@pytest_asyncio.fixture
async def service(test_db):
    return LedgerService(test_db, locks=GroupLockRegistry())


@pytest.fixture
def auth_headers():
    """Bearer headers for a member id."""
    def _headers(member_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(member_id)}"}
    return _headers
