import os
import uuid
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# This must be done BEFORE importing stafftrack.main so config.py and
# database.py pick up the in-memory database.
# ------------------------------------------------------------------
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["ENV"] = "test"
os.environ.pop("POLICY_FILE", None)
os.environ.pop("SUPER_ADMIN_USER_ID", None)

from stafftrack.main import app
from stafftrack.core.database import AsyncSessionLocal, engine, init_db
from stafftrack.core.security import create_access_token
from stafftrack.models.user_role import UserRoleRecord


@pytest_asyncio.fixture
async def db_session():
    """Fresh in-memory schema per test."""
    await init_db()
    async with AsyncSessionLocal() as session:
        yield session
    # closes the shared in-memory connection, dropping all data
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    def make(user_id):
        token = create_access_token(subject=str(user_id))
        return {"Authorization": f"Bearer {token}"}
    return make


@pytest.fixture
def add_role(db_session):
    async def add(role=None, department_access=(), department_edit_access=(), user_id=None):
        record = UserRoleRecord(
            user_id=user_id or uuid.uuid4(),
            role=role,
            department_access=list(department_access),
            department_edit_access=list(department_edit_access),
        )
        db_session.add(record)
        await db_session.commit()
        await db_session.refresh(record)
        return record
    return add
