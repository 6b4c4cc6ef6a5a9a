import uuid
import pytest
from unittest.mock import patch
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from stafftrack.core.database import AsyncSessionLocal
from stafftrack.core.role_loader import StoreUnavailableError
from stafftrack.models.enums import AppRole
from stafftrack.schemas.user_role import RoleRecord, RoleRecordUpsert
from stafftrack.services.role_service import (
    delete_role_record,
    fetch_role_record,
    list_role_records,
    make_role_fetcher,
    upsert_role_record,
)


@pytest.mark.asyncio
async def test_fetch_missing_record_returns_none(db_session):
    assert await fetch_role_record(db_session, uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_fetch_existing_record(db_session, add_role):
    stored = await add_role(AppRole.AccountManager, ["Account Manager"], ["Account Manager"])

    record = await fetch_role_record(db_session, stored.user_id)
    assert record.user_id == stored.user_id
    assert record.role == AppRole.AccountManager
    assert record.department_access == ["Account Manager"]
    assert record.department_edit_access == ["Account Manager"]


@pytest.mark.asyncio
async def test_fetch_record_without_role(db_session, add_role):
    stored = await add_role(None, ["Finance"])
    record = await fetch_role_record(db_session, stored.user_id)
    assert record is not None
    assert record.role is None


@pytest.mark.asyncio
async def test_fetch_wraps_storage_errors(db_session):
    error = OperationalError("SELECT", {}, Exception("server closed the connection"))
    with patch.object(db_session, "execute", side_effect=error):
        with pytest.raises(StoreUnavailableError):
            await fetch_role_record(db_session, uuid.uuid4())


@pytest.mark.asyncio
async def test_fetcher_opens_its_own_session(db_session, add_role):
    stored = await add_role(AppRole.Finance, ["Finance"])
    fetch = make_role_fetcher(AsyncSessionLocal)

    record = await fetch(stored.user_id)
    assert record.role == AppRole.Finance
    assert await fetch(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_upsert_creates_then_updates(db_session):
    user_id = uuid.uuid4()

    created = await upsert_role_record(
        db_session, user_id,
        RoleRecordUpsert(role=AppRole.Recruiter, department_access=["Recruiter"]),
    )
    assert created.role == AppRole.Recruiter

    updated = await upsert_role_record(
        db_session, user_id,
        RoleRecordUpsert(
            role=AppRole.Operations,
            department_access=["Operations Manager"],
            department_edit_access=["Operations Manager"],
        ),
    )
    assert updated.id == created.id
    assert updated.role == AppRole.Operations
    assert updated.department_edit_access == ["Operations Manager"]

    records = await list_role_records(db_session)
    assert len(records) == 1


@pytest.mark.asyncio
async def test_delete_role_record(db_session, add_role):
    stored = await add_role(AppRole.Viewer)
    await delete_role_record(db_session, stored.user_id)
    assert await fetch_role_record(db_session, stored.user_id) is None

    with pytest.raises(ValueError):
        await delete_role_record(db_session, stored.user_id)


def test_upsert_rejects_blank_department_labels():
    with pytest.raises(ValueError):
        RoleRecordUpsert(role=AppRole.Viewer, department_access=["  "])


@pytest.mark.asyncio
async def test_fetch_unrecognised_stored_role_is_denied(db_session, add_role):
    stored = await add_role(AppRole.Finance, ["Finance"])
    await db_session.execute(text("UPDATE user_roles SET role = 'superuser'"))
    await db_session.commit()
    db_session.expire_all()

    assert await fetch_role_record(db_session, stored.user_id) is None


def test_unrecognised_role_value_reads_as_absent():
    record = RoleRecord(id=uuid.uuid4(), user_id=uuid.uuid4(), role="superuser")
    assert record.role is None
