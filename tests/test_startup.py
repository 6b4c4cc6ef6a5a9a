import uuid
import pytest
from unittest.mock import patch

from stafftrack.core.config import settings
from stafftrack.main import run, seed_super_admin
from stafftrack.models.enums import AppRole
from stafftrack.services.role_service import fetch_role_record


@pytest.mark.asyncio
async def test_seed_creates_admin_record(db_session):
    user_id = uuid.uuid4()
    with patch.object(settings, "SUPER_ADMIN_USER_ID", str(user_id)):
        await seed_super_admin()

    record = await fetch_role_record(db_session, user_id)
    assert record.role == AppRole.Admin
    assert record.department_access == []


@pytest.mark.asyncio
async def test_seed_promotion_keeps_department_grants(db_session, add_role):
    stored = await add_role(AppRole.Finance, ["Finance"], ["Finance"])

    with patch.object(settings, "SUPER_ADMIN_USER_ID", str(stored.user_id)):
        await seed_super_admin()

    db_session.expire_all()
    record = await fetch_role_record(db_session, stored.user_id)
    assert record.role == AppRole.Admin
    assert record.department_access == ["Finance"]
    assert record.department_edit_access == ["Finance"]


@pytest.mark.asyncio
async def test_seed_skipped_without_configured_admin(db_session):
    with patch.object(settings, "SUPER_ADMIN_USER_ID", None):
        await seed_super_admin()


def test_run_serves_app_with_configured_address():
    with patch("stafftrack.main.uvicorn.run") as mock_run, \
         patch.object(settings, "ENV", "prod"), \
         patch.object(settings, "PORT", 9100):
        run()

    mock_run.assert_called_once_with(
        "stafftrack.main:app", host=settings.HOST, port=9100, reload=False,
    )
