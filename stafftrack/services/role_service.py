# stafftrack/services/role_service.py

from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from stafftrack.core.role_loader import RoleFetcher, StoreUnavailableError
from stafftrack.models.user_role import UserRoleRecord
from stafftrack.schemas.user_role import RoleRecord, RoleRecordUpsert


# ============================================================================
# FETCH ROLE RECORD (read path used by the loader)
# ============================================================================
async def fetch_role_record(session: AsyncSession, user_id: UUID) -> Optional[RoleRecord]:
    """
    Returns the actor's role record, or None when they have none.
    Storage failures raise StoreUnavailableError.
    """
    try:
        result = await session.execute(
            select(UserRoleRecord).where(UserRoleRecord.user_id == user_id)
        )
        row = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        raise StoreUnavailableError(f"Could not read role record: {e}") from e
    except LookupError as e:
        # stored role is outside the app_role enum; deny like a missing record
        logger.warning(f"Unrecognised role stored for {user_id}: {e}")
        return None

    if row is None:
        return None
    return RoleRecord.model_validate(row)


def make_role_fetcher(session_factory: Callable) -> RoleFetcher:
    """Binds fetch_role_record to a session factory, one session per read."""

    async def fetch(user_id: UUID) -> Optional[RoleRecord]:
        try:
            async with session_factory() as session:
                return await fetch_role_record(session, user_id)
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(f"Could not open role store session: {e}") from e

    return fetch


# ============================================================================
# ADMIN OPERATIONS
# ============================================================================
async def list_role_records(session: AsyncSession) -> List[UserRoleRecord]:
    result = await session.execute(
        select(UserRoleRecord).order_by(UserRoleRecord.created_at.asc())
    )
    return result.scalars().all()


async def get_role_record(session: AsyncSession, user_id: UUID) -> Optional[UserRoleRecord]:
    result = await session.execute(
        select(UserRoleRecord).where(UserRoleRecord.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def upsert_role_record(
    session: AsyncSession,
    user_id: UUID,
    data: RoleRecordUpsert,
) -> UserRoleRecord:
    record = await get_role_record(session, user_id)

    if record is None:
        record = UserRoleRecord(user_id=user_id)
        logger.info(f"Creating role record for {user_id}")
    else:
        logger.info(f"Updating role record for {user_id}")

    record.role = data.role
    record.department_access = list(data.department_access)
    record.department_edit_access = list(data.department_edit_access)
    record.updated_at = datetime.now(timezone.utc)

    session.add(record)

    try:
        await session.commit()
        await session.refresh(record)
        return record

    except IntegrityError:
        await session.rollback()
        raise ValueError("Failed to save role record")


async def delete_role_record(session: AsyncSession, user_id: UUID) -> None:
    record = await get_role_record(session, user_id)

    if not record:
        raise ValueError("Role record not found")

    await session.delete(record)
    await session.commit()
    logger.info(f"Deleted role record for {user_id}")
