# stafftrack/api/endpoints/roles.py

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from stafftrack.api.deps import get_db_session
from stafftrack.core.authz import Authorizer
from stafftrack.core.rbac import RequireDelete, RequireEdit, RequireView
from stafftrack.models.enums import Table, View
from stafftrack.schemas.user_role import RoleRecord, RoleRecordUpsert
from stafftrack.services.role_service import (
    delete_role_record,
    get_role_record,
    list_role_records,
    upsert_role_record,
)

router = APIRouter(prefix="/api/roles", tags=["Roles"])


# -------------------------------------------------------------------
# List role records (admin view)
# -------------------------------------------------------------------
@router.get("/", response_model=List[RoleRecord])
async def list_roles(
    session: AsyncSession = Depends(get_db_session),
    _: Authorizer = Depends(RequireView(View.Admin)),
):
    return await list_role_records(session)


# -------------------------------------------------------------------
# Read one role record
# -------------------------------------------------------------------
@router.get("/{user_id}", response_model=RoleRecord)
async def read_role(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: Authorizer = Depends(RequireView(View.Admin)),
):
    record = await get_role_record(session, user_id)
    if not record:
        raise HTTPException(status_code=404, detail="Role record not found")
    return record


# -------------------------------------------------------------------
# Create or update a role record
# -------------------------------------------------------------------
@router.put("/{user_id}", response_model=RoleRecord)
async def save_role(
    user_id: UUID,
    payload: RoleRecordUpsert,
    session: AsyncSession = Depends(get_db_session),
    _: Authorizer = Depends(RequireEdit(Table.UserRoles)),
):
    try:
        return await upsert_role_record(session, user_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# -------------------------------------------------------------------
# Delete a role record (admin only, like every delete)
# -------------------------------------------------------------------
@router.delete("/{user_id}")
async def remove_role(
    user_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    _: Authorizer = Depends(RequireDelete(Table.UserRoles)),
):
    try:
        await delete_role_record(session, user_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"detail": "Role record deleted successfully"}
