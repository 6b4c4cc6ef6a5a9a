# stafftrack/api/endpoints/me.py

from uuid import UUID

from fastapi import APIRouter, Depends

from stafftrack.api.deps import get_current_actor_id, get_current_authorizer
from stafftrack.core.authz import Authorizer
from stafftrack.core.config import settings
from stafftrack.core.navigation import AuthzSnapshot, NavigationGuard
from stafftrack.models.enums import format_role
from stafftrack.schemas.permissions import (
    NavigationRead,
    NavigationRequest,
    PermissionsRead,
    ScreenRead,
)

router = APIRouter(prefix="/api/me", tags=["Me"])


# -------------------------------------------------------------------
# Everything the dashboard shell needs to build the sidebar
# -------------------------------------------------------------------
@router.get("/permissions", response_model=PermissionsRead)
async def my_permissions(
    actor_id: UUID = Depends(get_current_actor_id),
    authz: Authorizer = Depends(get_current_authorizer),
):
    return PermissionsRead(
        user_id=actor_id,
        role=authz.role,
        role_label=format_role(authz.role),
        is_admin=authz.is_admin,
        department_access=list(authz.department_access),
        department_edit_access=list(authz.department_edit_access),
        views=authz.accessible_views(),
        editable_tables=authz.editable_tables(),
        can_delete=authz.can_delete(),
    )


# -------------------------------------------------------------------
# Run one navigation request through the guard
# -------------------------------------------------------------------
@router.post("/navigation", response_model=NavigationRead)
async def navigate(
    payload: NavigationRequest,
    authz: Authorizer = Depends(get_current_authorizer),
):
    """
    Re-validates the client's current view against fresh role data and,
    when given, applies the requested view. The client must render the
    returned screen, never the view it asked for.
    """
    guard = NavigationGuard(
        AuthzSnapshot(authz), contact_email=settings.ADMIN_CONTACT_EMAIL
    )
    state = guard.request_view(payload.active_view)
    if payload.requested_view is not None:
        state = guard.request_view(payload.requested_view)

    target = payload.requested_view if payload.requested_view is not None else payload.active_view
    screen = guard.screen()

    return NavigationRead(
        active_view=state.active_view,
        redirected=state.active_view != target,
        screen=ScreenRead(
            kind=screen.kind.value,
            view=screen.view,
            title=screen.title,
            message=screen.message,
            contact_email=screen.contact_email,
        ),
    )
