# stafftrack/core/rbac.py

from fastapi import Depends, HTTPException, status
from stafftrack.api.deps import get_current_authorizer
from stafftrack.core.authz import Authorizer, identifier_value


def _deny(detail: str):
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def RequireView(view_id):
    """Route dependency: the actor must be able to open `view_id`."""
    view = identifier_value(view_id)

    async def view_checker(authz: Authorizer = Depends(get_current_authorizer)):
        if not authz.can_access_view(view):
            raise _deny(f"Access denied to view '{view}'")
        return authz

    return view_checker


def RequireEdit(table_id):
    """Route dependency: the actor must hold an edit grant on `table_id`."""
    table = identifier_value(table_id)

    async def edit_checker(authz: Authorizer = Depends(get_current_authorizer)):
        if not authz.can_edit(table):
            raise _deny(f"Edit access denied for '{table}'")
        return authz

    return edit_checker


def RequireDelete(table_id):
    """Route dependency: deletion is admin-only for every table."""
    table = identifier_value(table_id)

    async def delete_checker(authz: Authorizer = Depends(get_current_authorizer)):
        if not authz.can_delete(table):
            raise _deny(f"Only administrators can delete from '{table}'")
        return authz

    return delete_checker
