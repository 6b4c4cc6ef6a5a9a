from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel
from stafftrack.models.enums import AppRole


class PermissionsRead(BaseModel):
    user_id: UUID
    role: Optional[AppRole] = None
    role_label: str
    is_admin: bool
    department_access: List[str] = []
    department_edit_access: List[str] = []
    views: List[str] = []
    editable_tables: List[str] = []
    can_delete: bool = False


class NavigationRequest(BaseModel):
    active_view: str = "dashboard"
    requested_view: Optional[str] = None


class ScreenRead(BaseModel):
    kind: str
    view: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    contact_email: Optional[str] = None


class NavigationRead(BaseModel):
    active_view: str
    redirected: bool
    screen: ScreenRead
