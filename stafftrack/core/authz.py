# stafftrack/core/authz.py

from typing import Iterable, List, Optional, Tuple

from stafftrack.core.policy import DEFAULT_POLICY, PolicyTables
from stafftrack.models.enums import AppRole, Table, View, parse_role
from stafftrack.schemas.user_role import RoleRecord

DASHBOARD_VIEW = View.Dashboard.value
ADMIN_VIEW = View.Admin.value


def identifier_value(identifier) -> str:
    # accepts View / Table members as well as raw strings
    return identifier.value if isinstance(identifier, (View, Table)) else str(identifier)


class Authorizer:
    """
    Pure decisions over (role, department_access, department_edit_access).

    - Admin bypasses every department check
    - No role (or an unrecognised one) means no access at all, not even the dashboard
    - Grants are a union over all of the actor's departments
    - Only admins delete
    """

    __slots__ = ("_policy", "_role", "_department_access", "_department_edit_access")

    def __init__(
        self,
        role: Optional[AppRole] = None,
        department_access: Iterable[str] = (),
        department_edit_access: Iterable[str] = (),
        policy: PolicyTables = DEFAULT_POLICY,
    ):
        self._policy = policy
        self._role = parse_role(role)
        self._department_access: Tuple[str, ...] = tuple(department_access or ())
        self._department_edit_access: Tuple[str, ...] = tuple(department_edit_access or ())

    @classmethod
    def from_record(
        cls, record: Optional[RoleRecord], policy: PolicyTables = DEFAULT_POLICY
    ) -> "Authorizer":
        if record is None:
            return cls(policy=policy)
        return cls(
            role=record.role,
            department_access=record.department_access,
            department_edit_access=record.department_edit_access,
            policy=policy,
        )

    # ------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------
    @property
    def role(self) -> Optional[AppRole]:
        return self._role

    @property
    def is_admin(self) -> bool:
        return self._role == AppRole.Admin

    @property
    def department_access(self) -> Tuple[str, ...]:
        return self._department_access

    @property
    def department_edit_access(self) -> Tuple[str, ...]:
        return self._department_edit_access

    # ------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------
    def can_access_view(self, view_id) -> bool:
        if self.is_admin:
            return True
        if not self._role:
            return False

        view_id = identifier_value(view_id)
        if view_id == DASHBOARD_VIEW:
            return True
        # role-gated, department grants never unlock it
        if view_id == ADMIN_VIEW:
            return False

        return any(view_id in self._policy.views_for(dept) for dept in self._department_access)

    def can_edit(self, table_id) -> bool:
        if self.is_admin:
            return True
        if not self._role:
            return False

        table_id = identifier_value(table_id)
        return any(
            table_id in self._policy.tables_for(dept) for dept in self._department_edit_access
        )

    def can_delete(self, table_id=None) -> bool:
        return self.is_admin

    # ------------------------------------------------------------
    # Sidebar helpers
    # ------------------------------------------------------------
    def accessible_views(self) -> List[str]:
        return [v.value for v in View if self.can_access_view(v)]

    def editable_tables(self) -> List[str]:
        return [t.value for t in Table if self.can_edit(t)]

    def __repr__(self) -> str:
        return (
            f"Authorizer(role={self._role.value if self._role else None!r}, "
            f"department_access={list(self._department_access)!r}, "
            f"department_edit_access={list(self._department_edit_access)!r})"
        )
