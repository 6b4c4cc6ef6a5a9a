# stafftrack/core/session.py

from typing import Optional, Tuple
from uuid import UUID

from stafftrack.core.authz import Authorizer
from stafftrack.core.navigation import AuthzSnapshot, NavigationGuard, Screen
from stafftrack.core.policy import DEFAULT_POLICY, PolicyTables
from stafftrack.core.role_loader import (
    LoadStatus,
    RoleFetcher,
    RoleRecordLoader,
    StoreUnavailableError,
)
from stafftrack.models.enums import AppRole


class DashboardSession:
    """
    One signed-in dashboard session: loader, engine and guard wired together.

    The identity collaborator calls on_actor_changed() on sign-in, sign-out
    and account switch. Views ask can_* and screen(); navigation goes through
    request_view().
    """

    def __init__(
        self,
        fetch: RoleFetcher,
        policy: PolicyTables = DEFAULT_POLICY,
        contact_email: Optional[str] = None,
    ):
        self._policy = policy
        self._identity_known = False
        self._loader = RoleRecordLoader(fetch)
        self._authorizer = Authorizer(policy=policy)
        self._guard = NavigationGuard(self._snapshot(), contact_email=contact_email)
        self._loader.subscribe(self._on_role_data)

    # ------------------------------------------------------------
    # Role data
    # ------------------------------------------------------------
    def _snapshot(self) -> AuthzSnapshot:
        return AuthzSnapshot(
            self._authorizer,
            loading=not self._identity_known or self._loader.is_loading,
            error=self._loader.error,
        )

    def _on_role_data(self) -> None:
        self._authorizer = Authorizer.from_record(self._loader.record, self._policy)
        self._guard.update_role_data(self._snapshot())

    async def _load(self, refresh: bool = False) -> LoadStatus:
        try:
            if refresh:
                await self._loader.refresh()
            else:
                await self._loader.load()
        except StoreUnavailableError:
            # recorded on the loader as Failed; the guard keeps showing "loading"
            return self._loader.status
        return self._loader.status

    async def on_actor_changed(self, actor_id: Optional[UUID]) -> LoadStatus:
        first = not self._identity_known
        self._identity_known = True
        changed = self._loader.set_actor(actor_id)
        if first and not changed:
            self._on_role_data()
        return await self._load()

    async def refresh(self) -> LoadStatus:
        """Re-reads the role record after an administrative change."""
        return await self._load(refresh=True)

    # ------------------------------------------------------------
    # Exposed to views
    # ------------------------------------------------------------
    @property
    def authorizer(self) -> Authorizer:
        return self._authorizer

    @property
    def load_error(self) -> Optional[StoreUnavailableError]:
        return self._loader.error

    def is_loading(self) -> bool:
        return self._snapshot().loading

    def current_role(self) -> Optional[AppRole]:
        return self._authorizer.role

    def current_departments(self) -> Tuple[str, ...]:
        return self._authorizer.department_access

    def can_access_view(self, view_id) -> bool:
        return self._authorizer.can_access_view(view_id)

    def can_edit(self, table_id) -> bool:
        return self._authorizer.can_edit(table_id)

    def can_delete(self, table_id=None) -> bool:
        return self._authorizer.can_delete(table_id)

    # ------------------------------------------------------------
    # Exposed to navigation
    # ------------------------------------------------------------
    @property
    def active_view(self) -> str:
        return self._guard.active_view

    def request_view(self, view_id) -> str:
        return self._guard.request_view(view_id).active_view

    def screen(self) -> Screen:
        return self._guard.screen()
