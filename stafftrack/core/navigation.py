# stafftrack/core/navigation.py

from enum import Enum
from typing import NamedTuple, Optional, Tuple, Union

from loguru import logger

from stafftrack.core.authz import DASHBOARD_VIEW, Authorizer, identifier_value

# ==========================================================
# PLACEHOLDER COPY
# ==========================================================
LOADING_MESSAGE = "Loading permissions..."
ACCESS_RESTRICTED_TITLE = "Access Restricted"
ACCESS_RESTRICTED_MESSAGE = (
    "You don't have permission to view this section. "
    "Contact your administrator for access."
)
NO_ROLE_TITLE = "No Role Assigned"
NO_ROLE_MESSAGE = (
    "Your account doesn't have a role assigned yet. "
    "Please contact your administrator to get access."
)


class ScreenKind(str, Enum):
    Loading = "loading"
    NoRole = "no_role"
    AccessRestricted = "access_restricted"
    View = "view"


class Screen(NamedTuple):
    kind: ScreenKind
    view: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    contact_email: Optional[str] = None


class AuthzSnapshot(NamedTuple):
    """What the guard knows about the actor at one point in time."""

    authorizer: Authorizer
    loading: bool = False
    error: Optional[Exception] = None

    @property
    def has_role(self) -> bool:
        return self.authorizer.role is not None

    def can_access_view(self, view_id: str) -> bool:
        return self.authorizer.can_access_view(view_id)


LOADING_SNAPSHOT = AuthzSnapshot(Authorizer(), loading=True)


class NavigationState(NamedTuple):
    active_view: str = DASHBOARD_VIEW


# ------------------------------------------------------------
# Events
# ------------------------------------------------------------
class ViewRequested(NamedTuple):
    view_id: str


class RoleDataUpdated(NamedTuple):
    snapshot: AuthzSnapshot


NavigationEvent = Union[ViewRequested, RoleDataUpdated]


# ------------------------------------------------------------
# Pure transition functions
# ------------------------------------------------------------
def transition(state: NavigationState, snapshot: AuthzSnapshot) -> NavigationState:
    """Forces a denied selection back to the dashboard once role data is known."""
    if snapshot.loading:
        return state
    if state.active_view != DASHBOARD_VIEW and not snapshot.can_access_view(state.active_view):
        return NavigationState(DASHBOARD_VIEW)
    return state


def apply_event(
    state: NavigationState, snapshot: AuthzSnapshot, event: NavigationEvent
) -> Tuple[NavigationState, AuthzSnapshot]:
    if isinstance(event, ViewRequested):
        state = NavigationState(identifier_value(event.view_id))
    elif isinstance(event, RoleDataUpdated):
        snapshot = event.snapshot
    else:
        raise TypeError(f"Unknown navigation event: {event!r}")
    return transition(state, snapshot), snapshot


def resolve_screen(
    state: NavigationState,
    snapshot: AuthzSnapshot,
    contact_email: Optional[str] = None,
) -> Screen:
    """
    Decides what may be rendered for the current selection.
    A denied selection is never shown, even before the redirect lands.
    """
    if snapshot.loading:
        return Screen(ScreenKind.Loading, message=LOADING_MESSAGE)
    if not snapshot.has_role:
        return Screen(
            ScreenKind.NoRole,
            title=NO_ROLE_TITLE,
            message=NO_ROLE_MESSAGE,
            contact_email=contact_email,
        )
    if state.active_view != DASHBOARD_VIEW and not snapshot.can_access_view(state.active_view):
        return Screen(
            ScreenKind.AccessRestricted,
            view=state.active_view,
            title=ACCESS_RESTRICTED_TITLE,
            message=ACCESS_RESTRICTED_MESSAGE,
        )
    return Screen(ScreenKind.View, view=state.active_view)


class NavigationGuard:
    """
    Owns the active view of one dashboard session.

    Navigation requests are intents only: the guard applies them and then
    re-validates, so a denied view never stays selected.
    """

    def __init__(
        self,
        snapshot: AuthzSnapshot = LOADING_SNAPSHOT,
        contact_email: Optional[str] = None,
    ):
        self._state = NavigationState()
        self._snapshot = snapshot
        self._contact_email = contact_email

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def snapshot(self) -> AuthzSnapshot:
        return self._snapshot

    @property
    def active_view(self) -> str:
        return self._state.active_view

    def dispatch(self, event: NavigationEvent) -> NavigationState:
        if isinstance(event, ViewRequested):
            requested = identifier_value(event.view_id)
        else:
            requested = self._state.active_view
        self._state, self._snapshot = apply_event(self._state, self._snapshot, event)
        if self._state.active_view != requested:
            logger.info(f"Navigation guard redirected '{requested}' -> '{self._state.active_view}'")
        return self._state

    def request_view(self, view_id: str) -> NavigationState:
        return self.dispatch(ViewRequested(view_id))

    def update_role_data(self, snapshot: AuthzSnapshot) -> NavigationState:
        return self.dispatch(RoleDataUpdated(snapshot))

    def is_denied(self) -> bool:
        return self.screen().kind in (ScreenKind.AccessRestricted, ScreenKind.NoRole)

    def screen(self) -> Screen:
        return resolve_screen(self._state, self._snapshot, self._contact_email)
