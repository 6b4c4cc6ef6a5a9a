# stafftrack/core/role_loader.py

from enum import Enum
from typing import Awaitable, Callable, List, Optional
from uuid import UUID

from loguru import logger

from stafftrack.schemas.user_role import RoleRecord


class StoreUnavailableError(Exception):
    """The role store could not be reached. Never used for "no record"."""


class LoadStatus(str, Enum):
    Idle = "idle"          # no signed-in actor
    Loading = "loading"
    Ready = "ready"        # record known (possibly None)
    Failed = "failed"      # transport error, still unresolved


RoleFetcher = Callable[[UUID], Awaitable[Optional[RoleRecord]]]


class RoleRecordLoader:
    """
    Resolves and caches the role record of the current actor.

    Every actor change or refresh bumps a generation counter. A fetch that
    completes under an older generation is dropped on arrival, so the last
    applied result always belongs to the current actor.
    """

    def __init__(self, fetch: RoleFetcher):
        self._fetch = fetch
        self._actor_id: Optional[UUID] = None
        self._generation = 0
        self._status = LoadStatus.Idle
        self._record: Optional[RoleRecord] = None
        self._error: Optional[StoreUnavailableError] = None
        self._listeners: List[Callable[[], None]] = []

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------
    @property
    def actor_id(self) -> Optional[UUID]:
        return self._actor_id

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def status(self) -> LoadStatus:
        return self._status

    @property
    def record(self) -> Optional[RoleRecord]:
        return self._record

    @property
    def error(self) -> Optional[StoreUnavailableError]:
        return self._error

    @property
    def is_loading(self) -> bool:
        # a failed load is unresolved, not a denial
        return self._status in (LoadStatus.Loading, LoadStatus.Failed)

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # ------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------
    def set_actor(self, actor_id: Optional[UUID]) -> bool:
        """Switches to a new actor. Returns False when nothing changed."""
        if actor_id == self._actor_id:
            return False
        logger.debug(f"Role loader: actor changed {self._actor_id} -> {actor_id}")
        self._actor_id = actor_id
        self._invalidate()
        return True

    def _invalidate(self) -> None:
        self._generation += 1
        self._record = None
        self._error = None
        self._status = LoadStatus.Loading if self._actor_id else LoadStatus.Idle
        self._notify()

    async def load(self) -> Optional[RoleRecord]:
        """
        Returns the current actor's record, fetching it on a cache miss.
        Raises StoreUnavailableError on transport failure.

        Each fetch takes a fresh generation, so only the latest load applies
        its result. Earlier loads still in flight return None.
        """
        actor_id = self._actor_id
        if actor_id is None:
            return None
        if self._status == LoadStatus.Ready:
            return self._record

        self._generation += 1
        generation = self._generation
        self._status = LoadStatus.Loading

        try:
            record = await self._fetch(actor_id)
        except StoreUnavailableError as e:
            if generation != self._generation:
                logger.debug(f"Discarding stale role load failure for {actor_id}")
                return None
            logger.error(f"Role record load failed for {actor_id}: {e}")
            self._error = e
            self._status = LoadStatus.Failed
            self._notify()
            raise

        if generation != self._generation:
            logger.debug(
                f"Discarding stale role record for {actor_id} "
                f"(generation {generation}, current {self._generation})"
            )
            return None

        self._record = record
        self._error = None
        self._status = LoadStatus.Ready
        logger.debug(
            f"Role record loaded for {actor_id}: "
            f"{record.role.value if record and record.role else None}"
        )
        self._notify()
        return record

    async def refresh(self) -> Optional[RoleRecord]:
        """Drops the cached record and fetches it again."""
        self._invalidate()
        return await self.load()
