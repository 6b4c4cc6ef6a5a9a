# stafftrack/api/deps.py

from functools import lru_cache
from typing import AsyncGenerator
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from stafftrack.core.authz import Authorizer
from stafftrack.core.config import settings
from stafftrack.core.database import get_session
from stafftrack.core.policy import PolicyTables, load_policy
from stafftrack.core.role_loader import RoleRecordLoader, StoreUnavailableError
from stafftrack.core.security import decode_token
from stafftrack.services.role_service import fetch_role_record


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=False)


# ------------------------------------------------------------
# DB Session
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


# ------------------------------------------------------------
# Policy tables (loaded once per process)
# ------------------------------------------------------------
@lru_cache
def get_policy() -> PolicyTables:
    return load_policy(settings.POLICY_FILE)


# ------------------------------------------------------------
# Current actor from the provider's JWT
# ------------------------------------------------------------
async def get_current_actor_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> UUID:
    if credentials is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Could not validate credentials")

    try:
        return UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token payload")


# ------------------------------------------------------------
# Authorizer for the current actor
# ------------------------------------------------------------
async def get_current_authorizer(
    actor_id: UUID = Depends(get_current_actor_id),
    session: AsyncSession = Depends(get_db_session),
    policy: PolicyTables = Depends(get_policy),
) -> Authorizer:
    """
    No record -> an Authorizer with no role (denies everything).
    Store failure -> 503, never a denial.
    """

    async def fetch(user_id: UUID):
        return await fetch_role_record(session, user_id)

    loader = RoleRecordLoader(fetch)
    loader.set_actor(actor_id)

    try:
        record = await loader.load()
    except StoreUnavailableError:
        logger.error(f"Role store unavailable while resolving {actor_id}")
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, "Role service unavailable")

    return Authorizer.from_record(record, policy)
