# stafftrack/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

import jwt
from stafftrack.core.config import settings

# Tokens are minted by the hosted auth provider with its shared secret
ALGORITHM = "HS256"
DEFAULT_EXPIRE_MINUTES = 60


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    data: Optional[dict] = None
) -> str:
    """
    Mints a token shaped like the provider's (sub = actor id).
    Used for local development and tests.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=DEFAULT_EXPIRE_MINUTES))

    to_encode = {
        "sub": str(subject),
        "exp": expire,
        "iat": now,
    }
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE

    if data:
        to_encode.update(data)

    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Raises jwt.InvalidTokenError (incl. ExpiredSignatureError) on bad tokens."""
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        options={"verify_exp": True, "verify_aud": bool(settings.JWT_AUDIENCE)},
    )
