"""Operator authentication.

The shop runs with one shared access key. Presenting it, either directly as
the bearer credential or in exchange for a short-lived session token from
``/auth/verify``, yields an ``OperatorContext`` that order routes require.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import secrets
import uuid

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request

from isopod_orders.application.schemas import AccessKeyIn, SessionToken
from isopod_orders.core.logging_config import get_logger, set_request_context
from isopod_orders.core_settings import Settings, get_settings
from isopod_orders.domain.errors import UnauthorizedError

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "
SESSION_SUBJECT = "operator"


@dataclass(frozen=True)
class OperatorContext:
    """Capability handed to every order route once the caller is authenticated."""
    session_id: str
    via: str  # "access_key" or "session"
    expires_at: Optional[datetime] = None


def _key_matches(candidate: Optional[str], settings: Settings) -> bool:
    if not settings.APP_ACCESS_KEY:
        logger.error("APP_ACCESS_KEY is not set; rejecting every credential")
        return False
    if not candidate:
        return False
    return secrets.compare_digest(candidate.encode(), settings.APP_ACCESS_KEY.encode())


def issue_session(key: Optional[str], settings: Settings, now: Optional[datetime] = None) -> SessionToken:
    if not _key_matches(key, settings):
        raise UnauthorizedError("Invalid access key")
    now = now or datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=settings.SESSION_TTL_MINUTES)
    payload = {"sub": SESSION_SUBJECT, "jti": uuid.uuid4().hex, "iat": now, "exp": expires_at}
    token = jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.SESSION_ALG)
    return SessionToken(
        success=True,
        message="Authentication successful",
        access_token=token,
        expires_at=expires_at,
    )


def authenticate(authorization: Optional[str], settings: Settings) -> OperatorContext:
    """Resolve an ``Authorization`` header value to an operator context."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthorizedError()

    if _key_matches(token, settings):
        return OperatorContext(session_id="access-key", via="access_key")

    try:
        claims = jwt.decode(token, settings.SESSION_SECRET, algorithms=[settings.SESSION_ALG])
    except jwt.PyJWTError:
        raise UnauthorizedError()
    if claims.get("sub") != SESSION_SUBJECT:
        raise UnauthorizedError()
    return OperatorContext(
        session_id=claims.get("jti", ""),
        via="session",
        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )


async def require_operator(request: Request, settings: Settings = Depends(get_settings)) -> OperatorContext:
    # Runs on the event loop so the operator context var reaches the route and its logs
    try:
        context = authenticate(request.headers.get("Authorization"), settings)
    except UnauthorizedError as exc:
        raise HTTPException(
            status_code=401,
            detail={"error": "Unauthorized", "message": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )
    set_request_context(operator=context.session_id)
    return context


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/verify", response_model=SessionToken)
def verify(payload: AccessKeyIn, settings: Settings = Depends(get_settings)):
    """Exchange the shared access key for a session token."""
    try:
        return issue_session(payload.key, settings)
    except UnauthorizedError as exc:
        raise HTTPException(status_code=401, detail={"success": False, "message": exc.message})
