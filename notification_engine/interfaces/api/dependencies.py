"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from notification_engine.application.services import (
    ChannelDispatcher,
    PreferenceCache,
    PriorityClassifier,
    build_priority_classifier,
)
from notification_engine.application.use_cases.notifications import build_default_dispatcher
from notification_engine.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def _unauthorized(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_user_id(token: str | None) -> str:
    """Return the ``sub`` claim of a bearer token or raise a 401."""

    if not token:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise _unauthorized()
    return subject


def get_current_user_id(token: str | None = Depends(oauth2_scheme)) -> str:
    """Return the identifier of the authenticated user."""

    return resolve_user_id(token)


def get_preference_cache(request: Request) -> PreferenceCache:
    """Return the preference cache owned by the running application."""

    cache = getattr(request.app.state, "preference_cache", None)
    if cache is None:
        cache = PreferenceCache()
        request.app.state.preference_cache = cache
    return cache


def get_priority_classifier() -> PriorityClassifier:
    return build_priority_classifier()


def get_channel_dispatcher() -> ChannelDispatcher:
    return build_default_dispatcher()
