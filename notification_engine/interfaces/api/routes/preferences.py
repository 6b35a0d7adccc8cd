"""Endpoints for reading and updating notification preferences."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notification_engine.application.services import PreferenceCache
from notification_engine.application.use_cases.preferences import (
    get_preferences,
    update_preferences,
)
from notification_engine.infrastructure.database import get_db
from notification_engine.interfaces.api.dependencies import (
    get_current_user_id,
    get_preference_cache,
)
from notification_engine.interfaces.api.schemas import PreferenceRead, PreferenceUpdate

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=PreferenceRead)
def read_preferences(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    cache: PreferenceCache = Depends(get_preference_cache),
) -> PreferenceRead:
    """Return the effective preferences, falling back to the defaults."""

    return PreferenceRead.from_entity(get_preferences(db, user_id, cache=cache))


@router.patch("", response_model=PreferenceRead)
def patch_preferences(
    payload: PreferenceUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    cache: PreferenceCache = Depends(get_preference_cache),
) -> PreferenceRead:
    try:
        updated = update_preferences(db, user_id, payload.changes(), cache=cache)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Preferences are temporarily unavailable",
        ) from exc
    return PreferenceRead.from_entity(updated)
