from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_now, get_strava_client, get_user_id
from app.core.config import settings
from app.core.errors import (
    AuthorizationExpiredError,
    NotConnectedError,
    StravaAPIError,
    SyncTooSoonError,
)
from app.db import get_db
from app.schemas.strava import StravaStatus, SyncImportResult, SyncPreview, SyncWindow
from app.services import strava_sync
from app.services.strava_client import StravaClient, authorization_url

router = APIRouter(prefix="/strava", tags=["strava"])


def _to_http(e: Exception) -> HTTPException:
    """Translate a domain error from the sync service into an HTTP error."""
    if isinstance(e, (NotConnectedError, AuthorizationExpiredError)):
        return HTTPException(status_code=401, detail=str(e))
    if isinstance(e, SyncTooSoonError):
        return HTTPException(
            status_code=429,
            detail=str(e),
            headers={"Retry-After": str(e.retry_after_seconds)},
        )
    # StravaAPIError
    return HTTPException(status_code=503 if e.retryable else 502, detail=str(e))


def _redirect_uri() -> str:
    return settings.strava_redirect_uri or f"{settings.app_url.rstrip('/')}/api/strava/callback"


@router.get("/auth_url")
def get_auth_url():
    if not settings.strava_client_id:
        raise HTTPException(status_code=400, detail="Strava client not configured")
    return {"url": authorization_url(_redirect_uri())}


@router.get("/callback", response_model=StravaStatus)
def oauth_callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    client: StravaClient = Depends(get_strava_client),
):
    if error:
        # User denied authorization on the Strava page
        raise HTTPException(status_code=400, detail=f"Strava authorization denied: {error}")
    if not code:
        raise HTTPException(status_code=400, detail="Missing authorization code")
    if not (settings.strava_client_id and settings.strava_client_secret):
        raise HTTPException(status_code=400, detail="Strava client not configured")
    try:
        tok = client.exchange_token(code)
        row = strava_sync.save_tokens(db, user_id, tok)
    except StravaAPIError as e:
        raise _to_http(e)
    return StravaStatus(connected=True, athlete_id=row.athlete_id, last_synced_at=row.last_synced_at)


@router.get("/status", response_model=StravaStatus)
def strava_status(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    row = strava_sync.get_token(db, user_id)
    if not row:
        return StravaStatus(connected=False)
    return StravaStatus(connected=True, athlete_id=row.athlete_id, last_synced_at=row.last_synced_at)


@router.delete("/connection")
def disconnect(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    strava_sync.disconnect(db, user_id)
    return {"success": True}


@router.post("/sync", response_model=SyncPreview)
def sync_preview(
    window: Optional[SyncWindow] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    client: StravaClient = Depends(get_strava_client),
    now: datetime = Depends(get_now),
):
    """Fetch and map Strava activities without storing them."""
    window = window or SyncWindow()
    try:
        acts = strava_sync.fetch_mapped_activities(
            db, user_id, client, now, after=window.after, before=window.before
        )
    except (NotConnectedError, AuthorizationExpiredError, StravaAPIError) as e:
        raise _to_http(e)
    return SyncPreview(count=len(acts), activities=acts)


@router.post("/sync_import", response_model=SyncImportResult)
def sync_and_import(
    window: Optional[SyncWindow] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    client: StravaClient = Depends(get_strava_client),
    now: datetime = Depends(get_now),
):
    """Fetch Strava activities and reconcile them into the activity store."""
    window = window or SyncWindow()
    try:
        return strava_sync.sync_and_import(
            db, user_id, client, now, after=window.after, before=window.before
        )
    except (NotConnectedError, AuthorizationExpiredError, StravaAPIError, SyncTooSoonError) as e:
        raise _to_http(e)


@router.get("/athlete")
def get_athlete(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    client: StravaClient = Depends(get_strava_client),
    now: datetime = Depends(get_now),
):
    # Athlete info is optional; any failure returns null
    return strava_sync.get_athlete(db, user_id, client, now)
