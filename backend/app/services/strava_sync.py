"""
Strava token lifecycle and activity sync.

Tokens are checked client-side before each call and refreshed when expired.
A failed refresh deletes the stored token so the user has to re-authorize.
Fetched activities are mapped to goal types and units, then handed to the
reconciler.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import ACTIVITY_TYPE_MAPPING, STRAVA_ID_PREFIX
from app.core.errors import (
    AuthorizationExpiredError,
    NotConnectedError,
    StravaAPIError,
    SyncTooSoonError,
)
from app.core.time_utils import parse_activity_date, to_local_datetime
from app.core.units import meters_to_goal_units
from app.models.strava_token import StravaToken
from app.schemas.activity import ActivityImport
from app.schemas.strava import SyncImportResult
from app.services.reconcile import import_activities
from app.services.strava_client import StravaClient, is_token_expired

logger = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _activity_day(activity: dict) -> str:
    """Calendar day of a Strava activity as 'YYYY-MM-DD' ('' if unknown)."""
    local = activity.get("start_date_local")
    start = activity.get("start_date")
    try:
        if local:
            # start_date_local is wall-clock time with a misleading 'Z' suffix
            return parse_activity_date(local).isoformat()
        if start:
            dt = datetime.fromisoformat(start.replace("Z", "+00:00"))
            return to_local_datetime(dt, settings.timezone).date().isoformat()
    except ValueError:
        logger.warning("Unparseable start date on Strava activity %s", activity.get("id"))
    # An empty date is reported as a per-item error by the reconciler
    return ""


def map_strava_activity(activity: dict) -> Optional[ActivityImport]:
    """Map one Strava activity to an import item, or None if we don't track its type.

    Distances arrive in meters: running/cycling become km, swimming stays in m.
    """
    goal_type = ACTIVITY_TYPE_MAPPING.get(activity.get("type")) or ACTIVITY_TYPE_MAPPING.get(
        activity.get("sport_type")
    )
    if goal_type is None or activity.get("id") is None:
        return None
    return ActivityImport(
        id=f"{STRAVA_ID_PREFIX}{activity['id']}",
        goal_type=goal_type,
        distance=meters_to_goal_units(goal_type, float(activity.get("distance") or 0.0)),
        date=_activity_day(activity),
        notes=activity.get("name"),
    )


# --------- Tokens --------- #

def get_token(db: Session, user_id: str) -> Optional[StravaToken]:
    return db.query(StravaToken).filter(StravaToken.user_id == user_id).first()


def save_tokens(db: Session, user_id: str, tok: dict[str, Any]) -> StravaToken:
    """Store the token response of an authorization-code exchange."""
    if not tok.get("access_token") or not tok.get("refresh_token"):
        raise StravaAPIError("Invalid token response from Strava")
    athlete = tok.get("athlete") or {}
    row = get_token(db, user_id)
    if not row:
        row = StravaToken(user_id=user_id)
        db.add(row)
    row.access_token = tok["access_token"]
    row.refresh_token = tok["refresh_token"]
    row.expires_at = int(tok.get("expires_at") or 0)
    row.athlete_id = str(athlete["id"]) if athlete.get("id") is not None else None
    db.commit()
    db.refresh(row)
    logger.info("Strava linked for user %s (athlete %s)", user_id, row.athlete_id)
    return row


def disconnect(db: Session, user_id: str) -> bool:
    deleted = db.query(StravaToken).filter(StravaToken.user_id == user_id).delete()
    db.commit()
    if deleted:
        logger.info("Strava unlinked for user %s", user_id)
    return bool(deleted)


def get_valid_access_token(db: Session, user_id: str, client: StravaClient, now: datetime) -> str:
    """Return a usable access token, refreshing it first if it has expired."""
    row = get_token(db, user_id)
    if not row:
        raise NotConnectedError()
    if not is_token_expired(row.expires_at, now):
        return row.access_token

    try:
        refreshed = client.refresh_token(row.refresh_token)
        if not isinstance(refreshed, dict) or not refreshed.get("access_token") or not refreshed.get("refresh_token"):
            raise StravaAPIError("Invalid token response from Strava")
    except StravaAPIError as e:
        logger.warning("Strava token refresh failed for user %s: %s", user_id, e)
        disconnect(db, user_id)
        raise AuthorizationExpiredError() from e

    row.access_token = refreshed["access_token"]
    row.refresh_token = refreshed["refresh_token"]
    row.expires_at = int(refreshed.get("expires_at") or 0)
    db.commit()
    logger.info("Refreshed Strava token for user %s", user_id)
    return row.access_token


# --------- Sync --------- #

def fetch_mapped_activities(
    db: Session,
    user_id: str,
    client: StravaClient,
    now: datetime,
    after: Optional[int] = None,
    before: Optional[int] = None,
) -> list[ActivityImport]:
    client.access_token = get_valid_access_token(db, user_id, client, now)
    raw = client.get_all_activities(after=after, before=before)
    mapped = [m for m in (map_strava_activity(a) for a in raw) if m is not None]
    logger.info("Fetched %d Strava activities for user %s, %d tracked", len(raw), user_id, len(mapped))
    return mapped


def _check_sync_interval(row: StravaToken, now: datetime) -> None:
    interval = settings.strava_min_sync_interval_seconds
    if interval <= 0 or row.last_synced_at is None:
        return
    elapsed = (_as_utc(now) - _as_utc(row.last_synced_at)).total_seconds()
    if elapsed < interval:
        raise SyncTooSoonError(math.ceil(interval - elapsed))


def sync_and_import(
    db: Session,
    user_id: str,
    client: StravaClient,
    now: datetime,
    after: Optional[int] = None,
    before: Optional[int] = None,
) -> SyncImportResult:
    row = get_token(db, user_id)
    if not row:
        raise NotConnectedError()
    _check_sync_interval(row, now)

    mapped = fetch_mapped_activities(db, user_id, client, now, after=after, before=before)
    result = import_activities(db, user_id, mapped)

    row = get_token(db, user_id)
    row.last_synced_at = _as_utc(now)
    db.commit()

    return SyncImportResult(
        synced=len(mapped),
        imported=result.imported,
        total_activities=result.total_activities,
        errors=result.errors,
    )


def get_athlete(db: Session, user_id: str, client: StravaClient, now: datetime) -> Optional[dict]:
    """Athlete profile, or None when not linked or Strava is unavailable."""
    try:
        client.access_token = get_valid_access_token(db, user_id, client, now)
        return client.get_athlete()
    except (NotConnectedError, AuthorizationExpiredError, StravaAPIError) as e:
        logger.info("Strava athlete lookup skipped for user %s: %s", user_id, e)
        return None
