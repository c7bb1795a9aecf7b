"""FastAPI dependencies: resolved user id, current time, Strava client."""
from datetime import datetime, timezone
from typing import Optional

from fastapi import Header

from app.core.config import settings
from app.core.time_utils import to_local_datetime
from app.services.strava_client import StravaClient


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """User id from the X-User-Id header, or the configured default user."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return settings.default_user_id


def get_now() -> datetime:
    """Current time in the configured timezone (tz-aware)."""
    return to_local_datetime(datetime.now(timezone.utc), settings.timezone)


def get_strava_client():
    client = StravaClient()
    try:
        yield client
    finally:
        client.close()
