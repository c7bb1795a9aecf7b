from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.activity import ActivityImport, ImportItemError


class StravaStatus(BaseModel):
    connected: bool
    athlete_id: Optional[str] = None
    last_synced_at: Optional[datetime] = None


class SyncWindow(BaseModel):
    after: Optional[int] = None   # unix timestamp
    before: Optional[int] = None  # unix timestamp


class SyncPreview(BaseModel):
    count: int
    activities: list[ActivityImport]


class SyncImportResult(BaseModel):
    synced: int
    imported: int
    total_activities: int
    errors: list[ImportItemError] = []
