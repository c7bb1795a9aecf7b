from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.constants import GoalType
from app.core.time_utils import parse_activity_date
from app.core.units import validate_distance


class ActivityCreate(BaseModel):
    """Manual entry. Distance is km for running/cycling, meters for swimming."""

    goal_type: GoalType
    distance: float = Field(allow_inf_nan=False)
    date: date
    notes: Optional[str] = None

    # Clients send full ISO datetimes; only the calendar day is kept
    @field_validator("date", mode="before")
    @classmethod
    def _to_date(cls, v):
        return parse_activity_date(v)

    @model_validator(mode="after")
    def _check_distance(self):
        validate_distance(self.goal_type, self.distance)
        return self


class ActivityRead(BaseModel):
    id: int
    goal_type: GoalType
    distance: float
    date: date
    notes: Optional[str] = None
    strava_id: Optional[str] = None
    source: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ActivityImport(BaseModel):
    """One item of an import batch.

    `id` is the caller's identifier; ids like 'strava-555' carry a Strava
    activity id and are upserted, anything else is always inserted.
    Distance must already be in the goal's unit. Minimum distance and date
    are checked per item during import, not here, so one bad item cannot
    reject the whole batch. NaN and Infinity are never valid JSON numbers
    for a distance and reject the request.
    """

    id: str
    goal_type: GoalType
    distance: float = Field(allow_inf_nan=False)
    date: str
    notes: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class ImportItemError(BaseModel):
    activity: str
    error: str


class ImportResult(BaseModel):
    imported: int
    total_activities: int
    errors: list[ImportItemError] = []
