from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import GoalType, MAX_GOAL_YEAR, MIN_GOAL_YEAR, MIN_YEARLY_TARGET


class GoalRead(BaseModel):
    id: int
    type: GoalType
    yearly_target: float
    year: int
    current_progress: float = 0.0  # computed from activities, never stored

    model_config = ConfigDict(from_attributes=True)


class GoalUpsert(BaseModel):
    """Set the target for one goal type."""

    yearly_target: float = Field(ge=MIN_YEARLY_TARGET, allow_inf_nan=False)
    year: Optional[int] = Field(default=None, ge=MIN_GOAL_YEAR, le=MAX_GOAL_YEAR)


class GoalsUpdate(BaseModel):
    """Set all three targets at once (km, km, m)."""

    running: float = Field(ge=MIN_YEARLY_TARGET, allow_inf_nan=False)
    cycling: float = Field(ge=MIN_YEARLY_TARGET, allow_inf_nan=False)
    swimming: float = Field(ge=MIN_YEARLY_TARGET, allow_inf_nan=False)
    year: Optional[int] = Field(default=None, ge=MIN_GOAL_YEAR, le=MAX_GOAL_YEAR)


class GoalStatus(BaseModel):
    has_goals: bool


class ProgressStats(BaseModel):
    goal_type: Optional[GoalType] = None
    distance_remaining: float
    distance_completed: float
    distance_ahead_behind: float  # positive = ahead of schedule
    percent_complete: float
    expected_progress: float
    percent_behind: float  # negative = behind schedule


class AllProgressStats(BaseModel):
    stats: list[ProgressStats]
    most_urgent: Optional[GoalType] = None


class SchedulePoint(BaseModel):
    month: str  # 'Jan' .. 'Dec'
    target: float
    actual: Optional[float] = None
