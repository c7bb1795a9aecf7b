from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_now, get_user_id
from app.core.constants import GoalType, MAX_GOAL_YEAR, MIN_GOAL_YEAR
from app.db import get_db
from app.schemas.goal import (
    AllProgressStats,
    GoalRead,
    GoalStatus,
    GoalsUpdate,
    GoalUpsert,
    ProgressStats,
    SchedulePoint,
)
from app.services import goals as goal_service


router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("/", response_model=list[GoalRead])
def list_goals(
    year: Optional[int] = Query(None, ge=MIN_GOAL_YEAR, le=MAX_GOAL_YEAR),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
):
    """Goals for `year` (default: current year) with progress summed from activities."""
    return goal_service.list_goals(db, user_id, year or now.year)


@router.put("/", response_model=list[GoalRead])
def update_goals(
    payload: GoalsUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
):
    year = payload.year or now.year
    rows = [
        goal_service.upsert_goal(db, user_id, GoalType.running, payload.running, year),
        goal_service.upsert_goal(db, user_id, GoalType.cycling, payload.cycling, year),
        goal_service.upsert_goal(db, user_id, GoalType.swimming, payload.swimming, year),
    ]
    db.commit()
    for row in rows:
        db.refresh(row)
    return [goal_service.to_read(db, row) for row in rows]


@router.get("/status", response_model=GoalStatus)
def goals_status(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
):
    return GoalStatus(has_goals=goal_service.count_goals(db, user_id, now.year) > 0)


@router.get("/progress", response_model=AllProgressStats)
def all_progress(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
):
    """Progress of every current-year goal plus the one most behind schedule."""
    return goal_service.all_progress(db, user_id, now)


@router.put("/{goal_type}", response_model=GoalRead)
def upsert_goal(
    goal_type: GoalType,
    payload: GoalUpsert,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
):
    row = goal_service.upsert_goal(db, user_id, goal_type, payload.yearly_target, payload.year or now.year)
    db.commit()
    db.refresh(row)
    return goal_service.to_read(db, row)


@router.get("/{goal_type}/progress", response_model=ProgressStats)
def goal_progress(
    goal_type: GoalType,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
):
    stats = goal_service.progress_for(db, user_id, goal_type, now)
    if stats is None:
        raise HTTPException(status_code=404, detail="Goal not set")
    return stats


@router.get("/{goal_type}/schedule", response_model=list[SchedulePoint])
def goal_schedule(
    goal_type: GoalType,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    now: datetime = Depends(get_now),
):
    points = goal_service.schedule_for(db, user_id, goal_type, now)
    if points is None:
        raise HTTPException(status_code=404, detail="Goal not set")
    return points
