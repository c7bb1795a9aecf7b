from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_user_id
from app.core.constants import GoalType, MAX_GOAL_YEAR, MIN_GOAL_YEAR, SOURCE_MANUAL
from app.core.time_utils import year_bounds
from app.db import get_db
from app.models.activity import Activity
from app.schemas.activity import ActivityCreate, ActivityImport, ActivityRead, ImportResult
from app.services.reconcile import import_activities

router = APIRouter(prefix="/activities", tags=["activities"])


@router.post("/", response_model=ActivityRead)
def create_activity(
    payload: ActivityCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Log one activity by hand. Always a new record, never merged."""
    activity = Activity(
        user_id=user_id,
        goal_type=payload.goal_type.value,
        distance=payload.distance,  # km for running/cycling, meters for swimming
        date=payload.date,
        notes=payload.notes,
        source=SOURCE_MANUAL,
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


@router.get("/", response_model=list[ActivityRead])
def list_activities(
    goal_type: Optional[GoalType] = Query(None),
    year: Optional[int] = Query(None, ge=MIN_GOAL_YEAR, le=MAX_GOAL_YEAR),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """
    List activities, newest first, optionally filtered by goal type and year.

      GET /activities?goal_type=running&year=2025
    """
    query = db.query(Activity).filter(Activity.user_id == user_id)
    if goal_type is not None:
        query = query.filter(Activity.goal_type == goal_type.value)
    if year is not None:
        start, end = year_bounds(year)
        query = query.filter(Activity.date >= start).filter(Activity.date <= end)
    return query.order_by(Activity.date.desc(), Activity.id.desc()).all()


@router.post("/import", response_model=ImportResult)
def import_batch(
    payload: list[ActivityImport],
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Import a batch. Failed items are listed in `errors`; the rest are kept."""
    return import_activities(db, user_id, payload)
