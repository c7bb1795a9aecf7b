"""Goal queries: upserts keyed by (user, type, year) and progress sums."""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.constants import GoalType
from app.core.progress import compute_progress, monthly_schedule, most_urgent
from app.core.time_utils import year_bounds
from app.models.activity import Activity
from app.models.goal import Goal
from app.models.strava_token import StravaToken
from app.schemas.goal import AllProgressStats, GoalRead, ProgressStats, SchedulePoint

logger = logging.getLogger(__name__)


def current_progress(db: Session, user_id: str, goal_type: GoalType, year: int) -> float:
    """Sum of activity distances of `goal_type` dated within `year`."""
    start, end = year_bounds(year)
    total = (
        db.query(func.sum(Activity.distance))
        .filter(Activity.user_id == user_id)
        .filter(Activity.goal_type == GoalType(goal_type).value)
        .filter(Activity.date >= start)
        .filter(Activity.date <= end)
        .scalar()
    )
    return float(total or 0.0)


def get_goal(db: Session, user_id: str, goal_type: GoalType, year: int) -> Optional[Goal]:
    return (
        db.query(Goal)
        .filter(Goal.user_id == user_id)
        .filter(Goal.type == GoalType(goal_type).value)
        .filter(Goal.year == year)
        .first()
    )


def upsert_goal(db: Session, user_id: str, goal_type: GoalType, target: float, year: int) -> Goal:
    """Create or update the goal for (user, type, year). Caller commits."""
    row = get_goal(db, user_id, goal_type, year)
    if not row:
        row = Goal(user_id=user_id, type=GoalType(goal_type).value, target=target, year=year)
        db.add(row)
    else:
        row.target = target
    return row


def to_read(db: Session, goal: Goal) -> GoalRead:
    return GoalRead(
        id=goal.id,
        type=goal.type,
        yearly_target=goal.target,
        year=goal.year,
        current_progress=current_progress(db, goal.user_id, goal.type, goal.year),
    )


def list_goals(db: Session, user_id: str, year: int) -> list[GoalRead]:
    rows = (
        db.query(Goal)
        .filter(Goal.user_id == user_id)
        .filter(Goal.year == year)
        .order_by(Goal.id)
        .all()
    )
    return [to_read(db, g) for g in rows]


def count_goals(db: Session, user_id: str, year: int) -> int:
    return (
        db.query(func.count(Goal.id))
        .filter(Goal.user_id == user_id)
        .filter(Goal.year == year)
        .scalar()
        or 0
    )


def progress_for(db: Session, user_id: str, goal_type: GoalType, now) -> Optional[ProgressStats]:
    goal = get_goal(db, user_id, goal_type, now.year)
    if not goal:
        return None
    progress = current_progress(db, user_id, goal_type, now.year)
    return compute_progress(goal.target, progress, now, goal_type=GoalType(goal.type))


def schedule_for(db: Session, user_id: str, goal_type: GoalType, now) -> Optional[list[SchedulePoint]]:
    goal = get_goal(db, user_id, goal_type, now.year)
    if not goal:
        return None
    progress = current_progress(db, user_id, goal_type, now.year)
    return monthly_schedule(goal.target, progress, now)


def all_progress(db: Session, user_id: str, now) -> AllProgressStats:
    goals = (
        db.query(Goal)
        .filter(Goal.user_id == user_id)
        .filter(Goal.year == now.year)
        .order_by(Goal.id)
        .all()
    )
    stats = [
        compute_progress(
            g.target,
            current_progress(db, user_id, g.type, now.year),
            now,
            goal_type=GoalType(g.type),
        )
        for g in goals
    ]
    return AllProgressStats(stats=stats, most_urgent=most_urgent(stats))


def wipe_user_data(db: Session, user_id: str) -> dict[str, int]:
    """Delete every goal, activity and Strava token of a user."""
    counts = {
        "goals": db.query(Goal).filter(Goal.user_id == user_id).delete(),
        "activities": db.query(Activity).filter(Activity.user_id == user_id).delete(),
        "strava_tokens": db.query(StravaToken).filter(StravaToken.user_id == user_id).delete(),
    }
    db.commit()
    logger.info("Wiped data for user %s: %s", user_id, counts)
    return counts
