"""
Merge a batch of incoming activities into the stored activity set.

Items with a Strava id are upserted on that id, everything else is
inserted. Each item gets its own SAVEPOINT inside one transaction, so a
bad item is rolled back and reported while the rest of the batch commits.
"""
import logging
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.constants import GoalType, SOURCE_IMPORT, SOURCE_STRAVA, STRAVA_ID_PREFIX
from app.core.time_utils import parse_activity_date
from app.core.units import validate_distance
from app.models.activity import Activity
from app.schemas.activity import ActivityImport, ImportItemError, ImportResult

logger = logging.getLogger(__name__)


def external_id_of(item_id: str) -> Optional[str]:
    """'strava-555' -> '555'; ids without the Strava prefix carry no external id."""
    if item_id and item_id.startswith(STRAVA_ID_PREFIX):
        return item_id[len(STRAVA_ID_PREFIX):] or None
    return None


def count_activities(db: Session, user_id: str) -> int:
    return db.query(func.count(Activity.id)).filter(Activity.user_id == user_id).scalar() or 0


def _write_one(db: Session, user_id: str, item: ActivityImport) -> Activity:
    goal_type = GoalType(item.goal_type)
    distance = validate_distance(goal_type, item.distance)
    day = parse_activity_date(item.date)
    notes = item.notes or None
    strava_id = external_id_of(item.id)

    if strava_id is not None:
        row = db.query(Activity).filter(Activity.strava_id == strava_id).first()
        if row is not None:
            if row.user_id != user_id:
                raise ValueError(f"Strava activity {strava_id} belongs to another user")
            row.distance = distance
            row.date = day
            row.notes = notes
            return row

    row = Activity(
        user_id=user_id,
        goal_type=goal_type.value,
        distance=distance,
        date=day,
        notes=notes,
        strava_id=strava_id,
        source=SOURCE_STRAVA if strava_id else SOURCE_IMPORT,
    )
    db.add(row)
    return row


def import_activities(
    db: Session,
    user_id: str,
    incoming: Iterable[ActivityImport],
) -> ImportResult:
    items = list(incoming)
    if not items:
        return ImportResult(imported=0, total_activities=count_activities(db, user_id))

    written: set[int] = set()
    errors: list[ImportItemError] = []
    for item in items:
        try:
            with db.begin_nested():
                row = _write_one(db, user_id, item)
            written.add(row.id)
        except ValueError as exc:
            logger.warning("Failed to import activity %s: %s", item.id, exc)
            errors.append(ImportItemError(activity=item.id, error=str(exc)))
        except SQLAlchemyError as exc:
            logger.warning("Failed to import activity %s: %s", item.id, exc)
            # str(exc) carries the SQL and its parameters; report the driver message only
            reason = str(exc.orig) if getattr(exc, "orig", None) is not None else "Database error"
            errors.append(ImportItemError(activity=item.id, error=reason))

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Import transaction failed for user %s", user_id)
        raise

    total = count_activities(db, user_id)
    if errors:
        logger.warning("%d of %d activities failed to import", len(errors), len(items))
    logger.info("Imported %d activities for user %s (total %d)", len(written), user_id, total)
    return ImportResult(imported=len(written), total_activities=total, errors=errors)
