from datetime import date, timedelta
import random

from app.core.constants import GoalType
from app.db import Base, SessionLocal, engine
from app.models.activity import Activity
from app.services.goals import upsert_goal

DEMO_USER = "default-user"

# Yearly targets: km, km, m
DEMO_TARGETS = {
    GoalType.running: 1000.0,
    GoalType.cycling: 3000.0,
    GoalType.swimming: 50000.0,
}


def clear_demo_year(db, year: int) -> None:
    """Delete manual activities of the demo user in `year` so we can reseed cleanly."""
    db.query(Activity).filter(Activity.user_id == DEMO_USER).filter(
        Activity.date >= date(year, 1, 1)
    ).filter(Activity.date <= date(year, 12, 31)).filter(Activity.strava_id.is_(None)).delete()
    db.commit()


def seed_demo_activities(db) -> None:
    """Insert goals plus a week-by-week pattern of activities up to today."""
    today = date.today()
    year = today.year

    for goal_type, target in DEMO_TARGETS.items():
        upsert_goal(db, DEMO_USER, goal_type, target, year)

    to_add = []
    week_start = date(year, 1, 1)
    while week_start <= today:
        # Example: Tue run, Thu swim, Sat ride, Sun long run
        for offset, goal_type, dist, notes in [
            (1, GoalType.running, round(random.uniform(5.0, 10.0), 1), "Easy run"),
            (3, GoalType.swimming, float(random.choice([1000, 1500, 2000])), "Pool swim"),
            (5, GoalType.cycling, round(random.uniform(30.0, 80.0), 1), "Weekend ride"),
            (6, GoalType.running, round(random.uniform(14.0, 24.0), 1), "Long run"),
        ]:
            d = week_start + timedelta(days=offset)
            # Skip future days and days that spill into next year
            if d > today or d.year != year:
                continue
            to_add.append(
                Activity(
                    user_id=DEMO_USER,
                    goal_type=goal_type.value,
                    distance=dist,
                    date=d,
                    notes=notes,
                )
            )
        week_start += timedelta(weeks=1)

    if to_add:
        db.add_all(to_add)
    db.commit()

    print(f"Seeded {len(to_add)} demo activities")


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        clear_demo_year(db, date.today().year)
        seed_demo_activities(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
