"""Goal progress versus a linear yearly schedule.

Everything here is a pure function of its inputs. Callers pass `today`
explicitly; nothing reads the system clock.
"""

import calendar
import math
from datetime import date, datetime
from typing import Iterable, Optional

from app.core.constants import GoalType
from app.core.time_utils import year_bounds
from app.schemas.goal import ProgressStats, SchedulePoint

SECONDS_PER_DAY = 86400


def _days_since(start: date, moment) -> int:
    """Whole days from `start` (midnight) to `moment`, rounded up.

    A plain date counts whole days; a datetime counts partial days as a
    full day, so 10:00 on Jan 1 is day 1.
    """
    if isinstance(moment, datetime):
        start_dt = datetime(start.year, start.month, start.day, tzinfo=moment.tzinfo)
        return math.ceil((moment - start_dt).total_seconds() / SECONDS_PER_DAY)
    return math.ceil((moment - start).days)


def compute_progress(
    target: float,
    current_progress: float,
    today,
    goal_type: Optional[GoalType] = None,
) -> ProgressStats:
    """Compare `current_progress` against where a linear pace would be today.

    `today` is a date or datetime. The year length is measured from Jan 1
    to Dec 31, which gives 364 days in a common year (365 in a leap year).
    Keep that formula; results must match previously reported numbers.

    Example: target=400, day 100, progress=50 ->
      expected_progress ~ 109.89, distance_ahead_behind ~ -59.89,
      percent_behind ~ -14.97
    """
    year_start, year_end = year_bounds(today.year)
    days_in_year = math.ceil((year_end - year_start).days)
    days_passed = _days_since(year_start, today)

    expected_progress = target * days_passed / days_in_year
    distance_ahead_behind = current_progress - expected_progress
    percent_behind = (distance_ahead_behind / target) * 100 if target > 0 else 0.0
    percent_complete = (current_progress / target) * 100 if target > 0 else 0.0

    return ProgressStats(
        goal_type=goal_type,
        distance_remaining=max(0.0, target - current_progress),
        distance_completed=current_progress,
        distance_ahead_behind=distance_ahead_behind,
        percent_complete=percent_complete,
        expected_progress=expected_progress,
        percent_behind=percent_behind,
    )


def most_urgent(stats: Iterable[ProgressStats]) -> Optional[GoalType]:
    """Goal type furthest behind schedule, or None if nothing is behind.

    Ties go to the first stat in input order.
    """
    worst = None
    for s in stats:
        if worst is None or s.percent_behind < worst.percent_behind:
            worst = s
    if worst is None or worst.percent_behind >= 0:
        return None
    return worst.goal_type


def monthly_schedule(target: float, current_progress: float, today) -> list[SchedulePoint]:
    """Cumulative target vs. actual per month for the progress graph.

    Past months get an estimate from the average monthly pace so far
    (capped at the real total), the current month gets the real total,
    and future months get no actual value.
    """
    day = today.date() if isinstance(today, datetime) else today
    months_passed = day.month
    monthly_target = target / 12
    monthly_pace = current_progress / months_passed

    points: list[SchedulePoint] = []
    for month in range(12):
        month_start = date(day.year, month + 1, 1)
        actual = None
        if month_start <= day:
            actual = min(monthly_pace * (month + 1), current_progress)
        points.append(
            SchedulePoint(
                month=calendar.month_abbr[month + 1],
                target=monthly_target * (month + 1),
                actual=actual,
            )
        )

    points[months_passed - 1].actual = current_progress
    return points
