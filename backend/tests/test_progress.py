"""Tests for progress-versus-schedule and urgency."""

from datetime import date, datetime, timedelta

import pytest

from app.core.constants import GoalType
from app.core.progress import compute_progress, monthly_schedule, most_urgent

# 2025 is a common year: Jan 1 -> Dec 31 counts 364 days
DAY_100 = date(2025, 1, 1) + timedelta(days=100)


def test_day_100_example_is_behind_schedule():
    stats = compute_progress(400, 50, DAY_100, goal_type=GoalType.running)
    assert stats.expected_progress == pytest.approx(109.89, abs=0.01)
    assert stats.distance_ahead_behind == pytest.approx(-59.89, abs=0.01)
    assert stats.percent_behind == pytest.approx(-14.97, abs=0.01)
    assert stats.percent_complete == pytest.approx(12.5)
    assert stats.distance_remaining == pytest.approx(350)
    assert stats.distance_completed == 50
    assert stats.goal_type == GoalType.running


def test_distance_remaining_never_negative():
    for progress in [0, 100, 399.9, 400, 450]:
        stats = compute_progress(400, progress, DAY_100)
        assert stats.distance_remaining == max(0, 400 - progress)
        assert stats.distance_remaining >= 0


def test_percent_complete_is_linear_in_progress():
    single = compute_progress(400, 50, DAY_100).percent_complete
    double = compute_progress(400, 100, DAY_100).percent_complete
    assert double == pytest.approx(2 * single)


def test_ahead_of_schedule_is_positive():
    stats = compute_progress(400, 200, DAY_100)
    assert stats.distance_ahead_behind > 0
    assert stats.percent_behind > 0


def test_zero_target_does_not_divide():
    stats = compute_progress(0, 10, DAY_100)
    assert stats.percent_behind == 0
    assert stats.percent_complete == 0
    assert stats.distance_remaining == 0


def test_year_length_is_counted_to_dec_31():
    # Last day of the year: 364 days passed out of 364
    stats = compute_progress(364, 0, date(2025, 12, 31))
    assert stats.expected_progress == pytest.approx(364)


def test_leap_year_counts_365_days():
    # 2024-07-01 is 182 days after Jan 1; the year spans 365 days to Dec 31
    stats = compute_progress(365, 0, date(2024, 7, 1))
    assert stats.expected_progress == pytest.approx(182)


def test_datetime_rounds_partial_day_up():
    stats = compute_progress(364, 0, datetime(2025, 1, 1, 10, 0))
    assert stats.expected_progress == pytest.approx(1)
    on_date = compute_progress(364, 0, date(2025, 1, 1))
    assert on_date.expected_progress == 0


def _stats(goal_type, percent_behind):
    s = compute_progress(100, 0, DAY_100, goal_type=goal_type)
    s.percent_behind = percent_behind
    return s


def test_most_urgent_picks_most_negative():
    stats = [
        _stats(GoalType.running, -5.0),
        _stats(GoalType.cycling, -12.0),
        _stats(GoalType.swimming, 3.0),
    ]
    assert most_urgent(stats) == GoalType.cycling


def test_most_urgent_none_when_nobody_behind():
    stats = [_stats(GoalType.running, 0.0), _stats(GoalType.cycling, 8.0)]
    assert most_urgent(stats) is None
    assert most_urgent([]) is None


def test_most_urgent_tie_goes_to_first():
    stats = [_stats(GoalType.swimming, -7.0), _stats(GoalType.running, -7.0)]
    assert most_urgent(stats) == GoalType.swimming


def test_monthly_schedule_mid_march():
    points = monthly_schedule(1200, 300, date(2025, 3, 15))
    assert len(points) == 12
    assert [p.month for p in points[:3]] == ["Jan", "Feb", "Mar"]
    assert points[0].target == pytest.approx(100)
    assert points[11].target == pytest.approx(1200)
    assert points[0].actual == pytest.approx(100)
    assert points[1].actual == pytest.approx(200)
    assert points[2].actual == pytest.approx(300)
    assert all(p.actual is None for p in points[3:])
