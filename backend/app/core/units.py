import math

from app.core.constants import GoalType, METER_GOAL_TYPES, METERS_PER_KM, MIN_DISTANCE


def unit_for(goal_type: GoalType) -> str:
    """'m' for swimming, 'km' for running and cycling."""
    return "m" if GoalType(goal_type) in METER_GOAL_TYPES else "km"


def meters_to_goal_units(goal_type: GoalType, meters: float) -> float:
    """
    Convert a distance in meters into the unit the goal is tracked in.
    Example: (cycling, 20000) -> 20.0, (swimming, 1500) -> 1500.0
    """
    if GoalType(goal_type) in METER_GOAL_TYPES:
        return float(meters)
    return float(meters) / METERS_PER_KM


def validate_distance(goal_type: GoalType, distance: float) -> float:
    """Return `distance` unchanged or raise ValueError if it is too small or not finite."""
    gt = GoalType(goal_type)
    minimum = MIN_DISTANCE[gt]
    if distance is None or not math.isfinite(distance) or distance < minimum:
        raise ValueError(f"Distance must be at least {minimum:g} {unit_for(gt)}")
    return distance
