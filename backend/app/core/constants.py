"""Shared application constants.

Centralizes repeat values used across goal tracking and Strava import so we
can document and adjust them in one place.
"""

from enum import Enum


class GoalType(str, Enum):
    running = "running"
    cycling = "cycling"
    swimming = "swimming"


# Goal types measured in meters; everything else is kilometers
METER_GOAL_TYPES = {GoalType.swimming}

METERS_PER_KM = 1000.0

# Smallest loggable distance per goal type, in that goal's unit
MIN_DISTANCE = {
    GoalType.running: 0.1,    # km
    GoalType.cycling: 0.1,    # km
    GoalType.swimming: 10.0,  # m
}

# Allowed range for goal years and the smallest yearly target
MIN_GOAL_YEAR = 2020
MAX_GOAL_YEAR = 2100
MIN_YEARLY_TARGET = 1.0

# Strava activity types we import, keyed by `type` (or `sport_type`).
# Anything not listed here is skipped during import.
ACTIVITY_TYPE_MAPPING = {
    "Run": GoalType.running,
    "VirtualRun": GoalType.running,
    "TrailRun": GoalType.running,
    "Ride": GoalType.cycling,
    "VirtualRide": GoalType.cycling,
    "MountainBikeRide": GoalType.cycling,
    "GravelRide": GoalType.cycling,
    "EBikeRide": GoalType.cycling,
    "Swim": GoalType.swimming,
    "OpenWaterSwim": GoalType.swimming,
}

# Prefix of import ids that carry a Strava activity id, e.g. "strava-555"
STRAVA_ID_PREFIX = "strava-"

STRAVA_AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
STRAVA_OAUTH_URL = "https://www.strava.com/oauth/token"
STRAVA_API_BASE = "https://www.strava.com/api/v3"
STRAVA_SCOPE = "read,activity:read_all"

# Activity sources
SOURCE_MANUAL = "manual"
SOURCE_STRAVA = "strava"
SOURCE_IMPORT = "import"  # batch import without a Strava id
