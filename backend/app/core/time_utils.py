from datetime import date, datetime, timezone


def year_bounds(year: int) -> tuple[date, date]:
    """Return (Jan 1, Dec 31) of `year` as dates, both inclusive."""
    return date(year, 1, 1), date(year, 12, 31)


def parse_activity_date(value) -> date:
    """Parse an activity date into a calendar date.

    Accepts:
      - datetime.date / datetime.datetime objects
      - 'YYYY-MM-DD'
      - ISO8601 datetimes such as '2025-03-04T07:15:00Z'

    Time-of-day is dropped; only the calendar day matters for goals.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        raise ValueError("Activity date is required")
    s = str(value).strip()
    if s == "":
        raise ValueError("Activity date is required")
    try:
        if "T" in s:
            return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
        return date.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Invalid activity date: {s!r}")


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
        try:
            return dt.astimezone(ZoneInfo(tz_name))
        except ZoneInfoNotFoundError:
            return dt.astimezone()
    return dt.astimezone()


def epoch_seconds(dt: datetime) -> int:
    """Unix timestamp for `dt` (naive values are treated as UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())
