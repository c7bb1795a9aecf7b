#!/usr/bin/env python3
"""
Seed a year of goals and activities into the Yearly Goals API.

Targets (editable with flags):
  - running:  1200 km
  - cycling:  4000 km
  - swimming: 80000 m

Activities are spread over the weeks from Jan 1 up to today, slightly
behind a linear pace for running so the dashboard shows one goal as
"behind schedule":
  - Tue: run
  - Thu: swim
  - Sat: ride
  - Sun: long run

Usage examples:
  - Against a local backend:
      python scripts/seed_year.py --base-url http://localhost:8000
  - As another user:
      python scripts/seed_year.py --base-url http://localhost:8000 --user alice
"""

from __future__ import annotations

import argparse
import datetime as dt
import sys
from typing import List

import requests


def round1(x: float) -> float:
    return round(x + 1e-9, 1)


def call(base_url: str, method: str, path: str, user: str, payload) -> dict | list:
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    r = requests.request(method, url, json=payload, headers={"X-User-Id": user}, timeout=15)
    if r.status_code >= 300:
        raise RuntimeError(f"{method} {path} -> HTTP {r.status_code}: {r.text}")
    return r.json()


def week_activities(week_start: dt.date, weekly_run_km: float, weekly_ride_km: float, weekly_swim_m: float) -> List[dict]:
    """Four activities for the week beginning `week_start` (a Monday)."""
    plan = [
        (1, "running", round1(weekly_run_km * 0.4), "Midweek run"),
        (3, "swimming", float(int(weekly_swim_m / 50) * 50), "Pool swim"),
        (5, "cycling", round1(weekly_ride_km), "Weekend ride"),
        (6, "running", round1(weekly_run_km * 0.6), "Long run"),
    ]
    items = []
    for offset, goal_type, distance, notes in plan:
        items.append(
            {
                "id": f"seed-{week_start.isoformat()}-{offset}",
                "goal_type": goal_type,
                "distance": distance,
                "date": (week_start + dt.timedelta(days=offset)).isoformat(),
                "notes": notes,
            }
        )
    return items


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed yearly goals and a year of activities")
    ap.add_argument("--base-url", required=True, help="API base URL (e.g., http://localhost:8000)")
    ap.add_argument("--user", default="default-user", help="Value sent as X-User-Id")
    ap.add_argument("--running", type=float, default=1200.0, help="Running target (km)")
    ap.add_argument("--cycling", type=float, default=4000.0, help="Cycling target (km)")
    ap.add_argument("--swimming", type=float, default=80000.0, help="Swimming target (m)")
    args = ap.parse_args()

    today = dt.date.today()
    call(
        args.base_url,
        "PUT",
        "goals/",
        args.user,
        {"running": args.running, "cycling": args.cycling, "swimming": args.swimming, "year": today.year},
    )

    # Run at 90% of linear pace, ride and swim right on it
    weekly_run = args.running / 52 * 0.9
    weekly_ride = args.cycling / 52
    weekly_swim = args.swimming / 52

    items: List[dict] = []
    jan1 = dt.date(today.year, 1, 1)
    week_start = jan1 - dt.timedelta(days=jan1.weekday())
    while week_start <= today:
        for item in week_activities(week_start, weekly_run, weekly_ride, weekly_swim):
            d = dt.date.fromisoformat(item["date"])
            if jan1 <= d <= today:
                items.append(item)
        week_start += dt.timedelta(weeks=1)

    result = call(args.base_url, "POST", "activities/import", args.user, items)
    if result.get("errors"):
        print(f"{len(result['errors'])} activities failed to import", file=sys.stderr)
    print(f"Seed complete: {result['imported']} activities imported, {result['total_activities']} total.")


if __name__ == "__main__":
    main()
