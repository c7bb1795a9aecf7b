"""
Strava API client: OAuth token exchange/refresh, athlete, list activities.
All requests go through _request() so every failure surfaces as StravaAPIError
with a retryable flag.
"""
import logging
from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.core.constants import (
    STRAVA_API_BASE,
    STRAVA_AUTHORIZE_URL,
    STRAVA_OAUTH_URL,
    STRAVA_SCOPE,
)
from app.core.errors import StravaAPIError
from app.core.time_utils import epoch_seconds

logger = logging.getLogger(__name__)


def is_token_expired(expires_at: int, now) -> bool:
    """True once `now` (datetime or unix seconds) reaches `expires_at`."""
    now_ts = epoch_seconds(now) if isinstance(now, datetime) else now
    return now_ts >= expires_at


def authorization_url(redirect_uri: str) -> str:
    params = {
        "client_id": settings.strava_client_id or "",
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": STRAVA_SCOPE,
        "approval_prompt": "auto",
    }
    return f"{STRAVA_AUTHORIZE_URL}?{urlencode(params)}"


class StravaClient:
    """Thin synchronous wrapper over the Strava REST API.

    `transport` lets callers swap the network layer (tests pass an
    httpx.MockTransport).
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.access_token = access_token
        self._http = httpx.Client(
            timeout=timeout if timeout is not None else settings.strava_timeout_seconds,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self._http.close()

    def _request(self, method: str, url: str, what: str, **kwargs) -> Any:
        try:
            r = self._http.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise StravaAPIError(f"Strava {what} timed out", retryable=True) from e
        except httpx.TransportError as e:
            raise StravaAPIError(f"Strava {what} failed: {e}", retryable=True) from e

        if r.status_code != 200:
            retryable = r.status_code == 429 or r.status_code >= 500
            raise StravaAPIError(
                f"Strava {what} failed: {r.text}",
                status_code=r.status_code,
                retryable=retryable,
            )
        try:
            return r.json()
        except ValueError as e:
            raise StravaAPIError(f"Strava {what} returned invalid JSON", status_code=r.status_code) from e

    def _auth_headers(self) -> dict[str, str]:
        if not self.access_token:
            raise StravaAPIError("Strava access token missing")
        return {"Authorization": f"Bearer {self.access_token}"}

    # --------- OAuth --------- #

    def exchange_token(self, code: str) -> dict[str, Any]:
        data = {
            "client_id": settings.strava_client_id,
            "client_secret": settings.strava_client_secret,
            "code": code,
            "grant_type": "authorization_code",
        }
        return self._request("POST", STRAVA_OAUTH_URL, "token exchange", data=data)

    def refresh_token(self, refresh_token: str) -> dict[str, Any]:
        data = {
            "client_id": settings.strava_client_id,
            "client_secret": settings.strava_client_secret,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        return self._request("POST", STRAVA_OAUTH_URL, "token refresh", data=data)

    # --------- API --------- #

    def get_athlete(self) -> dict[str, Any]:
        return self._request("GET", f"{STRAVA_API_BASE}/athlete", "athlete", headers=self._auth_headers())

    def get_activities(
        self,
        after: Optional[int] = None,
        before: Optional[int] = None,
        page: int = 1,
        per_page: int = 200,
    ) -> list[dict]:
        params: dict[str, int] = {"page": page, "per_page": per_page}
        if after:
            params["after"] = after
        if before:
            params["before"] = before
        data = self._request(
            "GET",
            f"{STRAVA_API_BASE}/athlete/activities",
            "list activities",
            params=params,
            headers=self._auth_headers(),
        )
        if not isinstance(data, list):
            raise StravaAPIError("Strava list activities returned an unexpected payload")
        return data

    def get_all_activities(
        self,
        after: Optional[int] = None,
        before: Optional[int] = None,
    ) -> list[dict]:
        """Fetch every page in the window. Stops on a short page or at strava_max_pages."""
        per_page = settings.strava_per_page
        max_pages = settings.strava_max_pages
        activities: list[dict] = []
        page = 1
        while True:
            batch = self.get_activities(after=after, before=before, page=page, per_page=per_page)
            activities.extend(batch)
            if len(batch) < per_page:
                break
            if max_pages and page >= max_pages:
                logger.warning("Stopped Strava pagination at page cap %d", max_pages)
                break
            page += 1
        return activities
