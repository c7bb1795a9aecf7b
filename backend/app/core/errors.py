"""Domain errors raised by services and translated to HTTP by the routers."""


class NotConnectedError(Exception):
    """The user has no stored Strava token."""

    def __init__(self, message: str = "Not connected to Strava"):
        super().__init__(message)


class AuthorizationExpiredError(Exception):
    """Token refresh failed. The stored token has already been deleted."""

    def __init__(
        self,
        message: str = "Strava token refresh failed. Please reconnect your Strava account.",
    ):
        super().__init__(message)


class StravaAPIError(Exception):
    """A call to Strava failed.

    `retryable` is True for timeouts, transport failures, 429 and 5xx
    responses; other failures will not succeed on a plain retry.
    """

    def __init__(self, message: str, status_code: int | None = None, retryable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class SyncTooSoonError(Exception):
    def __init__(self, retry_after_seconds: int):
        super().__init__(
            f"Please wait {retry_after_seconds} seconds before syncing again"
        )
        self.retry_after_seconds = retry_after_seconds
