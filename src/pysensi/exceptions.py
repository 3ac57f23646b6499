"""Custom exception hierarchy for pysensi."""

from __future__ import annotations


class SensiError(Exception):
    """Base exception for all pysensi errors."""


class SensiConfigError(SensiError):
    """Invalid or missing configuration."""


class SensiTransportError(SensiError):
    """HTTP-level failure (no response, unusable or non-JSON body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class SensiApiError(SensiError):
    """The service answered with a non-200 status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class AuthorizationError(SensiApiError):
    """Login with username/password was rejected."""


class DeviceListError(SensiApiError):
    """The thermostat listing could not be retrieved."""


class NegotiationError(SensiApiError):
    """The realtime negotiate step failed (no connection token)."""


class SensiConnectionError(SensiApiError):
    """Opening the long-poll connection failed."""


class SubscriptionError(SensiApiError):
    """Subscribing to a thermostat's event stream failed."""

    def __init__(
        self,
        message: str,
        *,
        device_id: str,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.device_id = device_id
        super().__init__(message, status_code=status_code, endpoint=endpoint)


class PollError(SensiApiError):
    """A long-poll request failed.

    Subclasses classify the failure so the poll loop can pick a recovery
    action.  These never escape :meth:`pysensi.client.SensiClient.run`.
    """


class AuthorizationRequiredError(PollError):
    """Poll rejected with 401/403; the authorization cookie expired."""


class SubscriptionExpiredError(PollError):
    """Poll rejected with 500; the hub subscription lapsed."""


class UnknownError(PollError):
    """Any other poll failure, including transport errors."""
