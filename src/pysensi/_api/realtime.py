"""Realtime (SignalR long polling) endpoints.

Endpoints:
  - /realtime/negotiate
  - /realtime/connect
  - /realtime/send
  - /realtime/poll
  - /realtime/abort
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from pysensi._api._common import error_message, raise_for_status, realtime_params
from pysensi._constants import (
    ABORT_ENDPOINT,
    AUTHORIZATION_REQUIRED_STATUSES,
    CONNECT_ENDPOINT,
    HUB_NAME,
    NEGOTIATE_ENDPOINT,
    POLL_ENDPOINT,
    SEND_ENDPOINT,
    SUBSCRIPTION_EXPIRED_STATUS,
)
from pysensi._redact import redact_for_log
from pysensi._transport import Transport, TransportResponse
from pysensi.exceptions import (
    AuthorizationRequiredError,
    NegotiationError,
    SensiConnectionError,
    SensiTransportError,
    SubscriptionError,
    SubscriptionExpiredError,
    UnknownError,
)
from pysensi.models.realtime import NegotiateResponse, PollResponse
from pysensi.session import Session

_logger = logging.getLogger(__name__)


async def negotiate(transport: Transport) -> NegotiateResponse:
    """Negotiate a realtime connection and return its connection token.

    Raises
    ------
    NegotiationError
        On a non-200 response or a body without ``ConnectionToken``.
    """
    response = await transport.request("GET", NEGOTIATE_ENDPOINT)
    raise_for_status(response, NegotiationError, "Failed to negotiate connection")
    try:
        return NegotiateResponse.model_validate(response.json())
    except ValidationError as exc:
        raise NegotiationError(
            "Negotiate response missing ConnectionToken",
            status_code=response.status,
            endpoint=NEGOTIATE_ENDPOINT,
        ) from exc


async def open_connection(transport: Transport, connection_token: str) -> PollResponse:
    """Open the long-poll connection; the response carries the first cursor.

    Raises
    ------
    SensiConnectionError
        On a non-200 response or an unparsable body.
    """
    response = await transport.request(
        "GET",
        CONNECT_ENDPOINT,
        params=realtime_params(connection_token),
    )
    raise_for_status(response, SensiConnectionError, "Failed to connect")
    try:
        return PollResponse.model_validate(response.json())
    except ValidationError as exc:
        raise SensiConnectionError(
            "Malformed connect response",
            status_code=response.status,
            endpoint=CONNECT_ENDPOINT,
        ) from exc


def build_subscribe_command(device_id: str) -> str:
    """JSON hub invocation subscribing to *device_id*."""
    return json.dumps({"H": HUB_NAME, "M": "Subscribe", "A": [device_id], "I": 0})


async def send_subscribe(transport: Transport, connection_token: str, device_id: str) -> None:
    """Subscribe the connection to one thermostat's event stream.

    Raises
    ------
    SubscriptionError
        On a non-200 response.
    """
    response = await transport.request(
        "POST",
        SEND_ENDPOINT,
        params=realtime_params(connection_token, with_channel=False),
        form={"data": build_subscribe_command(device_id)},
        headers={"Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"},
    )
    if not response.ok:
        raise SubscriptionError(
            error_message(response, f"Failed to subscribe to {device_id}"),
            device_id=device_id,
            status_code=response.status,
            endpoint=SEND_ENDPOINT,
        )


def poll_params(session: Session) -> dict[str, str]:
    params = realtime_params(session.connection_token)
    if session.groups_token:
        params["groupsToken"] = session.groups_token
    if session.message_id:
        params["messageId"] = session.message_id
    return params


async def poll(transport: Transport, session: Session) -> TransportResponse:
    """Issue one long-poll request and classify failures.

    Returns the HTTP-200 response unparsed (see :func:`parse_poll_response`).

    Raises
    ------
    AuthorizationRequiredError
        On 401 or 403.
    SubscriptionExpiredError
        On 500.
    UnknownError
        On any other status or when no response was received.
    """
    try:
        response = await transport.request("GET", POLL_ENDPOINT, params=poll_params(session))
    except SensiTransportError as exc:
        raise UnknownError(str(exc), endpoint=POLL_ENDPOINT) from exc

    if response.ok:
        return response

    _logger.debug("Poll returned status %d", response.status)
    message = error_message(response, "Polling failure")
    if response.status in AUTHORIZATION_REQUIRED_STATUSES:
        raise AuthorizationRequiredError(message, status_code=response.status, endpoint=POLL_ENDPOINT)
    if response.status == SUBSCRIPTION_EXPIRED_STATUS:
        raise SubscriptionExpiredError(message, status_code=response.status, endpoint=POLL_ENDPOINT)
    raise UnknownError(message, status_code=response.status, endpoint=POLL_ENDPOINT)


def parse_poll_response(response: TransportResponse) -> PollResponse:
    """Parse an HTTP-200 poll body.

    Raises
    ------
    UnknownError
        If the body is not a poll response object.
    """
    try:
        body = response.json()
        _logger.debug("Poll response: %s", redact_for_log(body))
        if not isinstance(body, dict):
            raise UnknownError("Poll response is not an object", status_code=response.status, endpoint=POLL_ENDPOINT)
        return PollResponse.model_validate(body)
    except (SensiTransportError, ValidationError) as exc:
        raise UnknownError(
            f"Malformed poll response: {exc}",
            status_code=response.status,
            endpoint=POLL_ENDPOINT,
        ) from exc


async def abort(transport: Transport, connection_token: str) -> TransportResponse:
    """Tell the server the connection is gone. Errors are the caller's to log."""
    return await transport.request(
        "GET",
        ABORT_ENDPOINT,
        params=realtime_params(connection_token, with_channel=False),
    )
