"""Shared helpers for Sensi endpoint modules.

This module centralizes the most repeated patterns:
- the SignalR long-polling query parameters
- mapping non-200 responses onto the exception hierarchy

It is internal to pysensi and may change at any time.
"""

from __future__ import annotations

import random
import time

from pysensi._constants import CONNECTION_DATA, TID_MAX, TRANSPORT
from pysensi._transport import TransportResponse
from pysensi.exceptions import SensiApiError


def now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


def random_tid() -> str:
    return str(random.randint(0, TID_MAX))


def realtime_params(connection_token: str, *, with_channel: bool = True) -> dict[str, str]:
    """Query parameters common to every realtime request.

    ``with_channel`` adds the channel descriptor, a fresh transaction id and
    a cache-busting timestamp (connect and poll requests).
    """
    params: dict[str, str] = {
        "transport": TRANSPORT,
        "connectionToken": connection_token,
    }
    if with_channel:
        params["connectionData"] = CONNECTION_DATA
        params["tid"] = random_tid()
        params["_"] = str(now_ms())
    return params


def error_message(response: TransportResponse, fallback: str) -> str:
    """Server-provided ``Message`` or ``"<fallback> (<status>)"``."""
    return response.server_message() or f"{fallback} ({response.status})"


def raise_for_status(
    response: TransportResponse,
    error_cls: type[SensiApiError],
    fallback: str,
) -> None:
    if response.ok:
        return
    raise error_cls(
        error_message(response, fallback),
        status_code=response.status,
        endpoint=response.endpoint,
    )
