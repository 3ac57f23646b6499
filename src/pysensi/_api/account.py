"""Account endpoints.

Endpoints:
  - /api/authorize
  - /api/thermostats
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from pysensi._api._common import raise_for_status
from pysensi._constants import AUTHORIZE_ENDPOINT, THERMOSTATS_ENDPOINT
from pysensi._redact import redact_for_log
from pysensi._transport import Transport
from pysensi.config import SensiConfig
from pysensi.exceptions import AuthorizationError, DeviceListError
from pysensi.models.thermostat import Thermostat

_logger = logging.getLogger(__name__)


async def authorize(config: SensiConfig, transport: Transport) -> None:
    """Log in with the configured credentials.

    The service answers with an authorization cookie which the transport
    keeps for every later request.

    Raises
    ------
    AuthorizationError
        If the service rejects the credentials.
    """
    response = await transport.request(
        "POST",
        AUTHORIZE_ENDPOINT,
        json_body={"UserName": config.username, "Password": config.password},
        headers={"X-Requested-With": "XMLHttpRequest"},
    )
    raise_for_status(response, AuthorizationError, "Authorization failure")


async def fetch_thermostats(transport: Transport) -> list[Thermostat]:
    """Fetch the account's thermostats, in server order.

    Raises
    ------
    DeviceListError
        On a non-200 response or a body that is not a thermostat list.
    """
    response = await transport.request("GET", THERMOSTATS_ENDPOINT)
    raise_for_status(response, DeviceListError, "Failed to retrieve thermostat listing")

    body = response.json()
    _logger.debug("Thermostat listing: %s", redact_for_log(body))
    if not isinstance(body, list):
        raise DeviceListError(
            "Thermostat listing is not a list",
            status_code=response.status,
            endpoint=THERMOSTATS_ENDPOINT,
        )
    try:
        return [Thermostat.model_validate(item) for item in body]
    except ValidationError as exc:
        raise DeviceListError(
            f"Malformed thermostat listing: {exc.error_count()} error(s)",
            status_code=response.status,
            endpoint=THERMOSTATS_ENDPOINT,
        ) from exc
