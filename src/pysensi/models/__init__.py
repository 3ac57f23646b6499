"""Pydantic models for the Sensi API."""

from pysensi.models.realtime import (
    HubMessage,
    IncomingMessage,
    MessageMethod,
    NegotiateResponse,
    PollResponse,
)
from pysensi.models.thermostat import (
    EnvironmentControls,
    OperationalStatus,
    RunningStatus,
    Temperature,
    Thermostat,
    ThermostatStatus,
)

__all__ = [
    "EnvironmentControls",
    "HubMessage",
    "IncomingMessage",
    "MessageMethod",
    "NegotiateResponse",
    "OperationalStatus",
    "PollResponse",
    "RunningStatus",
    "Temperature",
    "Thermostat",
    "ThermostatStatus",
]
