"""pysensi - Async Python client for the Sensi thermostat realtime API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysensi")
except PackageNotFoundError:
    __version__ = "0+local"
from pysensi.client import SensiClient
from pysensi.config import SensiConfig
from pysensi.exceptions import (
    AuthorizationError,
    AuthorizationRequiredError,
    DeviceListError,
    NegotiationError,
    PollError,
    SensiApiError,
    SensiConfigError,
    SensiConnectionError,
    SensiError,
    SensiTransportError,
    SubscriptionError,
    SubscriptionExpiredError,
    UnknownError,
)
from pysensi.models import (
    IncomingMessage,
    MessageMethod,
    Thermostat,
    ThermostatStatus,
)
from pysensi.state.events import (
    ModeChange,
    PollingStopped,
    SensiEvent,
    SetpointChange,
    StopReason,
)

__all__ = [
    "__version__",
    "AuthorizationError",
    "AuthorizationRequiredError",
    "DeviceListError",
    "IncomingMessage",
    "MessageMethod",
    "ModeChange",
    "NegotiationError",
    "PollError",
    "PollingStopped",
    "SensiApiError",
    "SensiClient",
    "SensiConfig",
    "SensiConfigError",
    "SensiConnectionError",
    "SensiError",
    "SensiEvent",
    "SensiTransportError",
    "SetpointChange",
    "StopReason",
    "SubscriptionError",
    "SubscriptionExpiredError",
    "Thermostat",
    "ThermostatStatus",
    "UnknownError",
]
