"""Client events and their payload models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SensiEvent(StrEnum):
    ONLINE = "online"
    UPDATE = "update"
    OFFLINE = "offline"
    RUNNING_MODE_CHANGED = "runningModeChanged"
    COOL_SETPOINT_CHANGED = "coolSetpointChanged"
    HEAT_SETPOINT_CHANGED = "heatSetpointChanged"
    SYSTEM_MODE_CHANGED = "systemModeChanged"
    POLLING_STOPPED = "pollingStopped"


class _EventPayload(BaseModel):
    """Event payloads serialize with camelCase keys (``oldMode``...)."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class ModeChange(_EventPayload):
    old_mode: Any
    new_mode: Any


class SetpointChange(_EventPayload):
    old_setpoint: Any
    new_setpoint: Any
    is_temporary_hold: bool = False


class StopReason(StrEnum):
    RETRIES_EXHAUSTED = "retries_exhausted"
    REAUTHORIZATION_FAILED = "reauthorization_failed"
    RESUBSCRIPTION_FAILED = "resubscription_failed"


class PollingStopped(_EventPayload):
    """Emitted once when the poll loop gives up for good."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    device_id: str
    reason: StopReason
    retry_count: int
    error: Exception | None = None


class ClientEvent(NamedTuple):
    name: SensiEvent
    payload: Any
