"""Merged thermostat state and change detection.

This is the only component allowed to mutate the state snapshot.  Change
events for an update are computed against the snapshot *before* the update
is merged, since the merged state can no longer tell "changed" apart from
"always was".
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pysensi._constants import TEMPORARY_HOLD
from pysensi.models.realtime import IncomingMessage, MessageMethod
from pysensi.state.events import ClientEvent, ModeChange, SensiEvent, SetpointChange
from pysensi.state.merge import JsonObject, deep_merge

_logger = logging.getLogger(__name__)

_MISSING: Any = object()

_HOLD_MODE_PATH = ("EnvironmentControls", "HoldMode")


def lookup_path(data: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    """Follow *path* through nested mappings.

    Returns the module-private ``_MISSING`` sentinel as soon as a level is
    absent or not a mapping.  A key present with a ``None`` value counts as
    present.
    """
    node: Any = data
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return _MISSING
        node = node[key]
    return node


@dataclass(frozen=True, slots=True)
class _WatchedField:
    event: SensiEvent
    path: tuple[str, ...]
    is_setpoint: bool = False


_WATCHED_FIELDS: tuple[_WatchedField, ...] = (
    _WatchedField(SensiEvent.RUNNING_MODE_CHANGED, ("OperationalStatus", "Running", "Mode")),
    _WatchedField(SensiEvent.COOL_SETPOINT_CHANGED, ("EnvironmentControls", "CoolSetpoint", "F"), is_setpoint=True),
    _WatchedField(SensiEvent.HEAT_SETPOINT_CHANGED, ("EnvironmentControls", "HeatSetpoint", "F"), is_setpoint=True),
    _WatchedField(SensiEvent.SYSTEM_MODE_CHANGED, ("EnvironmentControls", "SystemMode")),
)


class ThermostatStateStore:
    """Running snapshot of one thermostat's state."""

    def __init__(self) -> None:
        self._snapshot: JsonObject = {}

    def snapshot(self) -> JsonObject:
        """Deep copy of the merged state."""
        return copy.deepcopy(self._snapshot)

    def process(self, message: IncomingMessage) -> list[ClientEvent]:
        """Apply one hub message and return the events it produces, in order."""
        payload = message.payload

        if message.method is MessageMethod.ONLINE:
            self._snapshot = deep_merge(self._snapshot, payload)
            return [ClientEvent(SensiEvent.ONLINE, payload)]

        if message.method is MessageMethod.UPDATE:
            events = self.diff(payload)
            self._snapshot = deep_merge(self._snapshot, payload)
            events.append(ClientEvent(SensiEvent.UPDATE, payload))
            return events

        # Offline messages carry no operational fields worth keeping.
        return [ClientEvent(SensiEvent.OFFLINE, payload)]

    def diff(self, update: Mapping[str, Any]) -> list[ClientEvent]:
        """Compare watched fields of *update* against the current snapshot.

        A field only produces an event when both sides hold it and the
        values differ.
        """
        is_temporary_hold = lookup_path(update, _HOLD_MODE_PATH) == TEMPORARY_HOLD
        events: list[ClientEvent] = []
        for field in _WATCHED_FIELDS:
            old = lookup_path(self._snapshot, field.path)
            new = lookup_path(update, field.path)
            if old is _MISSING or new is _MISSING or old == new:
                continue

            payload: ModeChange | SetpointChange
            if field.is_setpoint:
                payload = SetpointChange(
                    old_setpoint=old,
                    new_setpoint=new,
                    is_temporary_hold=is_temporary_hold,
                )
            else:
                payload = ModeChange(old_mode=old, new_mode=new)
            _logger.debug("%s: %s", field.event, payload)
            events.append(ClientEvent(field.event, payload))
        return events
