from __future__ import annotations

from typing import Any

from pysensi.models.realtime import IncomingMessage, MessageMethod
from pysensi.state.events import ClientEvent, ModeChange, SensiEvent, SetpointChange
from pysensi.state.store import ThermostatStateStore


def _message(method: MessageMethod, payload: dict[str, Any]) -> IncomingMessage:
    return IncomingMessage(
        hub="thermostat-v1",
        method=method,
        device_id="dev1",
        payload={**payload, "ICD": "dev1", "Timestamp": 1},
        timestamp=1,
    )


def _store_with(payload: dict[str, Any]) -> ThermostatStateStore:
    store = ThermostatStateStore()
    store.process(_message(MessageMethod.ONLINE, payload))
    return store


def _names(events: list[ClientEvent]) -> list[str]:
    return [event.name for event in events]


def test_cool_setpoint_change_is_diffed_before_merge() -> None:
    store = _store_with({"EnvironmentControls": {"CoolSetpoint": {"F": 70}}})

    events = store.process(_message(MessageMethod.UPDATE, {"EnvironmentControls": {"CoolSetpoint": {"F": 72}}}))

    assert _names(events) == [SensiEvent.COOL_SETPOINT_CHANGED, SensiEvent.UPDATE]
    assert events[0].payload == SetpointChange(old_setpoint=70, new_setpoint=72, is_temporary_hold=False)
    assert store.snapshot()["EnvironmentControls"] == {"CoolSetpoint": {"F": 72}}


def test_cold_start_update_merges_without_change_events() -> None:
    store = _store_with({"OperationalStatus": {"Running": {"Mode": "Off"}}})

    events = store.process(_message(MessageMethod.UPDATE, {"EnvironmentControls": {"CoolSetpoint": {"F": 72}}}))

    assert _names(events) == [SensiEvent.UPDATE]
    assert store.snapshot()["EnvironmentControls"]["CoolSetpoint"]["F"] == 72


def test_temporary_hold_is_reported_on_setpoint_changes() -> None:
    store = _store_with({"EnvironmentControls": {"CoolSetpoint": {"F": 74}, "HeatSetpoint": {"F": 66}}})

    events = store.process(
        _message(
            MessageMethod.UPDATE,
            {"EnvironmentControls": {"HoldMode": "Temporary", "CoolSetpoint": {"F": 76}, "HeatSetpoint": {"F": 68}}},
        )
    )

    assert _names(events) == [
        SensiEvent.COOL_SETPOINT_CHANGED,
        SensiEvent.HEAT_SETPOINT_CHANGED,
        SensiEvent.UPDATE,
    ]
    assert all(event.payload.is_temporary_hold for event in events[:2])
    assert events[1].payload.old_setpoint == 66
    assert events[1].payload.new_setpoint == 68


def test_hold_mode_other_than_temporary_is_not_a_temporary_hold() -> None:
    store = _store_with({"EnvironmentControls": {"HeatSetpoint": {"F": 66}, "HoldMode": "Temporary"}})

    events = store.process(
        _message(MessageMethod.UPDATE, {"EnvironmentControls": {"HoldMode": "Off", "HeatSetpoint": {"F": 65}}})
    )

    assert events[0].payload.is_temporary_hold is False


def test_mode_changes_are_reported_in_fixed_order() -> None:
    store = _store_with(
        {
            "OperationalStatus": {"Running": {"Mode": "Off"}},
            "EnvironmentControls": {"SystemMode": "Auto"},
        }
    )

    events = store.process(
        _message(
            MessageMethod.UPDATE,
            {
                "EnvironmentControls": {"SystemMode": "Cool"},
                "OperationalStatus": {"Running": {"Mode": "Cool"}},
            },
        )
    )

    assert _names(events) == [
        SensiEvent.RUNNING_MODE_CHANGED,
        SensiEvent.SYSTEM_MODE_CHANGED,
        SensiEvent.UPDATE,
    ]
    assert events[0].payload == ModeChange(old_mode="Off", new_mode="Cool")
    assert events[1].payload == ModeChange(old_mode="Auto", new_mode="Cool")


def test_unchanged_values_produce_no_change_event() -> None:
    store = _store_with({"EnvironmentControls": {"SystemMode": "Heat", "CoolSetpoint": {"F": 70}}})

    events = store.process(
        _message(MessageMethod.UPDATE, {"EnvironmentControls": {"SystemMode": "Heat", "CoolSetpoint": {"F": 70}}})
    )

    assert _names(events) == [SensiEvent.UPDATE]


def test_partial_chain_in_snapshot_produces_no_event() -> None:
    store = _store_with({"EnvironmentControls": {"CoolSetpoint": {"C": 21}}, "OperationalStatus": None})

    events = store.process(
        _message(
            MessageMethod.UPDATE,
            {
                "EnvironmentControls": {"CoolSetpoint": {"F": 72}},
                "OperationalStatus": {"Running": {"Mode": "Cool"}},
            },
        )
    )

    assert _names(events) == [SensiEvent.UPDATE]
    assert store.snapshot()["EnvironmentControls"]["CoolSetpoint"] == {"C": 21, "F": 72}


def test_offline_is_emitted_without_merging() -> None:
    store = _store_with({"OperationalStatus": {"Running": {"Mode": "Cool"}}})
    before = store.snapshot()

    events = store.process(_message(MessageMethod.OFFLINE, {"OperationalStatus": {"Running": {"Mode": "Off"}}}))

    assert _names(events) == [SensiEvent.OFFLINE]
    assert events[0].payload["ICD"] == "dev1"
    assert store.snapshot() == before


def test_online_merges_and_echoes_payload() -> None:
    store = ThermostatStateStore()
    payload = {"OperationalStatus": {"Running": {"Mode": "Cool"}}}

    events = store.process(_message(MessageMethod.ONLINE, payload))

    assert _names(events) == [SensiEvent.ONLINE]
    assert events[0].payload["OperationalStatus"] == payload["OperationalStatus"]
    assert store.snapshot()["OperationalStatus"] == payload["OperationalStatus"]


def test_snapshot_is_a_copy() -> None:
    store = _store_with({"EnvironmentControls": {"CoolSetpoint": {"F": 70}}})

    store.snapshot()["EnvironmentControls"]["CoolSetpoint"]["F"] = 99

    assert store.snapshot()["EnvironmentControls"]["CoolSetpoint"]["F"] == 70


def test_change_payloads_serialize_with_camel_case_keys() -> None:
    setpoint = SetpointChange(old_setpoint=70, new_setpoint=72, is_temporary_hold=True)
    mode = ModeChange(old_mode="Off", new_mode="Heat")

    assert setpoint.model_dump(by_alias=True) == {"oldSetpoint": 70, "newSetpoint": 72, "isTemporaryHold": True}
    assert mode.model_dump(by_alias=True) == {"oldMode": "Off", "newMode": "Heat"}
