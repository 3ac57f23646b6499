from __future__ import annotations

from typing import Any

from pysensi._emitter import EventEmitter


def test_listeners_run_in_registration_order() -> None:
    emitter = EventEmitter()
    seen: list[tuple[str, Any]] = []
    emitter.on("online", lambda payload: seen.append(("first", payload)))
    emitter.on("online", lambda payload: seen.append(("second", payload)))

    emitter.emit("online", {"ICD": "dev1"})
    emitter.emit("offline", {"ICD": "dev1"})

    assert seen == [("first", {"ICD": "dev1"}), ("second", {"ICD": "dev1"})]


def test_unsubscribe_callable_and_off() -> None:
    emitter = EventEmitter()
    seen: list[Any] = []
    remove = emitter.on("update", seen.append)
    emitter.on("update", seen.append)

    remove()
    emitter.emit("update", 1)
    emitter.off("update", seen.append)
    emitter.emit("update", 2)
    emitter.off("update", seen.append)

    assert seen == [1]
    assert emitter.listener_count("update") == 0


def test_failing_listener_is_isolated() -> None:
    emitter = EventEmitter()
    seen: list[Any] = []

    def _broken(_payload: Any) -> None:
        raise RuntimeError("boom")

    emitter.on("update", _broken)
    emitter.on("update", seen.append)

    emitter.emit("update", "payload")

    assert seen == ["payload"]
