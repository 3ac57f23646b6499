from __future__ import annotations

import asyncio
import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pysensi._transport import TransportResponse
from pysensi.client import SensiClient
from pysensi.config import SensiConfig

AUTHORIZE = "/api/authorize"
THERMOSTATS = "/api/thermostats"
NEGOTIATE = "/realtime/negotiate"
CONNECT = "/realtime/connect"
SEND = "/realtime/send"
POLL = "/realtime/poll"
ABORT = "/realtime/abort"


def ok(body: Any = None) -> TransportResponse:
    return TransportResponse(status=200, text="" if body is None else json.dumps(body))


def status(code: int, body: Any = None) -> TransportResponse:
    return TransportResponse(status=code, text="" if body is None else json.dumps(body))


@dataclass
class RecordedCall:
    method: str
    endpoint: str
    params: dict[str, str] | None
    json_body: dict[str, Any] | None
    form: dict[str, str] | None
    headers: dict[str, str] | None


@dataclass
class FakeSensiBackend:
    """In-memory Sensi service.

    Responses queued per endpoint are served first; once an endpoint's queue
    is empty its default answer is used.  A drained poll queue invalidates
    the attached client's session so the poll loop ends.  ``poll_delay``
    holds each poll open to mimic the server's long-poll wait.
    """

    calls: list[RecordedCall] = field(default_factory=list)
    queued: dict[str, list[TransportResponse | Exception]] = field(default_factory=dict)
    client: SensiClient | None = None
    poll_delay: float = 0.0
    inflight_polls: int = 0
    max_inflight_polls: int = 0
    defaults: dict[str, TransportResponse] = field(
        default_factory=lambda: {
            AUTHORIZE: ok(),
            THERMOSTATS: ok(
                [
                    {"ICD": "dev1", "DeviceName": "Hallway", "TimeZone": "Eastern Standard Time"},
                    {"ICD": "dev2", "DeviceName": "Upstairs"},
                ]
            ),
            NEGOTIATE: ok({"ConnectionToken": "tok-1", "ConnectionId": "cid-1", "ProtocolVersion": "1.2"}),
            CONNECT: ok({"C": "c-0", "S": 1, "M": []}),
            SEND: ok({}),
            ABORT: ok({}),
        }
    )

    def queue(self, endpoint: str, *responses: TransportResponse | Exception) -> None:
        self.queued.setdefault(endpoint, []).extend(responses)

    def endpoints(self) -> list[str]:
        return [call.endpoint for call in self.calls]

    def count(self, endpoint: str) -> int:
        return sum(1 for call in self.calls if call.endpoint == endpoint)

    def calls_to(self, endpoint: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.endpoint == endpoint]

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        self.calls.append(
            RecordedCall(
                method=method,
                endpoint=endpoint,
                params=dict(params) if params is not None else None,
                json_body=dict(json_body) if json_body is not None else None,
                form=dict(form) if form is not None else None,
                headers=dict(headers) if headers is not None else None,
            )
        )

        if endpoint == POLL and self.poll_delay:
            self.inflight_polls += 1
            self.max_inflight_polls = max(self.max_inflight_polls, self.inflight_polls)
            try:
                await asyncio.sleep(self.poll_delay)
            finally:
                self.inflight_polls -= 1

        pending = self.queued.get(endpoint)
        if pending:
            item = pending.pop(0)
        elif endpoint == POLL:
            if self.client is not None and self.client.session is not None:
                self.client.session.invalidate()
            item = ok({})
        elif endpoint in self.defaults:
            item = self.defaults[endpoint]
        else:
            raise AssertionError(f"Unexpected endpoint in fake backend: {endpoint}")

        if isinstance(item, Exception):
            raise item
        return dataclasses.replace(item, endpoint=endpoint)


@pytest.fixture
def config() -> SensiConfig:
    return SensiConfig(username="user@example.com", password="secret", polling_retry_count=3)


@pytest.fixture
def backend() -> FakeSensiBackend:
    return FakeSensiBackend()


@pytest.fixture
def client(config: SensiConfig, backend: FakeSensiBackend) -> SensiClient:
    sensi = SensiClient(config, transport=backend)
    backend.client = sensi
    return sensi
