"""High-level async client for the Sensi realtime API."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pysensi._api._common import error_message, now_ms
from pysensi._api.account import authorize, fetch_thermostats
from pysensi._api.realtime import abort, negotiate, open_connection, parse_poll_response, poll, send_subscribe
from pysensi._constants import HUB_NAME
from pysensi._emitter import EventEmitter, Listener
from pysensi._redact import redact_for_log
from pysensi._transport import HttpTransport, Transport
from pysensi.config import SensiConfig
from pysensi.exceptions import (
    AuthorizationRequiredError,
    PollError,
    SensiError,
    SensiTransportError,
    SubscriptionExpiredError,
)
from pysensi.models.realtime import HubMessage, IncomingMessage
from pysensi.models.thermostat import Thermostat, ThermostatStatus
from pysensi.session import Session
from pysensi.state.events import PollingStopped, SensiEvent, StopReason
from pysensi.state.merge import JsonObject
from pysensi.state.store import ThermostatStateStore

_logger = logging.getLogger(__name__)


class SensiClient:
    """Async client for one Sensi thermostat's realtime event stream.

    Usage::

        async with SensiClient(config) as client:
            client.on("coolSetpointChanged", print)
            thermostats = await client.connect()
            task = await client.start(thermostats[0].icd)
            ...
            await client.disconnect()

    One instance handles one realtime session and one subscribed
    thermostat.  Use one client per thermostat.
    """

    def __init__(
        self,
        config: SensiConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        on_event: Callable[[str, Any], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._session: Session | None = None
        self._thermostats: list[Thermostat] = []
        self._store = ThermostatStateStore()
        self._emitter = EventEmitter()
        self._on_event_cb = on_event
        self._retry_count = 0
        self._poll_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SensiClient:
        if self._transport is None:
            if self._http_session is None:
                # HttpTransport replays cookies itself.
                self._http_session = aiohttp.ClientSession(cookie_jar=aiohttp.DummyCookieJar())
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._cancel_poll_task()
        if self._session is not None and self._session.connected:
            await self.disconnect()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def thermostats(self) -> list[Thermostat]:
        """Thermostats returned by the last successful :meth:`connect`."""
        return list(self._thermostats)

    @property
    def retry_count(self) -> int:
        return self._retry_count

    @property
    def status(self) -> ThermostatStatus:
        """Typed view of the merged thermostat state."""
        return ThermostatStatus.model_validate(self._store.snapshot())

    def snapshot(self) -> JsonObject:
        """Deep copy of the merged thermostat state."""
        return self._store.snapshot()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register *listener* for *event*; returns a callable that removes it."""
        return self._emitter.on(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self._emitter.off(event, listener)

    def _emit(self, event: SensiEvent, payload: Any) -> None:
        self._emitter.emit(event, payload)
        if self._on_event_cb is not None:
            try:
                self._on_event_cb(event, payload)
            except Exception:
                _logger.warning("on_event callback failed for %s", event, exc_info=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise SensiError("Client not initialized. Use 'async with SensiClient(...) as client:'")
        return self._transport

    def _require_session(self) -> Session:
        if self._session is None:
            raise SensiError("Not connected. Call connect() first")
        return self._session

    def _poll_task_running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def _cancel_poll_task(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # ------------------------------------------------------------------
    # Session negotiation
    # ------------------------------------------------------------------

    async def connect(self) -> list[Thermostat]:
        """Authorize, list thermostats, negotiate and open the long-poll connection.

        Each step runs only once the previous one succeeded.  On success the
        session is connected and holds the initial message cursor.

        Raises
        ------
        AuthorizationError, DeviceListError, NegotiationError, SensiConnectionError
            When the matching step is rejected by the service.
        SensiTransportError
            When a step gets no HTTP response.
        """
        transport = self._require_transport()

        # One realtime session at a time: drop the previous one first.
        await self._cancel_poll_task()
        if self._session is not None and self._session.connected:
            await self.disconnect()

        _logger.info("Authorizing")
        await authorize(self._config, transport)

        _logger.info("Retrieving thermostats")
        thermostats = await fetch_thermostats(transport)

        _logger.info("Negotiating connection")
        negotiated = await negotiate(transport)

        _logger.info("Connecting")
        opened = await open_connection(transport, negotiated.connection_token)

        self._session = Session(
            connection_token=negotiated.connection_token,
            message_id=opened.message_id,
            groups_token=opened.groups_token,
            connected=True,
        )
        self._thermostats = thermostats
        self._retry_count = 0
        _logger.info("Connected, %d thermostat(s)", len(thermostats))
        return list(thermostats)

    async def disconnect(self) -> None:
        """Stop polling and abort the realtime connection.

        Polling stops before its next request; a poll already in flight
        completes first.  Abort failures are logged, never raised.
        """
        session = self._session
        if session is None:
            return
        _logger.info("Disconnecting")
        session.invalidate()

        transport = self._transport
        if transport is None:
            return
        try:
            response = await abort(transport, session.connection_token)
        except SensiTransportError as exc:
            _logger.error("Disconnect failed: %s", exc)
            return
        if not response.ok:
            _logger.error("Disconnect failed: %s", error_message(response, "Disconnect failure"))

    # ------------------------------------------------------------------
    # Subscription and polling
    # ------------------------------------------------------------------

    async def subscribe(self, device_id: str) -> None:
        """Subscribe the session to *device_id*'s event stream.

        Raises
        ------
        SubscriptionError
            If the service rejects the subscription.
        """
        session = self._require_session()
        _logger.info("Subscribing to thermostat %s", device_id)
        await send_subscribe(self._require_transport(), session.connection_token, device_id)

    async def start(self, device_id: str) -> asyncio.Task[None]:
        """Subscribe to *device_id* and start polling in a background task.

        Raises
        ------
        SensiError
            If a poll task started earlier is still running.
        """
        if self._poll_task_running():
            raise SensiError("Polling already running. Call connect() to start a new session")
        await self.subscribe(device_id)
        task = asyncio.create_task(self.run(device_id), name=f"pysensi-poll-{device_id}")
        self._poll_task = task
        return task

    async def run(self, device_id: str) -> None:
        """Poll until disconnected or until recovery gives up.

        Expects :meth:`subscribe` to have succeeded for *device_id*; an
        expired subscription is renewed for the same device.  When polling
        stops for good a ``pollingStopped`` event is emitted; nothing is
        raised.
        """
        session = self._require_session()
        self._retry_count = 0
        while True:
            if not session.connected:
                _logger.info("Abort polling, no longer connected")
                return
            try:
                await self._poll_once(session)
            except PollError as exc:
                if not await self._recover(session, device_id, exc):
                    return

    async def _poll_once(self, session: Session) -> None:
        response = await poll(self._require_transport(), session)
        self._retry_count = 0

        parsed = parse_poll_response(response)
        session.advance(message_id=parsed.message_id, groups_token=parsed.groups_token)
        for message in parsed.messages:
            self._dispatch(message)

    async def _recover(self, session: Session, device_id: str, error: PollError) -> bool:
        """Run the recovery action for *error*; return whether to keep polling."""
        if not session.connected:
            return False

        self._retry_count += 1
        _logger.warning("Error while polling %s: %s", device_id, error)
        if self._retry_count > self._config.polling_retry_count:
            self._stop_polling(session, device_id, StopReason.RETRIES_EXHAUSTED, error)
            return False
        _logger.info("Retry %d of %d", self._retry_count, self._config.polling_retry_count)

        transport = self._require_transport()
        if isinstance(error, AuthorizationRequiredError):
            _logger.info("Attempting to reauthorize")
            try:
                await authorize(self._config, transport)
            except SensiError as exc:
                self._stop_polling(session, device_id, StopReason.REAUTHORIZATION_FAILED, exc)
                return False
            _logger.info("Reauthorization successful, resume polling")
        elif isinstance(error, SubscriptionExpiredError):
            _logger.info("Attempting to resubscribe")
            try:
                await send_subscribe(transport, session.connection_token, device_id)
            except SensiError as exc:
                self._stop_polling(session, device_id, StopReason.RESUBSCRIPTION_FAILED, exc)
                return False
            _logger.info("Resubscription successful, resume polling")

        if self._config.polling_retry_delay > 0:
            await asyncio.sleep(self._config.polling_retry_delay)
        return True

    def _stop_polling(
        self,
        session: Session,
        device_id: str,
        reason: StopReason,
        error: Exception,
    ) -> None:
        _logger.error("Polling %s stopped (%s): %s", device_id, reason, error)
        session.invalidate()
        self._emit(
            SensiEvent.POLLING_STOPPED,
            PollingStopped(device_id=device_id, reason=reason, retry_count=self._retry_count, error=error),
        )

    def _dispatch(self, message: HubMessage) -> None:
        """Feed one poll-response message to the state store and emit its events."""
        if message.hub != HUB_NAME:
            _logger.warning("Received unknown message type: %s", redact_for_log(message.raw))
            return
        try:
            incoming = IncomingMessage.from_hub_message(message, now_ms())
        except ValueError:
            _logger.debug("Ignoring %r message on %s", message.method, HUB_NAME)
            return

        for event in self._store.process(incoming):
            self._emit(event.name, event.payload)
