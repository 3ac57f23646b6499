"""HTTP transport with cookie persistence."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from http.cookies import SimpleCookie
from typing import Any, Protocol

import aiohttp

from pysensi._constants import ACCEPT_HEADER
from pysensi._redact import redact_cookies, redact_for_log
from pysensi.config import SensiConfig
from pysensi.exceptions import SensiTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Status code and body of a completed HTTP exchange."""

    status: int
    text: str
    endpoint: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 200

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises
        ------
        SensiTransportError
            If the body is not valid JSON.
        """
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise SensiTransportError(
                f"Invalid JSON from {self.endpoint}: {self.text[:200]}",
                status_code=self.status,
                endpoint=self.endpoint,
            ) from exc

    def server_message(self) -> str | None:
        """Return the ``Message`` field of an error body, if there is one."""
        try:
            body = json.loads(self.text)
        except json.JSONDecodeError:
            return None
        if isinstance(body, dict):
            message = body.get("Message")
            if isinstance(message, str) and message:
                return message
        return None


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Non-200 statuses are returned, not raised; only a missing response
    raises :class:`SensiTransportError`.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse: ...


class HttpTransport:
    """aiohttp transport that replays cookies on every request.

    The Sensi realtime endpoints rely on cookie based server affinity, so
    every ``Set-Cookie`` is captured and sent back regardless of the cookie
    jar configured on the underlying session.
    """

    def __init__(self, config: SensiConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._cookies: SimpleCookie = SimpleCookie()
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _store_cookies(self, set_cookie_headers: list[str]) -> list[str]:
        """Keep every cookie the service sets; return the names that changed."""
        changed: list[str] = []
        for raw in set_cookie_headers:
            received: SimpleCookie = SimpleCookie()
            received.load(raw)
            for name, morsel in received.items():
                current = self._cookies.get(name)
                if current is None or current.value != morsel.value:
                    self._cookies[name] = morsel.value
                    changed.append(name)
        return changed

    def _cookie_header(self) -> str:
        return "; ".join(f"{name}={morsel.value}" for name, morsel in self._cookies.items())

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
        """Perform one request and return its status and body.

        Raises
        ------
        SensiTransportError
            When no response arrives, or its body cannot be decoded as text.
        """
        request_headers: dict[str, str] = {"Accept": ACCEPT_HEADER}
        if headers:
            request_headers.update(headers)

        cookie = self._cookie_header()
        if cookie:
            request_headers["Cookie"] = cookie

        url = f"{self._config.base_url}{endpoint}"
        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled:
            _logger.debug(
                "Request %s params=%s json=%s form=%s cookies=%s",
                endpoint,
                redact_for_log(params),
                redact_for_log(json_body),
                redact_for_log(form),
                redact_cookies([cookie]) if cookie else [],
            )

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                json=dict(json_body) if json_body is not None else None,
                data=dict(form) if form is not None else None,
                headers=request_headers,
                timeout=self._timeout,
            ) as resp:
                set_cookies = resp.headers.getall("Set-Cookie", [])
                changed = self._store_cookies(set_cookies)
                status = resp.status
                text = await resp.text()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise SensiTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc
        except UnicodeDecodeError as exc:
            raise SensiTransportError(
                f"Undecodable body from {endpoint}: {exc}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        if changed:
            _logger.debug("Cookies updated by %s: %s", endpoint, ", ".join(changed))
        if self._config.api_trace_enabled:
            _logger.debug(
                "Response %s status=%d set-cookie=%s body=%s",
                endpoint,
                status,
                redact_cookies(set_cookies),
                redact_for_log(text),
            )

        return TransportResponse(status=status, text=text, endpoint=endpoint)
