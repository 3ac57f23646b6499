"""Realtime (SignalR long polling) wire models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pysensi.models._base import SensiBaseModel


class NegotiateResponse(SensiBaseModel):
    """Body of ``/realtime/negotiate``."""

    connection_token: str
    connection_id: str | None = None
    protocol_version: str | None = None
    keep_alive_timeout: float | None = None
    disconnect_timeout: float | None = None
    long_poll_delay: float | None = None


class HubMessage(SensiBaseModel):
    """One ``M`` entry of a poll response: hub, method and arguments."""

    hub: str = Field(default="", alias="H")
    method: str = Field(default="", alias="M")
    args: list[Any] = Field(default_factory=list, alias="A")


class PollResponse(SensiBaseModel):
    """Body of ``/realtime/connect`` and ``/realtime/poll``.

    ``message_id`` (``C``) and ``groups_token`` (``G``) are only present
    when the server advanced them.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    message_id: str | None = Field(default=None, alias="C")
    groups_token: str | None = Field(default=None, alias="G")
    messages: list[HubMessage] = Field(default_factory=list, alias="M")


class MessageMethod(StrEnum):
    ONLINE = "online"
    UPDATE = "update"
    OFFLINE = "offline"


class IncomingMessage(BaseModel):
    """A thermostat hub message ready for the state store.

    ``payload`` is the thermostat state fragment, augmented with ``ICD``
    and ``Timestamp`` (epoch milliseconds).
    """

    model_config = ConfigDict(frozen=True)

    hub: str
    method: MessageMethod
    device_id: str
    payload: dict[str, Any]
    timestamp: int

    @classmethod
    def from_hub_message(cls, message: HubMessage, timestamp: int) -> IncomingMessage:
        """Build from a raw hub message.

        Raises
        ------
        ValueError
            If the method is not one of :class:`MessageMethod`.
        """
        method = MessageMethod(message.method)
        device_id = message.args[0] if message.args and isinstance(message.args[0], str) else ""
        fragment = message.args[1] if len(message.args) > 1 else None
        payload: dict[str, Any] = dict(fragment) if isinstance(fragment, dict) else {}
        payload["ICD"] = device_id
        payload["Timestamp"] = timestamp
        return cls(
            hub=message.hub,
            method=method,
            device_id=device_id,
            payload=payload,
            timestamp=timestamp,
        )
