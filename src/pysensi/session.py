"""Realtime session state."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Session(BaseModel):
    """Mutable state of one realtime (long-poll) session.

    Parameters
    ----------
    connection_token : str
        Opaque token scoping every send/poll/abort request to this session.
    message_id : str or None
        Message cursor (``C``).  Advanced by each poll response carrying it.
    groups_token : str or None
        Group membership token (``G``), echoed back on each poll.
    connected : bool
        Cleared on disconnect or terminal poll failure; the poll loop checks
        it before every request.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    connection_token: str
    message_id: str | None = None
    groups_token: str | None = None
    connected: bool = False

    def advance(self, *, message_id: str | None, groups_token: str | None) -> None:
        """Overwrite the cursor and groups token with any values present."""
        if message_id:
            self.message_id = message_id
        if groups_token:
            self.groups_token = groups_token

    def invalidate(self) -> None:
        self.connected = False
