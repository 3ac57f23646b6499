"""Base model for Sensi API payloads.

Every Sensi response model inherits from :class:`SensiBaseModel` which
provides:

* ``alias_generator=to_pascal`` so PascalCase API keys map
  automatically to snake_case fields.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_pascal


class SensiBaseModel(BaseModel):
    """Base for Sensi API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_pascal,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        """Drop ``None`` values so field defaults apply, and keep the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicit raw= from the caller.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
