"""Base model and enum for patchtrack models.

Every catalog and derived model inherits from :class:`TrackerModel`,
which is frozen (catalog objects are shared read-only between the
tracker and its callers) and rejects unknown fields so typos in catalog
documents surface as errors instead of silently using defaults.

Integer enums inherit from :class:`TrackerEnum`, which adds an
``UNKNOWN`` member at ``-1`` and a ``_missing_`` hook returning
``UNKNOWN`` for any value without a mapped member.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict


class TrackerEnum(enum.IntEnum):
    """Base for integer state enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    """

    @classmethod
    def _missing_(cls, value: object) -> TrackerEnum:
        if hasattr(cls, "UNKNOWN"):
            unknown: TrackerEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class TrackerModel(BaseModel):
    """Frozen, strict base for catalog and prediction models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )
