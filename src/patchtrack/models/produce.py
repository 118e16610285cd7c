"""Produce kinds and growth vocabulary."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator

from patchtrack.models._base import TrackerEnum, TrackerModel


class CropState(StrEnum):
    GROWING = "growing"
    HARVESTABLE = "harvestable"
    DISEASED = "diseased"
    DEAD = "dead"
    FILLING = "filling"
    EMPTY = "empty"


class Autoweed(TrackerEnum):
    """Account-wide autoweed setting as exposed by the live-value source."""

    UNKNOWN = -1
    OFF = 0
    ON = 1


class Produce(TrackerModel):
    """What a patch is growing.

    Parameters
    ----------
    name : str
        Display name used in notifications (e.g. ``"Potato"``).
    item_id : int
        Item identifier of the produce. Negative values mark an invalid
        item; patches growing one are ignored by aggregation.
    """

    name: str = Field(..., min_length=1)
    item_id: int

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("produce name must be non-empty")
        return name

    @property
    def is_valid(self) -> bool:
        return self.item_id >= 0

    @property
    def is_placeholder(self) -> bool:
        """Weeds and scarecrows occupy a patch without being a crop."""
        return self in (WEEDS, SCARECROW)

    @classmethod
    def coerce(cls, value: Any) -> Any:
        """Resolve reserved marker names (``"weeds"``, ``"scarecrow"``) for validators."""
        if isinstance(value, str):
            marker = RESERVED_PRODUCE.get(value.strip().lower())
            if marker is None:
                raise ValueError(f"unknown reserved produce {value!r}")
            return marker
        return value


WEEDS = Produce(name="Weeds", item_id=6055)
SCARECROW = Produce(name="Scarecrow", item_id=6059)
INVALID = Produce(name="Invalid", item_id=-1)

RESERVED_PRODUCE: dict[str, Produce] = {
    "weeds": WEEDS,
    "scarecrow": SCARECROW,
    "invalid": INVALID,
}
