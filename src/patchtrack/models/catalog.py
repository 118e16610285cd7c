"""Static patch catalog: regions, patches, categories and growth tables.

The catalog is read-only configuration. Mutable per-patch state (whether a
ready notification was already sent) is owned by the tracker, never by
these models.
"""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator

from patchtrack.exceptions import CatalogError
from patchtrack.models._base import TrackerModel
from patchtrack.models.produce import CropState, Produce


class Category(StrEnum):
    """Aggregate reporting groups (one summary per member)."""

    HERB = "herb"
    TREE = "tree"
    FRUIT_TREE = "fruit_tree"
    SPECIAL = "special"
    BUSH = "bush"
    GRAPE = "grape"
    ALLOTMENT = "allotment"
    FLOWER = "flower"
    HOPS = "hops"
    BIRDHOUSE = "birdhouse"


class GrowthState(TrackerModel):
    """Decoded growth state of a single live value.

    ``tick_rate`` is the duration of one stage in minutes; ``0`` means the
    state does not advance on its own (fully grown, dead, empty, ...).
    """

    produce: Produce
    crop_state: CropState = CropState.GROWING
    stage: int = Field(default=0, ge=0)
    stages: int = Field(default=1, ge=1)
    tick_rate: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_stage(self) -> GrowthState:
        if self.stage >= self.stages:
            raise ValueError(f"stage {self.stage} out of range for {self.stages} stages")
        return self


class GrowthRange(TrackerModel):
    """Inclusive interval of live values sharing one produce and timing.

    The stage of a value inside the range is
    ``stage_offset + stage_step * (value - start)``; a ``stage_step`` of ``0``
    maps every value of the range to the same stage.
    """

    start: int
    end: int
    produce: Produce
    crop_state: CropState = CropState.GROWING
    stage_offset: int = Field(default=0, ge=0)
    stage_step: int = Field(default=1, ge=0)
    stages: int = Field(default=1, ge=1)
    tick_rate: int = Field(default=0, ge=0)

    @field_validator("produce", mode="before")
    @classmethod
    def _reserved_produce(cls, value: Any) -> Any:
        return Produce.coerce(value)

    @model_validator(mode="after")
    def _check_interval(self) -> GrowthRange:
        if self.end < self.start:
            raise ValueError(f"range end {self.end} is before start {self.start}")
        if self.stage_offset + self.stage_step * (self.end - self.start) >= self.stages:
            raise ValueError(f"range {self.start}-{self.end} reaches past {self.stages} stages")
        return self

    def contains(self, value: int) -> bool:
        return self.start <= value <= self.end

    def state_for(self, value: int) -> GrowthState:
        return GrowthState(
            produce=self.produce,
            crop_state=self.crop_state,
            stage=self.stage_offset + self.stage_step * (value - self.start),
            stages=self.stages,
            tick_rate=self.tick_rate,
        )


class GrowthTable(TrackerModel):
    """Mapping from a patch's raw live value to its :class:`GrowthState`."""

    name: str
    ranges: tuple[GrowthRange, ...] = ()

    @model_validator(mode="after")
    def _reject_overlaps(self) -> GrowthTable:
        ordered = sorted(self.ranges, key=lambda r: r.start)
        for previous, current in zip(ordered, ordered[1:], strict=False):
            if current.start <= previous.end:
                raise CatalogError(
                    f"growth table {self.name!r}: range {current.start}-{current.end} "
                    f"overlaps {previous.start}-{previous.end}"
                )
        return self

    def for_value(self, value: int) -> GrowthState | None:
        """Return the growth state for *value*, or ``None`` when unmapped."""
        for growth_range in self.ranges:
            if growth_range.contains(value):
                return growth_range.state_for(value)
        return None


class Location(TrackerModel):
    """Where the observer currently is."""

    region_id: int
    x: int
    y: int
    plane: int = 0


class Bounds(TrackerModel):
    """Inclusive rectangle inside a region, optionally limited to one plane."""

    x_min: int
    x_max: int
    y_min: int
    y_max: int
    plane: int | None = None

    def contains(self, location: Location) -> bool:
        if self.plane is not None and location.plane != self.plane:
            return False
        return self.x_min <= location.x <= self.x_max and self.y_min <= location.y <= self.y_max


class Patch(TrackerModel):
    """One independently timed resource.

    Parameters
    ----------
    key : int
        Identifier of the patch's live-value source. Also the store key of
        its samples (stringified). Non-negative; negative ids are reserved
        for account-wide sources such as autoweed.
    name : str
        Human-readable label.
    region_id : int
        Owning region; namespaces the stored samples.
    category : Category
        Aggregate group the patch reports into.
    table : str
        Name of the growth table decoding the patch's live values.
    notify : bool
        Whether a ready transition should raise a notification.
    """

    key: int = Field(..., ge=0)
    name: str = ""
    region_id: int
    category: Category
    table: str
    notify: bool = True

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("table")
    @classmethod
    def _strip_table(cls, value: str) -> str:
        return value.strip()

    @property
    def identity(self) -> tuple[int, int]:
        return (self.region_id, self.key)


class Region(TrackerModel):
    region_id: int
    name: str = ""
    bounds: Bounds | None = None
    patches: tuple[Patch, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _inherit_region_id(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "region_id" not in values:
            return values
        patches = values.get("patches")
        if not isinstance(patches, (list, tuple)):
            return values
        merged = dict(values)
        merged["patches"] = [
            {**patch, "region_id": patch.get("region_id", values["region_id"])} if isinstance(patch, dict) else patch
            for patch in patches
        ]
        return merged

    @model_validator(mode="after")
    def _check_patches(self) -> Region:
        for patch in self.patches:
            if patch.region_id != self.region_id:
                raise CatalogError(f"patch {patch.key} declares region {patch.region_id}, listed under {self.region_id}")
        return self

    def is_in_bounds(self, location: Location) -> bool:
        if location.region_id != self.region_id:
            return False
        return self.bounds is None or self.bounds.contains(location)


class Catalog(TrackerModel):
    """The full static catalog consumed by the tracker."""

    regions: tuple[Region, ...] = ()
    tables: dict[str, GrowthTable] = Field(default_factory=dict)

    @field_validator("tables", mode="before")
    @classmethod
    def _name_tables(cls, value: Any) -> Any:
        # Tables may be given as {name: [ranges...]} in catalog documents.
        if not isinstance(value, dict):
            return value
        named: dict[str, Any] = {}
        for name, table in value.items():
            if isinstance(table, (list, tuple)):
                named[name] = {"name": name, "ranges": table}
            elif isinstance(table, dict):
                named[name] = {"name": name, **table}
            else:
                named[name] = table
        return named

    @model_validator(mode="after")
    def _check_references(self) -> Catalog:
        region_ids: set[int] = set()
        identities: set[tuple[int, int]] = set()
        for region in self.regions:
            if region.region_id in region_ids:
                raise CatalogError(f"duplicate region {region.region_id}")
            region_ids.add(region.region_id)
            for patch in region.patches:
                if patch.table not in self.tables:
                    raise CatalogError(f"patch {patch.key} in region {region.region_id} uses unknown table {patch.table!r}")
                if patch.identity in identities:
                    raise CatalogError(f"duplicate patch {patch.key} in region {region.region_id}")
                identities.add(patch.identity)
        return self

    def region(self, region_id: int) -> Region | None:
        for region in self.regions:
            if region.region_id == region_id:
                return region
        return None

    def patches(self) -> tuple[Patch, ...]:
        return tuple(patch for region in self.regions for patch in region.patches)

    def categories(self) -> dict[Category, tuple[Patch, ...]]:
        """Every category mapped to its member patches, in catalog order."""
        grouped: dict[Category, list[Patch]] = {category: [] for category in Category}
        for patch in self.patches():
            grouped[patch.category].append(patch)
        return {category: tuple(patches) for category, patches in grouped.items()}

    def table_for(self, patch: Patch) -> GrowthTable:
        return self.tables[patch.table]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Catalog:
        """Validate a catalog document.

        Raises
        ------
        CatalogError
            If the document is malformed or references are inconsistent.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise CatalogError(f"invalid catalog: {exc}") from exc

    @classmethod
    def from_json_file(cls, path: str | Path) -> Catalog:
        file_path = Path(path)
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CatalogError(f"cannot read catalog: {exc}", path=str(file_path)) from exc
        if not isinstance(data, dict):
            raise CatalogError("catalog document must be a JSON object", path=str(file_path))
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise CatalogError(f"invalid catalog: {exc}", path=str(file_path)) from exc
        except CatalogError as exc:
            raise CatalogError(str(exc), path=str(file_path)) from exc
