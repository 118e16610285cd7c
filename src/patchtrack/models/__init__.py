"""Data models for the patch catalog, predictions and summaries."""

from patchtrack.models._base import TrackerEnum, TrackerModel
from patchtrack.models.catalog import (
    Bounds,
    Catalog,
    Category,
    GrowthRange,
    GrowthState,
    GrowthTable,
    Location,
    Patch,
    Region,
)
from patchtrack.models.prediction import CategorySummary, Prediction, SummaryState
from patchtrack.models.produce import INVALID, SCARECROW, WEEDS, Autoweed, CropState, Produce

__all__ = [
    "INVALID",
    "SCARECROW",
    "WEEDS",
    "Autoweed",
    "Bounds",
    "Catalog",
    "Category",
    "CategorySummary",
    "CropState",
    "GrowthRange",
    "GrowthState",
    "GrowthTable",
    "Location",
    "Patch",
    "Prediction",
    "Produce",
    "Region",
    "SummaryState",
    "TrackerEnum",
    "TrackerModel",
]
