"""patchtrack - Growth prediction and ready notifications for timed patches."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("patchtrack")
except PackageNotFoundError:
    __version__ = "0+local"
from patchtrack.config import TrackerConfig
from patchtrack.exceptions import (
    CatalogError,
    PatchTrackConfigError,
    PatchTrackError,
    StoreError,
)
from patchtrack.models import (
    SCARECROW,
    WEEDS,
    Autoweed,
    Catalog,
    Category,
    CategorySummary,
    CropState,
    GrowthState,
    GrowthTable,
    Location,
    Patch,
    Prediction,
    Produce,
    Region,
    SummaryState,
)
from patchtrack.notify import CallbackNotifier, LoggingNotifier, MqttNotifier, Notifier
from patchtrack.predict import decode
from patchtrack.sources import LiveValueSource, MappingLiveValues
from patchtrack.state import JsonFileStore, KeyValueStore, MemoryStore, StoredSample
from patchtrack.tracker import PatchTracker

__all__ = [
    "__version__",
    "SCARECROW",
    "WEEDS",
    "Autoweed",
    "CallbackNotifier",
    "Catalog",
    "CatalogError",
    "Category",
    "CategorySummary",
    "CropState",
    "GrowthState",
    "GrowthTable",
    "JsonFileStore",
    "KeyValueStore",
    "LiveValueSource",
    "Location",
    "LoggingNotifier",
    "MappingLiveValues",
    "MemoryStore",
    "MqttNotifier",
    "Notifier",
    "Patch",
    "PatchTrackConfigError",
    "PatchTrackError",
    "PatchTracker",
    "Prediction",
    "Produce",
    "Region",
    "StoreError",
    "StoredSample",
    "SummaryState",
    "TrackerConfig",
    "decode",
]
