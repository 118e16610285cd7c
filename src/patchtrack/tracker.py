"""Patch tracker.

Owns the write path (live values into the store), per-category
aggregation, and ready notifications. It is the only component that
writes samples or holds mutable tracking state.

Store layout::

    <group>.<username>.autoweed            = <autoweed ordinal>
    <group>.<username>.<regionId>.<patch>  = <value>:<unix time>
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Callable

from patchtrack._constants import (
    AUTOWEED_KEY,
    AUTOWEED_SOURCE_ID,
    CLOCK_SKEW_GRACE_SECONDS,
    FRESHNESS_WINDOW_SECONDS,
    UNKNOWN_COMPLETION_TIME,
)
from patchtrack.config import TrackerConfig
from patchtrack.models.catalog import Catalog, Category, Location, Patch
from patchtrack.models.prediction import CategorySummary, Prediction, SummaryState
from patchtrack.models.produce import Autoweed, Produce
from patchtrack.notify import Notifier
from patchtrack.predict import decode_stored
from patchtrack.sources import LiveValueSource
from patchtrack.state.sample import StoredSample, parse_int, split_fields
from patchtrack.state.store import KeyValueStore

_logger = logging.getLogger(__name__)


def _unix_now() -> int:
    return int(time.time())


def ready_message(produce: Produce, count: int) -> str:
    """Notification text for *count* patches of *produce* becoming ready."""
    verb = "es are" if count > 1 else " is"
    return f"{count} {produce.name} patch{verb} ready for harvest"


def is_fresh(stored_timestamp: int, now: int) -> bool:
    """Whether a stored sample is recent enough to skip rewriting."""
    return stored_timestamp + FRESHNESS_WINDOW_SECONDS > now and now + CLOCK_SKEW_GRACE_SECONDS > stored_timestamp


class PatchTracker:
    """Track patch samples and aggregate them per category.

    Usage::

        tracker = PatchTracker(config, catalog, store, live_values, notifier)
        if tracker.ingest(location):
            redraw(tracker.get_summary(Category.HERB))

    Not thread-safe: callers must serialize calls.
    """

    def __init__(
        self,
        config: TrackerConfig,
        catalog: Catalog,
        store: KeyValueStore,
        live_values: LiveValueSource,
        notifier: Notifier,
        *,
        clock: Callable[[], int] = _unix_now,
    ) -> None:
        self._config = config
        self._catalog = catalog
        self._store = store
        self._live_values = live_values
        self._notifier = notifier
        self._clock = clock

        self._summaries: dict[Category, SummaryState] = {}
        # Time at which every patch of a category is ready, or -1 when
        # nothing is known about any patch of it.
        self._completion_times: dict[Category, int] = {}
        # Patches whose ready transition already produced a notification.
        self._notified: set[tuple[int, int]] = set()

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(self, location: Location) -> bool:
        """Persist fresh live values for the region around *location*.

        Returns ``True`` when anything in the store changed, in which case
        the category summaries have already been recomputed.
        """
        changed = self._sync_autoweed()

        region = self._catalog.region(location.region_id)
        if region is not None and region.is_in_bounds(location):
            namespace = self._config.namespace(region.region_id)
            now = self._clock()
            for patch in region.patches:
                if self._write_sample(namespace, patch, now):
                    changed = True

        if changed:
            self.refresh_summaries()

        return changed

    def _sync_autoweed(self) -> bool:
        namespace = self._config.namespace()
        autoweed = str(self._live_values.read(AUTOWEED_SOURCE_ID))
        if autoweed == self._store.get(namespace, AUTOWEED_KEY):
            return False
        self._store.set(namespace, AUTOWEED_KEY, autoweed)
        _logger.debug("Autoweed flag changed to %s", autoweed)
        return True

    def _write_sample(self, namespace: str, patch: Patch, now: int) -> bool:
        key = str(patch.key)
        value = self._live_values.read(patch.key)
        live = str(value)

        # Rewrite unless the same value was stored less than five minutes ago.
        fields = split_fields(self._store.get(namespace, key))
        if fields is not None and fields[0] == live:
            stored_timestamp = parse_int(fields[1]) or 0
            if is_fresh(stored_timestamp, now):
                return False

        self._store.set(namespace, key, StoredSample(value=value, timestamp=now).encode())
        _logger.debug("Stored sample region=%s patch=%s value=%s", patch.region_id, patch.key, live)
        return True

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def _autoweed_enabled(self) -> bool:
        stored = self._store.get(self._config.namespace(), AUTOWEED_KEY)
        return stored == str(int(Autoweed.ON))

    def predict(self, patch: Patch) -> Prediction | None:
        """Project the stored sample of *patch* to the current time."""
        stored = self._store.get(self._config.namespace(patch.region_id), str(patch.key))
        return decode_stored(
            stored,
            self._catalog.table_for(patch),
            autoweed=self._autoweed_enabled(),
            now=self._clock(),
        )

    def predict_category(self, category: Category) -> dict[Patch, Prediction | None]:
        return {patch: self.predict(patch) for patch in self._catalog.categories()[category]}

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def refresh_summaries(self) -> None:
        """Recompute every category summary and send ready notifications."""
        for category, patches in self._catalog.categories().items():
            self._refresh_category(category, patches)

    def _refresh_category(self, category: Category, patches: tuple[Patch, ...]) -> None:
        max_completion_time = 0
        all_unknown = True
        all_empty = True

        complete: Counter[Produce] = Counter()
        now = self._clock()

        for patch in patches:
            prediction = self.predict(patch)
            if prediction is None or not prediction.produce.is_valid:
                continue  # unknown state

            all_unknown = False

            if prediction.produce.is_placeholder:
                continue

            all_empty = False
            max_completion_time = max(max_completion_time, prediction.done_estimate)

            if prediction.done_estimate < now:
                if patch.notify and patch.identity not in self._notified:
                    self._notified.add(patch.identity)
                    complete[prediction.produce] += 1
            else:
                self._notified.discard(patch.identity)

        for produce, count in complete.items():
            message = ready_message(produce, count)
            _logger.debug("Notifying category=%s: %s", category, message)
            self._notifier.notify(message)

        if all_unknown:
            summary = CategorySummary(state=SummaryState.UNKNOWN, completion_time=UNKNOWN_COMPLETION_TIME)
        elif all_empty:
            summary = CategorySummary(state=SummaryState.EMPTY, completion_time=UNKNOWN_COMPLETION_TIME)
        elif max_completion_time <= self._clock():
            summary = CategorySummary(state=SummaryState.COMPLETED, completion_time=0)
        else:
            summary = CategorySummary(state=SummaryState.IN_PROGRESS, completion_time=max_completion_time)

        if self._summaries.get(category) != summary.state:
            _logger.debug("Category %s is now %s", category, summary.state.name)
        self._summaries[category] = summary.state
        self._completion_times[category] = summary.completion_time

    def reset_and_recompute(self) -> None:
        """Forget all summaries and rebuild them from the stored samples."""
        self._summaries.clear()
        self._completion_times.clear()
        self.refresh_summaries()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_summary(self, category: Category) -> SummaryState:
        return self._summaries.get(category, SummaryState.UNKNOWN)

    def get_completion_time(self, category: Category) -> int:
        """Time at which every patch of *category* is ready.

        ``0`` once they all are, ``-1`` when unknown.
        """
        return self._completion_times.get(category, UNKNOWN_COMPLETION_TIME)

    def get_category_summary(self, category: Category) -> CategorySummary:
        return CategorySummary(
            state=self.get_summary(category),
            completion_time=self.get_completion_time(category),
        )
