"""Internal constants shared across the library."""

#: Root of every store namespace written by the tracker.
CONFIG_GROUP = "timetracking"

#: Store key holding the last observed autoweed flag.
AUTOWEED_KEY = "autoweed"

#: Live-value source id reserved for the autoweed flag.
AUTOWEED_SOURCE_ID = -1

# ------------------------------------------------------------------
# Sampling/tick alignment
#
# These are tied to the polling cadence of the live-value source and are
# preserved exactly.
# ------------------------------------------------------------------

#: Offset (seconds) added to both timestamps before bucketing into ticks.
TICK_OFFSET_SECONDS = 5 * 60

#: A same-valued sample younger than this is not rewritten.
FRESHNESS_WINDOW_SECONDS = 5 * 60

#: Tolerance for stored timestamps slightly ahead of the local clock.
CLOCK_SKEW_GRACE_SECONDS = 30

#: Completion time reported when nothing is known about a category.
UNKNOWN_COMPLETION_TIME = -1


def minutes_to_seconds(minutes: int) -> int:
    """Convert a growth-table tick rate (minutes) to seconds."""
    return minutes * 60
