"""Derived, never-persisted prediction and summary models."""

from __future__ import annotations

from pydantic import Field

from patchtrack._constants import UNKNOWN_COMPLETION_TIME
from patchtrack.models._base import TrackerEnum, TrackerModel
from patchtrack.models.produce import CropState, Produce


class SummaryState(TrackerEnum):
    UNKNOWN = -1
    EMPTY = 0
    IN_PROGRESS = 1
    COMPLETED = 2


class Prediction(TrackerModel):
    """Projected state of one patch at query time.

    Parameters
    ----------
    produce : Produce
        What the patch is growing.
    crop_state : CropState
        Sub-state carried over from the growth table.
    done_estimate : int
        Epoch seconds at which the patch reaches its final stage, or ``0``
        when no timed growth applies.
    stage : int
        Projected current stage, ``0 <= stage < stages``.
    stages : int
        Total number of stages.
    """

    produce: Produce
    crop_state: CropState
    done_estimate: int
    stage: int = Field(..., ge=0)
    stages: int = Field(..., ge=1)


class CategorySummary(TrackerModel):
    """Aggregate state of one category.

    ``completion_time`` is ``0`` once everything is ready and ``-1`` when
    nothing is known or nothing is growing.
    """

    state: SummaryState = SummaryState.UNKNOWN
    completion_time: int = UNKNOWN_COMPLETION_TIME
