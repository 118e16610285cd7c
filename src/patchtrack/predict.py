"""Sample decoder.

Turns one stored ``(value, timestamp)`` sample plus the patch's growth
table into a :class:`~patchtrack.models.Prediction`.

Growth advances in ticks of ``T`` seconds (the state's tick rate). Both
the sample time and *now* are bucketed into ticks after adding a fixed
offset; the number of buckets between them is the number of stages the
patch has advanced since it was sampled. All arithmetic is integer.
"""

from __future__ import annotations

from patchtrack._constants import TICK_OFFSET_SECONDS, minutes_to_seconds
from patchtrack.models.catalog import GrowthTable
from patchtrack.models.prediction import Prediction
from patchtrack.models.produce import WEEDS
from patchtrack.state.sample import StoredSample


def decode(
    sample: StoredSample | None,
    table: GrowthTable,
    *,
    autoweed: bool,
    now: int,
) -> Prediction | None:
    """Project *sample* forward to *now*.

    Returns ``None`` when there is no sample, the sample has no usable
    timestamp, or the value does not map to any state in *table*.
    """
    if sample is None or sample.timestamp <= 0:
        return None

    state = table.for_value(sample.value)
    if state is None:
        return None

    stage = state.stage
    stages = state.stages
    tick_rate = minutes_to_seconds(state.tick_rate)

    # Autoweed keeps clearing weeds, so nothing is ever growing there.
    if autoweed and state.produce == WEEDS:
        stage = 0
        stages = 1
        tick_rate = 0

    done_estimate = 0
    if tick_rate > 0:
        tick_now = (now + TICK_OFFSET_SECONDS) // tick_rate
        tick_time = (sample.timestamp + TICK_OFFSET_SECONDS) // tick_rate
        delta = tick_now - tick_time

        done_estimate = (stages - 1 - stage + tick_time) * tick_rate + TICK_OFFSET_SECONDS

        # delta is negative only when the sample is ahead of the local clock
        stage = max(0, min(stage + delta, stages - 1))

    return Prediction(
        produce=state.produce,
        crop_state=state.crop_state,
        done_estimate=done_estimate,
        stage=stage,
        stages=stages,
    )


def decode_stored(
    stored: str | None,
    table: GrowthTable,
    *,
    autoweed: bool,
    now: int,
) -> Prediction | None:
    """Like :func:`decode`, starting from the raw stored string."""
    return decode(StoredSample.parse(stored), table, autoweed=autoweed, now=now)
