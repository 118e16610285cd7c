"""Live-value sources.

A live value is the instantaneous raw reading of a patch (or of the
account-wide autoweed flag) at poll time. The tracker keeps no history of
its own; everything it knows comes from what it persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from patchtrack._constants import AUTOWEED_SOURCE_ID


class LiveValueSource(Protocol):
    def read(self, source_id: int) -> int: ...


class MappingLiveValues:
    """Mutable dict-backed source.

    Unset ids read as ``0``, matching an unset game variable.
    """

    def __init__(self, values: Mapping[int, int] | None = None, *, autoweed: int = 0) -> None:
        self._values: dict[int, int] = dict(values or {})
        self._values.setdefault(AUTOWEED_SOURCE_ID, autoweed)

    def read(self, source_id: int) -> int:
        return self._values.get(source_id, 0)

    def update(self, values: Mapping[int, int]) -> None:
        self._values.update(values)

    def set_autoweed(self, value: int) -> None:
        self._values[AUTOWEED_SOURCE_ID] = value
