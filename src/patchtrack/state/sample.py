"""``value:timestamp`` sample encoding.

Parsing is lenient by contract: anything malformed is reported as absent,
never raised, so a corrupt store entry degrades a patch to "unknown".
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

_INT_RE = re.compile(r"[+-]?\d+")

SEPARATOR = ":"


def parse_int(text: str) -> int | None:
    """Strict base-10 integer parse; ``None`` instead of ``ValueError``."""
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


def split_fields(stored: str | None) -> tuple[str, str] | None:
    """Split a stored sample into its raw value and timestamp fields."""
    if stored is None:
        return None
    parts = stored.split(SEPARATOR)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


class StoredSample(BaseModel):
    """A live value and the epoch second it was captured."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: int
    timestamp: int

    def encode(self) -> str:
        return f"{self.value}{SEPARATOR}{self.timestamp}"

    @classmethod
    def parse(cls, stored: str | None) -> StoredSample | None:
        """Decode a stored string, or ``None`` when absent or malformed."""
        fields = split_fields(stored)
        if fields is None:
            return None
        value = parse_int(fields[0])
        timestamp = parse_int(fields[1])
        if value is None or timestamp is None:
            return None
        return cls(value=value, timestamp=timestamp)
