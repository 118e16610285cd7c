"""Custom exception hierarchy for patchtrack.

The tracker core never raises for bad persisted data; these are only
raised at the edges (configuration, catalog documents, store I/O).
"""

from __future__ import annotations


class PatchTrackError(Exception):
    """Base exception for all patchtrack errors."""


class PatchTrackConfigError(PatchTrackError):
    """Invalid or missing configuration."""


class CatalogError(PatchTrackError):
    """Static catalog document is inconsistent or cannot be loaded."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class StoreError(PatchTrackError):
    """Key/value store could not be written."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)
