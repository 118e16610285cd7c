"""State/store layer.

Samples are persisted as ``value:timestamp`` strings in a namespaced
key/value store. This package owns that encoding and the store adapters;
the tracker is the only component that writes through them.
"""

from patchtrack.state.sample import StoredSample
from patchtrack.state.store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "StoredSample"]
