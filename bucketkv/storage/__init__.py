"""Storage engine for bucketkv."""

from .buckets import BucketTable, Entry
from .hasher import Hasher
from .persistence import DiskPersistence
from .store import HashMapStore, SynchronizedStore

__all__ = [
    "BucketTable",
    "DiskPersistence",
    "Entry",
    "HashMapStore",
    "Hasher",
    "SynchronizedStore",
]
