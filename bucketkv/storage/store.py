"""
Hash Map Store Module

Coordinates the Hasher, BucketTable and DiskPersistence components.

Write path:
    hash key -> insert/update/remove in bucket -> maybe resize -> save to disk

Read path:
    hash key -> look up in bucket (no disk access)

Capacity starts at 16 buckets and doubles whenever inserting a new key
pushes the load factor (entries / buckets) above 0.75. The table never
shrinks.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from .buckets import BucketTable
from .hasher import Hasher
from .persistence import DiskPersistence
from ..config.settings import settings

logger = logging.getLogger(__name__)


class HashMapStore:
    """
    In-memory key-value store using separate chaining.

    Every mutation is written through to disk as a full snapshot. Data is
    loaded from disk when the store is created.

    The store performs no locking; callers sharing one instance between
    threads must serialize access (see SynchronizedStore).

    Time Complexity:
        get / has / update / delete: O(m), m = entries in the key's bucket
        set: O(m) amortized, O(n) on the insert that triggers a resize
        listing and prefix queries: O(n)

    Attributes:
        load_factor_threshold: Load factor above which the table doubles
    """

    def __init__(
            self,
            file_path: str = None,
            initial_buckets: int = None,
            load_factor_threshold: float = None,
            persistence: DiskPersistence = None,
    ):
        """
        Initialize the store and replay any persisted entries.

        Args:
            file_path: Data file path (default from settings.DATA_FILE);
                ignored when persistence is given
            initial_buckets: Starting bucket count (default from settings)
            load_factor_threshold: Resize threshold (default from settings)
            persistence: Preconfigured DiskPersistence instance

        Raises:
            ValueError: If initial_buckets or load_factor_threshold is not positive
        """
        bucket_count = initial_buckets if initial_buckets is not None else settings.INITIAL_BUCKETS
        threshold = (
            load_factor_threshold if load_factor_threshold is not None
            else settings.LOAD_FACTOR_THRESHOLD
        )
        if threshold <= 0:
            raise ValueError("load_factor_threshold must be positive")

        self.load_factor_threshold = threshold
        self._hasher = Hasher(bucket_count)
        self._table = BucketTable(bucket_count)
        self._size = 0
        self._persistence = persistence if persistence is not None else DiskPersistence(file_path)

        self._load_from_disk()

    # ------------------------------------------------------------------
    # Capacity management
    # ------------------------------------------------------------------

    @property
    def bucket_count(self) -> int:
        """Current number of buckets."""
        return self._hasher.bucket_count

    @property
    def file_path(self) -> str:
        """Path of the backing data file."""
        return self._persistence.file_path

    def _load_factor(self) -> float:
        return self._size / self.bucket_count

    def _should_resize(self) -> bool:
        return self._load_factor() > self.load_factor_threshold

    def _resize(self) -> None:
        """Double the bucket count and rehash every entry into a fresh table."""
        entries = self._table.all_entries()
        old_count = self.bucket_count
        new_count = old_count * 2

        self._hasher = Hasher(new_count)
        self._table = BucketTable(new_count)
        for entry in entries:
            self._table.insert_or_update(self._hasher.hash(entry.key), entry.key, entry.value)

        logger.info(
            f"Resized from {old_count} to {new_count} buckets. "
            f"Load factor: {self._load_factor():.2f}"
        )

    def _set_without_save(self, key: str, value: str) -> bool:
        """
        Insert or overwrite a key, resizing if a new key crossed the threshold.

        Returns:
            True if the key was new
        """
        added = self._table.insert_or_update(self._hasher.hash(key), key, value)
        if added:
            self._size += 1
            if self._should_resize():
                self._resize()
        return added

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _save_to_disk(self) -> None:
        self._persistence.save(self._table.all_entries())

    def _load_from_disk(self) -> None:
        entries = self._persistence.load()
        for entry in entries:
            self._set_without_save(entry.key, entry.value)
        if entries:
            logger.info(
                f"Loaded {self._size} entries from {self.file_path} "
                f"into {self.bucket_count} buckets"
            )

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def set(self, key: str, value: str) -> None:
        """
        Insert a new key or overwrite an existing one, then persist.

        Only a new key counts towards the load factor, so overwriting can
        never trigger a resize.
        """
        self._set_without_save(key, value)
        self._save_to_disk()

    def get(self, key: str) -> Optional[str]:
        """
        Retrieve the value for a key.

        Returns:
            The value if found, None otherwise
        """
        return self._table.find(self._hasher.hash(key), key)

    def update(self, key: str, value: str) -> bool:
        """
        Overwrite the value of an existing key.

        Returns:
            True if the key existed and was updated, False otherwise
            (nothing is changed or written in that case)
        """
        bucket_index = self._hasher.hash(key)
        if not self._table.contains(bucket_index, key):
            return False

        self._table.insert_or_update(bucket_index, key, value)
        self._save_to_disk()
        return True

    def delete(self, key: str) -> bool:
        """
        Remove a key. The bucket count is left unchanged.

        Returns:
            True if the key was deleted, False if it didn't exist
        """
        if not self._table.remove(self._hasher.hash(key), key):
            return False

        self._size -= 1
        self._save_to_disk()
        return True

    def has(self, key: str) -> bool:
        """Check if a key exists."""
        return self._table.contains(self._hasher.hash(key), key)

    def size(self) -> int:
        """Get the current number of keys in the store."""
        return self._size

    # ------------------------------------------------------------------
    # Listing and introspection
    # ------------------------------------------------------------------

    def get_all_keys(self) -> List[str]:
        """Get every key, in bucket order."""
        return [entry.key for entry in self._table.all_entries()]

    def get_all(self) -> Dict[str, str]:
        """Get a copy of every key-value pair."""
        return {entry.key: entry.value for entry in self._table.all_entries()}

    def get_bucket_for_key(self, key: str) -> int:
        """Get the bucket index a key is (or would be) stored in."""
        return self._hasher.hash(key)

    def get_keys_by_prefix(self, prefix: str) -> List[str]:
        """Get all keys that start with prefix."""
        return [key for key in self.get_all_keys() if key.startswith(prefix)]

    def get_user_data(self, user_prefix: str) -> Dict[str, str]:
        """
        Group keys of the form ``<user_prefix>_<field>`` into a dict.

        Example:
            >>> store.set("user1_name", "A")
            >>> store.set("user1_phone", "B")
            >>> store.get_user_data("user1")
            {'name': 'A', 'phone': 'B'}
        """
        full_prefix = user_prefix + "_"
        data = {}
        for key in self.get_keys_by_prefix(full_prefix):
            value = self.get(key)
            data[key[len(full_prefix):]] = value if value is not None else ""
        return data

    def visualize_buckets(self) -> Dict[str, Any]:
        """
        Describe the in-memory bucket layout.

        Returns:
            Dictionary containing:
            - totalBuckets: Current bucket count
            - totalItems: Number of stored entries
            - buckets: Per-bucket structure (bucketIndex, items, itemCount)
            - hashDistribution: bucket index -> item count
        """
        structure = self._table.snapshot_structure()
        distribution = {bucket["bucketIndex"]: bucket["itemCount"] for bucket in structure}

        return {
            "totalBuckets": self.bucket_count,
            "totalItems": sum(distribution.values()),
            "buckets": structure,
            "hashDistribution": distribution,
        }

    def get_load_factor_info(self) -> Dict[str, Any]:
        """
        Report the current load factor.

        Returns:
            Dictionary containing:
            - currentLoadFactor: entries / buckets
            - threshold: Resize threshold
            - totalItems: Number of stored entries
            - totalBuckets: Current bucket count
            - shouldResize: Whether inserting one more new key would trigger a resize
        """
        current = self._load_factor()
        return {
            "currentLoadFactor": current,
            "threshold": self.load_factor_threshold,
            "totalItems": self._size,
            "totalBuckets": self.bucket_count,
            "shouldResize": (self._size + 1) / self.bucket_count > self.load_factor_threshold,
        }


class SynchronizedStore:
    """
    Thread-safe facade over a HashMapStore.

    Every call takes the same re-entrant lock, so a single store can be
    shared by several threads. Not needed when all calls come from one
    asyncio event loop.

    Usage:
        store = SynchronizedStore(HashMapStore("./data/store.txt"))
        store.set("key", "value")
    """

    def __init__(self, store: HashMapStore):
        self.store = store
        self._lock = threading.RLock()

    @property
    def bucket_count(self) -> int:
        with self._lock:
            return self.store.bucket_count

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self.store.set(key, value)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self.store.get(key)

    def update(self, key: str, value: str) -> bool:
        with self._lock:
            return self.store.update(key, value)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self.store.delete(key)

    def has(self, key: str) -> bool:
        with self._lock:
            return self.store.has(key)

    def size(self) -> int:
        with self._lock:
            return self.store.size()

    def get_all_keys(self) -> List[str]:
        with self._lock:
            return self.store.get_all_keys()

    def get_all(self) -> Dict[str, str]:
        with self._lock:
            return self.store.get_all()

    def get_bucket_for_key(self, key: str) -> int:
        with self._lock:
            return self.store.get_bucket_for_key(key)

    def get_keys_by_prefix(self, prefix: str) -> List[str]:
        with self._lock:
            return self.store.get_keys_by_prefix(prefix)

    def get_user_data(self, user_prefix: str) -> Dict[str, str]:
        with self._lock:
            return self.store.get_user_data(user_prefix)

    def visualize_buckets(self) -> Dict[str, Any]:
        with self._lock:
            return self.store.visualize_buckets()

    def get_load_factor_info(self) -> Dict[str, Any]:
        with self._lock:
            return self.store.get_load_factor_info()
