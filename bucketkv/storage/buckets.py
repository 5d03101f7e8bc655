"""
Bucket Table Module

Fixed-size array of buckets with separate chaining. Each bucket is a
plain list of Entry objects in insertion order; a key appears in at most
one bucket.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class Entry:
    """A single key-value pair stored in a bucket."""
    key: str
    value: str


class BucketTable:
    """
    Ordered collection of buckets addressed by index.

    The table never decides where a key goes; callers pass the bucket
    index computed by a Hasher bound to the same bucket count.

    Attributes:
        bucket_count: Number of buckets in the table
    """

    def __init__(self, bucket_count: int = 16):
        """
        Args:
            bucket_count: Number of buckets (must be positive)

        Raises:
            ValueError: If bucket_count is not positive
        """
        if bucket_count <= 0:
            raise ValueError("bucket_count must be positive")
        self.bucket_count = bucket_count
        self._buckets: List[List[Entry]] = [[] for _ in range(bucket_count)]

    def _find_entry(self, bucket_index: int, key: str) -> Optional[Entry]:
        for entry in self._buckets[bucket_index]:
            if entry.key == key:
                return entry
        return None

    def insert_or_update(self, bucket_index: int, key: str, value: str) -> bool:
        """
        Store a value in a bucket, overwriting an existing entry in place.

        Args:
            bucket_index: Index of the target bucket
            key: The key to store
            value: The value to associate with the key

        Returns:
            True if a new entry was appended, False if an existing one was updated

        Time Complexity: O(m) where m = entries in the bucket
        """
        entry = self._find_entry(bucket_index, key)
        if entry is not None:
            entry.value = value
            return False

        self._buckets[bucket_index].append(Entry(key, value))
        return True

    def find(self, bucket_index: int, key: str) -> Optional[str]:
        """
        Look up a key within a bucket.

        Returns:
            The value if found, None otherwise
        """
        entry = self._find_entry(bucket_index, key)
        return entry.value if entry is not None else None

    def remove(self, bucket_index: int, key: str) -> bool:
        """
        Remove a key from a bucket, keeping the order of the other entries.

        Returns:
            True if the key was removed, False if it was not present
        """
        bucket = self._buckets[bucket_index]
        for position, entry in enumerate(bucket):
            if entry.key == key:
                del bucket[position]
                return True
        return False

    def contains(self, bucket_index: int, key: str) -> bool:
        """Check whether a bucket holds the key."""
        return self._find_entry(bucket_index, key) is not None

    def all_entries(self) -> List[Entry]:
        """
        Flatten the table into a list of entries.

        Order is bucket 0 first, then 1, 2, ...; insertion order inside a
        bucket. The returned Entry objects are copies.
        """
        return [
            Entry(entry.key, entry.value)
            for bucket in self._buckets
            for entry in bucket
        ]

    def size(self) -> int:
        """Get the total number of entries across all buckets."""
        return sum(len(bucket) for bucket in self._buckets)

    def snapshot_structure(self) -> List[Dict[str, Any]]:
        """
        Describe every bucket for visualization.

        Returns:
            One dict per bucket with bucketIndex, items (key -> value)
            and itemCount
        """
        return [
            {
                "bucketIndex": index,
                "items": {entry.key: entry.value for entry in bucket},
                "itemCount": len(bucket),
            }
            for index, bucket in enumerate(self._buckets)
        ]
