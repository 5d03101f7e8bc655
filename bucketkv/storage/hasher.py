"""
Hash Function Module

Maps keys to bucket indices. The arithmetic mirrors the classic
``h = h * 31 + c`` string hash with 32-bit two's-complement overflow, so
a given key always lands in the same bucket for a given bucket count.
"""

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def _to_int32(value: int) -> int:
    """Wrap an arbitrary Python int to a signed 32-bit integer."""
    value &= _INT32_MASK
    return value - 0x100000000 if value & _INT32_SIGN else value


def string_hash(key: str) -> int:
    """
    Compute the signed 32-bit hash of a key.

    Args:
        key: The key to hash

    Returns:
        Signed 32-bit hash value
    """
    acc = 0
    for char in key:
        acc = _to_int32(acc * 31 + ord(char))
    return acc


class Hasher:
    """
    Converts keys to bucket indices for a fixed bucket count.

    A Hasher is bound to one bucket count for its whole life; the store
    builds a new one whenever it resizes.

    Attributes:
        bucket_count: Number of buckets indices are reduced to
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

    def hash(self, key: str) -> int:
        """
        Return the bucket index for a key, in ``range(bucket_count)``.

        Time Complexity: O(k) where k = key length
        """
        return abs(string_hash(key)) % self.bucket_count
