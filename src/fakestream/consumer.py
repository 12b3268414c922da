"""
PartitionLevelConsumer - Offset-based batch fetches over a PartitionStore.

The consumer keeps no read cursor. Callers thread ``batch.next_offset`` into
the next call, so the same (start_offset, max_batch_size) always returns the
same batch. The store is immutable, so concurrent fetches need no locking.
"""

import logging
from typing import Optional

from .batch import MessageBatch
from .storage.partition import PartitionStore

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


class PartitionLevelConsumer:
    """Serves contiguous slices of one partition, like a real stream consumer."""

    def __init__(self, store: PartitionStore, default_batch_size: int = DEFAULT_BATCH_SIZE):
        if default_batch_size < 1:
            raise ValueError(f"default_batch_size must be >= 1, got {default_batch_size}")
        self.store = store
        self.default_batch_size = default_batch_size
        self.closed = False

    @property
    def partition_id(self) -> int:
        return self.store.partition_id

    def fetch(self, start_offset: int, max_batch_size: int, timeout_ms: int = 0) -> MessageBatch:
        """
        Fetch up to max_batch_size messages starting at start_offset.

        Args:
            start_offset: First offset to return (may be past the end)
            max_batch_size: Upper bound on the number of messages returned
            timeout_ms: Accepted for interface compatibility; ignored

        Returns:
            MessageBatch with offsets [start_offset, end) and next_offset=end,
            or an empty batch with next_offset=start_offset at end of data

        Raises:
            ValueError: If start_offset or max_batch_size is negative
        """
        if start_offset < 0:
            raise ValueError(f"start_offset must be >= 0, got {start_offset}")
        if max_batch_size < 0:
            raise ValueError(f"max_batch_size must be >= 0, got {max_batch_size}")

        size = self.store.size
        if start_offset >= size:
            # Nothing past the end; the cursor stays where it is
            return MessageBatch.empty(start_offset)

        end_offset = min(start_offset + max_batch_size, size)
        offsets, messages = self.store.slice(start_offset, end_offset)
        logger.debug(
            "Fetched offsets [%d, %d) from partition %d",
            start_offset, end_offset, self.partition_id,
        )
        return MessageBatch(messages=messages, offsets=offsets, next_offset=end_offset)

    def fetch_messages(self, start_offset: int, timeout_ms: int = 0,
                       max_batch_size: Optional[int] = None) -> MessageBatch:
        """Fetch a batch capped at the consumer's default batch size."""
        if max_batch_size is None:
            max_batch_size = self.default_batch_size
        return self.fetch(start_offset, max_batch_size, timeout_ms)

    def close(self):
        """Mark the consumer closed. All data is resident, so nothing is released."""
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self):
        return (
            f"PartitionLevelConsumer(partition_id={self.partition_id}, "
            f"size={self.store.size}, default_batch_size={self.default_batch_size})"
        )
