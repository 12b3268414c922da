"""
PartitionStore - The records of one stream partition, held in memory.

A PartitionStore is responsible for:
1. Pulling every decoded record from a fixed record source, in stream order
2. Keeping only the records the partitioner assigns to this partition
3. Serializing each kept record and giving it the next contiguous offset
4. Degrading to an empty partition when the source cannot be loaded

The store is built once, eagerly, in ``__init__`` and is read-only afterwards.
Local offsets are dense: ``offsets[i] == i`` for every stored record, even
though the global stream skips records that belong to other partitions.
"""

import enum
import logging
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple, Union

from ..exceptions import PartitionLoadError
from .partitioning import (
    Partitioner,
    assign_partition,
    modulo_partitioner,
    validate_partition_id,
)
from .records import Serializer, serialize_record

logger = logging.getLogger(__name__)

# Either the decoded records themselves or a loader that produces them
RecordSource = Union[Iterable[Any], Callable[[], Iterable[Any]]]


class LoadStatus(str, enum.Enum):
    LOADED = "loaded"
    FAILED = "failed"


def partition_records(
    records: Iterable[Any],
    partition_id: int,
    num_partitions: int,
    partitioner: Partitioner = modulo_partitioner,
    serializer: Serializer = serialize_record,
) -> Tuple[Tuple[int, ...], Tuple[bytes, ...]]:
    """
    Fold a global record stream into the (offsets, messages) of one partition.

    Args:
        records: Decoded records in global stream order
        partition_id: The partition to keep records for
        num_partitions: Total number of partitions dividing the stream
        partitioner: Maps (global position, partition count) to a partition
        serializer: Turns a decoded record into its byte payload

    Returns:
        Two parallel tuples: local offsets (0, 1, 2, ...) and payloads
    """
    offsets = []
    messages = []

    for position, record in enumerate(records):
        if assign_partition(position, num_partitions, partitioner) != partition_id:
            continue
        # Skipped records do not consume a local offset
        offsets.append(len(messages))
        messages.append(serializer(record))

    return tuple(offsets), tuple(messages)


class PartitionStore:
    """
    Immutable, in-memory record store for a single partition.

    Load failures never escape the constructor: the store ends up empty and
    the failure is kept in ``load_status``/``load_error``.
    """

    def __init__(self, partition_id: int, num_partitions: int,
                 source: RecordSource,
                 partitioner: Partitioner = modulo_partitioner,
                 serializer: Serializer = serialize_record):
        """
        Build the partition from a record source.

        Args:
            partition_id: 0-based id of this partition
            num_partitions: Total number of partitions (>= 1)
            source: Decoded records in stream order, or a zero-argument
                callable returning them
            partitioner: Partition assignment strategy (default: modulo)
            serializer: Record serializer (default: serialize_record)

        Raises:
            PartitioningError: If partition_id/num_partitions are invalid
        """
        validate_partition_id(partition_id, num_partitions)

        self.partition_id = partition_id
        self.num_partitions = num_partitions
        self.partitioner = partitioner

        self.load_status = LoadStatus.LOADED
        self.load_error: Optional[BaseException] = None
        self._offsets: Tuple[int, ...] = ()
        self._messages: Tuple[bytes, ...] = ()

        try:
            records = source() if callable(source) else source
            self._offsets, self._messages = partition_records(
                records, partition_id, num_partitions, partitioner, serializer
            )
        except Exception as e:
            self.load_status = LoadStatus.FAILED
            self.load_error = e
            logger.exception(
                "Could not load records for partition %d of %d; serving an empty partition",
                partition_id, num_partitions,
            )
        else:
            logger.info(
                "Loaded %d records into partition %d of %d",
                len(self._messages), partition_id, num_partitions,
            )

    @property
    def offsets(self) -> Tuple[int, ...]:
        return self._offsets

    @property
    def messages(self) -> Tuple[bytes, ...]:
        return self._messages

    @property
    def size(self) -> int:
        return len(self._messages)

    @property
    def loaded(self) -> bool:
        return self.load_status is LoadStatus.LOADED

    def raise_for_status(self):
        """Raise PartitionLoadError if the records failed to load."""
        if self.load_error is not None:
            raise PartitionLoadError(self.partition_id, self.load_error) from self.load_error

    def slice(self, start: int, end: int) -> Tuple[Tuple[int, ...], Tuple[bytes, ...]]:
        """Return the offsets and payloads in [start, end)."""
        return self._offsets[start:end], self._messages[start:end]

    def records(self) -> Iterator[Tuple[int, bytes]]:
        """Iterate over (offset, payload) pairs in offset order."""
        return zip(self._offsets, self._messages)

    def get_partition_info(self) -> dict:
        """
        Get summary information about this partition.

        Returns:
            Dictionary with partition details
        """
        return {
            "partition_id": self.partition_id,
            "num_partitions": self.num_partitions,
            "size": self.size,
            "next_offset": self.size,
            "total_bytes": sum(len(m) for m in self._messages),
            "load_status": self.load_status.value,
            "load_error": repr(self.load_error) if self.load_error is not None else None,
        }

    def close(self):
        """Nothing to release: staging resources are freed during loading."""

    def __len__(self):
        return self.size

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self):
        return (
            f"PartitionStore(partition_id={self.partition_id}, "
            f"num_partitions={self.num_partitions}, size={self.size}, "
            f"load_status='{self.load_status.value}')"
        )
