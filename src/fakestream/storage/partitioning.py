"""
Partitioning - Deterministic assignment of global records to partitions.

The default rule is position-based, not content-based:

    partition = global_position % num_partitions

so every record in the global stream lands in exactly one partition, and
rebuilding a partition from the same input always yields the same records.
Any other pure function with the same signature can be passed in instead.
"""

from typing import Callable

from ..exceptions import PartitioningError

# (global_position, num_partitions) -> partition_id
Partitioner = Callable[[int, int], int]


def modulo_partitioner(position: int, num_partitions: int) -> int:
    """Round-robin assignment by global record position."""
    return position % num_partitions


def validate_partition_count(num_partitions: int) -> None:
    if num_partitions < 1:
        raise PartitioningError(
            f"Partition count must be >= 1, got {num_partitions}"
        )


def validate_partition_id(partition_id: int, num_partitions: int) -> None:
    validate_partition_count(num_partitions)
    if not 0 <= partition_id < num_partitions:
        raise PartitioningError(
            f"Partition id {partition_id} out of range [0, {num_partitions})"
        )


def assign_partition(position: int, num_partitions: int,
                     partitioner: Partitioner = modulo_partitioner) -> int:
    """
    Compute the partition for the record at a global position.

    Args:
        position: 0-based position of the record in the global stream
        num_partitions: Total number of partitions
        partitioner: Strategy used to map the position to a partition

    Returns:
        The partition id, guaranteed to be in [0, num_partitions)

    Raises:
        PartitioningError: If the inputs are invalid or the strategy
            returns an id outside the valid range
    """
    validate_partition_count(num_partitions)
    if position < 0:
        raise PartitioningError(f"Record position must be >= 0, got {position}")

    assigned = partitioner(position, num_partitions)
    if not isinstance(assigned, int) or not 0 <= assigned < num_partitions:
        raise PartitioningError(
            f"Partitioner returned {assigned!r} for position {position}, "
            f"expected a value in [0, {num_partitions})"
        )
    return assigned
