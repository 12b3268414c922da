"""Storage package - Partitioning and the in-memory partition store."""

from .partition import LoadStatus, PartitionStore, partition_records
from .partitioning import Partitioner, assign_partition, modulo_partitioner
from .records import serialize_record

__all__ = [
    "LoadStatus",
    "PartitionStore",
    "partition_records",
    "Partitioner",
    "assign_partition",
    "modulo_partitioner",
    "serialize_record",
]
