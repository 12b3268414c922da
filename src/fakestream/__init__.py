"""
FakeStream - A deterministic, in-memory stand-in for one partition of a stream.

Records from a fixed dataset are split across partitions by global position,
stored with contiguous offsets, and served through offset-based batch fetches.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .batch import MessageBatch
from .config import StreamConfig
from .consumer import PartitionLevelConsumer
from .factory import FakeStreamConsumerFactory
from .storage.partition import LoadStatus, PartitionStore

__all__ = [
    "MessageBatch",
    "StreamConfig",
    "PartitionLevelConsumer",
    "FakeStreamConsumerFactory",
    "LoadStatus",
    "PartitionStore",
]
