"""
FakeStreamConsumerFactory - Builds partition consumers for a configured stream.
"""

import logging
from typing import Callable, List, Optional

from .config import StreamConfig, get_num_partitions
from .consumer import PartitionLevelConsumer
from .loader import ArchiveRecordLoader
from .storage.partition import PartitionStore, RecordSource
from .storage.partitioning import Partitioner, modulo_partitioner
from .storage.records import Serializer, serialize_record

logger = logging.getLogger(__name__)


class FakeStreamConsumerFactory:
    """
    Creates one PartitionLevelConsumer per partition of a fake stream.

    Records come from ``config.archive_path`` unless ``source_factory`` is
    given, in which case it is called with the partition id and must return
    a record source for that partition.
    """

    def __init__(self, config: StreamConfig,
                 source_factory: Optional[Callable[[int], RecordSource]] = None,
                 partitioner: Partitioner = modulo_partitioner,
                 serializer: Serializer = serialize_record):
        if source_factory is None and config.archive_path is None:
            raise ValueError("Either config.archive_path or source_factory is required")
        self.config = config
        self.source_factory = source_factory
        self.partitioner = partitioner
        self.serializer = serializer

    @property
    def num_partitions(self) -> int:
        return get_num_partitions(self.config)

    def _source_for(self, partition_id: int) -> RecordSource:
        if self.source_factory is not None:
            return self.source_factory(partition_id)
        return ArchiveRecordLoader(
            self.config.archive_path, partition_id, staging_base=self.config.staging_dir
        )

    def create_partition_store(self, partition_id: int) -> PartitionStore:
        return PartitionStore(
            partition_id,
            self.num_partitions,
            self._source_for(partition_id),
            partitioner=self.partitioner,
            serializer=self.serializer,
        )

    def create_partition_consumer(self, partition_id: int) -> PartitionLevelConsumer:
        """
        Build the consumer for one partition.

        Args:
            partition_id: 0-based partition id

        Returns:
            A consumer whose default batch size is ``config.batch_size``
        """
        logger.info(
            "Creating consumer for %s partition %d of %d",
            self.config.topic_name, partition_id, self.num_partitions,
        )
        store = self.create_partition_store(partition_id)
        return PartitionLevelConsumer(store, default_batch_size=self.config.batch_size)

    def create_all_partition_consumers(self) -> List[PartitionLevelConsumer]:
        return [self.create_partition_consumer(p) for p in range(self.num_partitions)]
