"""Exception hierarchy for FakeStream."""


class FakeStreamError(Exception):
    """Base class for all FakeStream errors."""


class PartitioningError(FakeStreamError, ValueError):
    """Invalid partition id, partition count, or partitioner output."""


class RecordSerializationError(FakeStreamError):
    """A decoded record could not be turned into a byte buffer."""


class RecordLoadError(FakeStreamError):
    """The backing dataset could not be loaded or decoded."""


class ArchiveError(RecordLoadError):
    """The fixture archive is missing, malformed, or unsafe to extract."""


class PartitionLoadError(FakeStreamError):
    """Raised on request when a PartitionStore failed to load its records."""

    def __init__(self, partition_id: int, cause: BaseException):
        self.partition_id = partition_id
        self.cause = cause
        super().__init__(f"Partition {partition_id} failed to load: {cause!r}")
