"""
MessageBatch - One fetch worth of records from a partition.

A batch is a contiguous run of (offset, payload) pairs plus the offset the
next fetch should start from. It is created fresh for every fetch and is
never retained by the consumer.
"""

from typing import Iterator, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MessageBatch(BaseModel):
    """Immutable batch of messages returned by a partition consumer."""

    model_config = ConfigDict(frozen=True)

    messages: Tuple[bytes, ...] = ()
    offsets: Tuple[int, ...] = ()
    next_offset: int = Field(..., ge=0, description="Offset to resume fetching from")

    @model_validator(mode="after")
    def _check_parallel(self):
        if len(self.messages) != len(self.offsets):
            raise ValueError(
                f"messages ({len(self.messages)}) and offsets "
                f"({len(self.offsets)}) must have the same length"
            )
        return self

    @classmethod
    def empty(cls, next_offset: int) -> "MessageBatch":
        return cls(next_offset=next_offset)

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def is_empty(self) -> bool:
        return not self.messages

    def get_message_at_index(self, index: int) -> bytes:
        return self.messages[index]

    def get_message_length_at_index(self, index: int) -> int:
        return len(self.messages[index])

    def get_offset_at_index(self, index: int) -> int:
        return self.offsets[index]

    def get_next_offset_at_index(self, index: int) -> int:
        """Offset to resume from after consuming the message at index."""
        return self.offsets[index] + 1

    def records(self) -> Iterator[Tuple[int, bytes]]:
        return zip(self.offsets, self.messages)

    def __len__(self):
        return len(self.messages)
