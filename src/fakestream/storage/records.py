"""
Records - Serialization of decoded records into opaque byte payloads.

Each record is serialized on its own, so a payload never depends on the
records around it:

- bytes-like values are copied into immutable ``bytes``
- ``str`` values are UTF-8 encoded
- pydantic models are dumped with ``model_dump_json()``
- mappings, lists and scalars are written as compact, key-sorted JSON
"""

import json
from typing import Any, Callable

from pydantic import BaseModel

from ..exceptions import RecordSerializationError

Serializer = Callable[[Any], bytes]


def serialize_record(record: Any) -> bytes:
    """
    Serialize one decoded record to a byte buffer.

    Args:
        record: A decoded record

    Returns:
        The record payload as immutable bytes

    Raises:
        RecordSerializationError: If the record has no byte representation
    """
    if isinstance(record, (bytes, bytearray, memoryview)):
        return bytes(record)

    if isinstance(record, str):
        return record.encode("utf-8")

    if isinstance(record, BaseModel):
        return record.model_dump_json().encode("utf-8")

    try:
        # Compact separators and sorted keys keep the payload stable across runs
        return json.dumps(record, sort_keys=True, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise RecordSerializationError(
            f"Cannot serialize record of type {type(record).__name__}: {e}"
        ) from e
