"""
fakestream-dump - Load one partition of a fixture archive and print its batches.

Exit codes: 0 on success, 1 when the partition failed to load, 2 on bad
arguments or settings.

Example:
    fakestream-dump --archive data/flights.tar.gz --partition 1 --num-partitions 2
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import StreamConfig
from .exceptions import PartitioningError
from .factory import FakeStreamConsumerFactory
from .logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fakestream-dump",
        description="Print the batches served by one fake stream partition",
    )
    parser.add_argument("--archive", help="Path to the .tar.gz fixture (default: $FAKESTREAM_ARCHIVE_PATH)")
    parser.add_argument("--partition", type=int, default=0, help="Partition id (default: 0)")
    parser.add_argument("--num-partitions", type=int, help="Total partition count")
    parser.add_argument("--batch-size", type=int, help="Max messages per fetch")
    parser.add_argument("--start-offset", type=int, default=0)
    parser.add_argument("--max-batches", type=int, default=None,
                        help="Stop after this many batches (default: read to the end)")
    parser.add_argument("--log-level", default=None)
    return parser


def _usage_error(message: str) -> int:
    print(f"error: {message}", file=sys.stderr)
    return 2


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {
        "archive_path": args.archive,
        "num_partitions": args.num_partitions,
        "batch_size": args.batch_size,
        "log_level": args.log_level,
    }
    try:
        config = StreamConfig(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        return _usage_error(f"invalid settings: {e}")
    configure_logging(config.log_level)

    if config.archive_path is None:
        return _usage_error("no archive given (use --archive or FAKESTREAM_ARCHIVE_PATH)")
    if args.start_offset < 0:
        return _usage_error(f"--start-offset must be >= 0, got {args.start_offset}")

    factory = FakeStreamConsumerFactory(config)
    try:
        consumer = factory.create_partition_consumer(args.partition)
    except PartitioningError as e:
        return _usage_error(str(e))

    with consumer:
        store = consumer.store

        print("=" * 60)
        print(f"{config.topic_name} partition {store.partition_id} of {store.num_partitions}")
        print(f"Records: {store.size}  Status: {store.load_status.value}")
        print("=" * 60)

        if not store.loaded:
            return 1

        offset = args.start_offset
        batches = 0
        while args.max_batches is None or batches < args.max_batches:
            batch = consumer.fetch_messages(offset)
            if batch.is_empty:
                break
            sizes = ", ".join(str(len(m)) for m in batch.messages)
            print(f"[{batch.offsets[0]}..{batch.offsets[-1]}] next={batch.next_offset} sizes=({sizes})")
            offset = batch.next_offset
            batches += 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
