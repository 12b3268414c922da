"""
Loader - Reads the fixture dataset for a partition from a tar.gz archive.

The archive holds a JSON-lines data file, one decoded record per line.
Each load unpacks it into its own staging directory under
``<base>/FakeStream/<partition_id>/``, which is removed as soon as the
records have been read, whether or not reading succeeded.
"""

import json
import logging
import shutil
import tarfile
import tempfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Union

from .exceptions import ArchiveError, RecordLoadError

logger = logging.getLogger(__name__)

STAGING_ROOT_NAME = "FakeStream"
DATA_FILE_SUFFIX = ".jsonl"


@contextmanager
def staging_dir(partition_id: int, base_dir: Optional[Union[str, Path]] = None) -> Iterator[Path]:
    """
    Create a staging directory under ``<base>/FakeStream/<partition_id>/``
    and always remove it on exit.

    Every call gets a fresh directory, so loads of the same partition never
    share one. Removal failures are logged and never raised.
    """
    base = Path(base_dir) if base_dir is not None else Path(tempfile.gettempdir())
    partition_root = base / STAGING_ROOT_NAME / str(partition_id)
    partition_root.mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(dir=partition_root))
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
        except OSError:
            logger.warning("Could not remove staging directory %s", path, exc_info=True)


def unpack_archive(archive_path: Union[str, Path], output_dir: Union[str, Path]) -> List[Path]:
    """
    Extract a tar.gz archive and return its data files.

    Args:
        archive_path: Path to the .tar.gz fixture
        output_dir: Directory to extract into

    Returns:
        The extracted ``*.jsonl`` files, sorted by path

    Raises:
        ArchiveError: If the archive is missing, unreadable, truncated, or
            contains members that would land outside output_dir
    """
    archive_path = Path(archive_path)
    output_dir = Path(output_dir).resolve()

    if not archive_path.is_file():
        raise ArchiveError(f"Archive not found: {archive_path}")

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            for member in tar.getmembers():
                target = (output_dir / member.name).resolve()
                if target != output_dir and output_dir not in target.parents:
                    raise ArchiveError(f"Refusing to extract {member.name!r} outside {output_dir}")
                if member.issym() or member.islnk():
                    raise ArchiveError(f"Refusing to extract link member {member.name!r}")
            # Extraction filters exist from 3.12 (and some 3.9-3.11 patch releases)
            if hasattr(tarfile, "data_filter"):
                tar.extractall(output_dir, filter="data")
            else:
                tar.extractall(output_dir)
    except (tarfile.TarError, OSError, EOFError, zlib.error) as e:
        raise ArchiveError(f"Could not unpack {archive_path}: {e}") from e

    return sorted(p for p in output_dir.rglob(f"*{DATA_FILE_SUFFIX}") if p.is_file())


def read_records(data_file: Union[str, Path]) -> List[Any]:
    """Decode a UTF-8 JSON-lines file into records, skipping blank lines."""
    records = []
    with open(data_file, "rb") as f:
        for line_number, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
                if not line.strip():
                    continue
                records.append(json.loads(line))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise RecordLoadError(f"{data_file}:{line_number}: invalid record: {e}") from e
    return records


class ArchiveRecordLoader:
    """
    Zero-argument record source backed by a tar.gz fixture.

    Pass an instance as the ``source`` of a PartitionStore; the store calls
    it once during construction.
    """

    def __init__(self, archive_path: Union[str, Path], partition_id: int,
                 staging_base: Optional[Union[str, Path]] = None):
        self.archive_path = Path(archive_path)
        self.partition_id = partition_id
        self.staging_base = staging_base

    def __call__(self) -> List[Any]:
        with staging_dir(self.partition_id, self.staging_base) as output_dir:
            data_files = unpack_archive(self.archive_path, output_dir)
            if not data_files:
                raise ArchiveError(f"No {DATA_FILE_SUFFIX} data file in {self.archive_path}")
            return read_records(data_files[0])

    def __repr__(self):
        return (
            f"ArchiveRecordLoader(archive_path='{self.archive_path}', "
            f"partition_id={self.partition_id})"
        )
