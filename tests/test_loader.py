import io
import logging
import shutil
import tarfile
import warnings

import pytest

from fakestream.exceptions import ArchiveError, RecordLoadError
from fakestream.loader import ArchiveRecordLoader, read_records, staging_dir, unpack_archive
from fakestream.storage.partition import LoadStatus, PartitionStore

from .conftest import leftover_staging, make_records, write_archive


def test_staging_dir_is_partition_scoped_and_removed(staging_base):
    with staging_dir(3, staging_base) as path:
        assert path.parent == staging_base / "FakeStream" / "3"
        assert path.is_dir()
        (path / "scratch").write_text("x")
    assert not path.exists()
    assert leftover_staging(staging_base) == []


def test_staging_dir_removed_on_error(staging_base):
    with pytest.raises(RuntimeError):
        with staging_dir(0, staging_base) as path:
            raise RuntimeError("boom")
    assert not path.exists()


def test_concurrent_staging_dirs_for_same_partition_are_separate(staging_base):
    with staging_dir(0, staging_base) as outer:
        (outer / "records.jsonl").write_text("{}\n")
        with staging_dir(0, staging_base) as inner:
            assert inner != outer
        assert not inner.exists()
        assert (outer / "records.jsonl").is_file()
    assert leftover_staging(staging_base) == []


def test_staging_cleanup_failure_is_logged(staging_base, monkeypatch, caplog):
    def failing_rmtree(path, *args, **kwargs):
        raise OSError("busy")

    monkeypatch.setattr(shutil, "rmtree", failing_rmtree)
    with caplog.at_level(logging.WARNING, logger="fakestream.loader"):
        with staging_dir(0, staging_base):
            pass
    assert "Could not remove staging directory" in caplog.text


def test_unpack_archive(archive, tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    files = unpack_archive(archive, out)
    assert [f.name for f in files] == ["records.jsonl"]


def test_unpack_archive_emits_no_deprecation_warning(archive, tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        assert len(unpack_archive(archive, out)) == 1


def test_unpack_missing_archive(tmp_path):
    with pytest.raises(ArchiveError, match="not found"):
        unpack_archive(tmp_path / "nope.tar.gz", tmp_path)


def test_unpack_rejects_path_traversal(tmp_path):
    bad = write_archive(tmp_path / "bad.tar.gz", [{"a": 1}], member_name="../evil.jsonl")
    out = tmp_path / "out"
    out.mkdir()
    with pytest.raises(ArchiveError, match="outside"):
        unpack_archive(bad, out)
    assert not (tmp_path / "evil.jsonl").exists()


def test_unpack_corrupt_archive(tmp_path):
    corrupt = tmp_path / "corrupt.tar.gz"
    corrupt.write_bytes(b"not a tarball")
    with pytest.raises(ArchiveError):
        unpack_archive(corrupt, tmp_path)


def test_unpack_truncated_archive(tmp_path):
    full = write_archive(tmp_path / "full.tar.gz", make_records(500))
    data = full.read_bytes()
    truncated = tmp_path / "truncated.tar.gz"
    truncated.write_bytes(data[: len(data) // 2])
    out = tmp_path / "out"
    out.mkdir()
    with pytest.raises(ArchiveError, match="Could not unpack"):
        unpack_archive(truncated, out)


def test_read_records_skips_blank_lines(tmp_path):
    data = tmp_path / "d.jsonl"
    data.write_text('{"a": 1}\n\n{"a": 2}\n', encoding="utf-8")
    assert read_records(data) == [{"a": 1}, {"a": 2}]


def test_read_records_reports_bad_line(tmp_path):
    data = tmp_path / "d.jsonl"
    data.write_text('{"a": 1}\n{oops\n', encoding="utf-8")
    with pytest.raises(RecordLoadError, match=":2:"):
        read_records(data)


def test_read_records_rejects_invalid_utf8(tmp_path):
    data = tmp_path / "d.jsonl"
    data.write_bytes(b'{"a": 1}\n\xff\xfe\n')
    with pytest.raises(RecordLoadError, match=":2:"):
        read_records(data)


def test_archive_loader_returns_records_and_cleans_up(archive, records, staging_base):
    loader = ArchiveRecordLoader(archive, partition_id=1, staging_base=staging_base)
    assert loader() == records
    assert leftover_staging(staging_base) == []


def test_archive_without_data_file(tmp_path, staging_base):
    path = tmp_path / "empty.tar.gz"
    with tarfile.open(path, "w:gz") as tar:
        info = tarfile.TarInfo("README.txt")
        info.size = 2
        tar.addfile(info, io.BytesIO(b"hi"))
    with pytest.raises(ArchiveError, match="No .jsonl"):
        ArchiveRecordLoader(path, 0, staging_base)()
    assert leftover_staging(staging_base) == []


def test_store_from_archive(archive, records, staging_base):
    store = PartitionStore(1, 2, ArchiveRecordLoader(archive, 1, staging_base))
    assert store.size == 5
    assert store.messages[0] == b'{"carrier":"C1","delay":2,"id":1}'


def test_store_from_missing_archive_is_empty(tmp_path, staging_base):
    store = PartitionStore(0, 2, ArchiveRecordLoader(tmp_path / "missing.tar.gz", 0, staging_base))
    assert store.size == 0
    assert store.load_status is LoadStatus.FAILED
    assert isinstance(store.load_error, ArchiveError)
    assert leftover_staging(staging_base) == []
