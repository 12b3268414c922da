import io
import json
import tarfile

import pytest


def make_records(count):
    return [{"id": i, "carrier": f"C{i % 3}", "delay": i * 2} for i in range(count)]


def write_archive(path, records, member_name="data/records.jsonl"):
    """Write records as a JSON-lines file inside a tar.gz archive."""
    payload = "".join(json.dumps(r) + "\n" for r in records).encode("utf-8")
    with tarfile.open(path, "w:gz") as tar:
        info = tarfile.TarInfo(member_name)
        info.size = len(payload)
        tar.addfile(info, io.BytesIO(payload))
    return path


@pytest.fixture
def records():
    return make_records(10)


@pytest.fixture
def archive(tmp_path, records):
    return write_archive(tmp_path / "records.tar.gz", records)


@pytest.fixture
def staging_base(tmp_path):
    base = tmp_path / "staging"
    base.mkdir()
    return base


def leftover_staging(base):
    """Staging directories still present under <base>/FakeStream/<partition>/."""
    return sorted((base / "FakeStream").glob("*/*"))
