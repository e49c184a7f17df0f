import os
import threading
from pathlib import Path

import pytest

from imbue.analytics_recorder.client_identity import get_client_id_path
from imbue.analytics_recorder.client_identity import get_or_create_client_id
from imbue.analytics_recorder.errors import ClientIdentityError
from imbue.analytics_recorder.primitives import ClientId


def test_creates_canonical_uuid_when_absent(cache_dir: Path) -> None:
    client_id = get_or_create_client_id(cache_dir)

    assert isinstance(client_id, ClientId)
    assert client_id.is_canonical()
    assert get_client_id_path(cache_dir).read_text() == client_id


def test_creates_missing_cache_directories(cache_dir: Path) -> None:
    assert not cache_dir.exists()

    get_or_create_client_id(cache_dir)

    assert (cache_dir / "CLIENT_ID").is_file()


def test_second_call_returns_same_value_without_writing(cache_dir: Path) -> None:
    first = get_or_create_client_id(cache_dir)
    path = get_client_id_path(cache_dir)
    old_time = 1_000_000_000
    os.utime(path, (old_time, old_time))

    second = get_or_create_client_id(cache_dir)

    assert second == first
    assert path.stat().st_mtime == old_time


def test_existing_file_is_returned_verbatim(cache_dir: Path) -> None:
    cache_dir.mkdir(parents=True)
    (cache_dir / "CLIENT_ID").write_bytes(b"  hand-written id\r\n")

    assert get_or_create_client_id(cache_dir) == "  hand-written id\r\n"


def test_only_client_id_file_is_left_in_cache_dir(cache_dir: Path) -> None:
    get_or_create_client_id(cache_dir)

    assert [p.name for p in cache_dir.iterdir()] == ["CLIENT_ID"]


def test_concurrent_creation_yields_one_valid_identifier(cache_dir: Path) -> None:
    results: list[ClientId] = []
    lock = threading.Lock()

    def create() -> None:
        client_id = get_or_create_client_id(cache_dir)
        with lock:
            results.append(client_id)

    threads = [threading.Thread(target=create) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stored = get_client_id_path(cache_dir).read_text()
    assert ClientId(stored).is_canonical()
    assert len(results) == 8
    assert set(results) == {stored}


def test_unreadable_client_id_raises(cache_dir: Path) -> None:
    cache_dir.mkdir(parents=True)
    (cache_dir / "CLIENT_ID").write_bytes(b"\xff\xfe")

    with pytest.raises(ClientIdentityError, match="Unable to read client id file"):
        get_or_create_client_id(cache_dir)


def test_cache_dir_blocked_by_file_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(ClientIdentityError, match="Unable to create client id file") as exc_info:
        get_or_create_client_id(blocker / "analytics")

    assert exc_info.value.path == blocker / "analytics" / "CLIENT_ID"
    assert isinstance(exc_info.value.__cause__, OSError)
