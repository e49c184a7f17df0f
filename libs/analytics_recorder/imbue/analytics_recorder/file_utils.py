import errno
import os
import tempfile
from pathlib import Path
from typing import Final

# os.link errors meaning the filesystem cannot hard link at all
_HARD_LINK_UNSUPPORTED_ERRNOS: Final[frozenset[int]] = frozenset(
    {errno.EPERM, errno.ENOSYS, errno.ENOTSUP, errno.EOPNOTSUPP}
)


def _remove_quietly(path: Path) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def _write_temp_file(directory: Path, content: str) -> Path:
    """Write content to a fsynced temp file in directory and return its path.

    The temp file is removed again if the write fails.
    """
    tmp_file = tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=directory,
        prefix=".",
        suffix=".tmp",
        delete=False,
    )
    tmp_path = Path(tmp_file.name)
    try:
        with tmp_file:
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
    except OSError:
        _remove_quietly(tmp_path)
        raise
    return tmp_path


def atomic_write(path: Path, content: str) -> None:
    """Write content to a file atomically using a temp file and rename.

    Parent directories are created as needed. Readers never see a partially
    written file. An existing file at path is replaced.

    The caller is responsible for catching OSError if the write fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = _write_temp_file(path.parent, content)
    try:
        os.replace(tmp_path, path)
    except OSError:
        _remove_quietly(tmp_path)
        raise


def _create_exclusively(path: Path, content: str) -> bool:
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except FileExistsError:
        return False
    with os.fdopen(fd, "w", encoding="utf-8") as new_file:
        new_file.write(content)
        new_file.flush()
        os.fsync(new_file.fileno())
    return True


def write_if_absent(path: Path, content: str) -> bool:
    """Atomically create path with content unless something already exists there.

    The content is written to a temp file first and then hard-linked into
    place; the link fails if the name is taken, so concurrent writers cannot
    both succeed and readers never see a partially written file.

    On filesystems without hard links this falls back to an O_EXCL create,
    which still lets only one writer succeed but may briefly expose a
    partially written file to concurrent readers.

    Returns True if this call created the file, False if it already existed.
    The caller is responsible for catching OSError if the write fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = _write_temp_file(path.parent, content)
    try:
        os.link(tmp_path, path)
    except FileExistsError:
        return False
    except OSError as e:
        if e.errno not in _HARD_LINK_UNSUPPORTED_ERRNOS:
            raise
        return _create_exclusively(path, content)
    finally:
        _remove_quietly(tmp_path)
    return True
