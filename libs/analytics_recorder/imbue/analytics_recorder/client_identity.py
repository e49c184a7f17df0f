from pathlib import Path

from loguru import logger

from imbue.analytics_recorder.consts import CLIENT_ID_FILENAME
from imbue.analytics_recorder.errors import ClientIdentityError
from imbue.analytics_recorder.file_utils import write_if_absent
from imbue.analytics_recorder.primitives import ClientId


def get_client_id_path(cache_dir: Path) -> Path:
    return cache_dir / CLIENT_ID_FILENAME


def _read_client_id(path: Path) -> ClientId:
    # Bytes, not text mode, so line endings come back untouched
    try:
        return ClientId(path.read_bytes().decode("utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ClientIdentityError("Unable to read client id file", path) from e


def get_or_create_client_id(cache_dir: Path) -> ClientId:
    """Return the installation's anonymous client id, creating it on first use.

    The id lives in <cache_dir>/CLIENT_ID and is returned verbatim once it
    exists. When absent, a random UUID is generated and written with an atomic
    create-if-absent, so if several processes race to create it the first one
    wins and every caller returns that same value.

    Raises ClientIdentityError if the directory or file cannot be created or read.
    """
    path = get_client_id_path(cache_dir)
    if path.exists():
        return _read_client_id(path)

    new_client_id = ClientId.generate()
    try:
        is_created = write_if_absent(path, new_client_id)
    except OSError as e:
        raise ClientIdentityError("Unable to create client id file", path) from e

    if not is_created:
        logger.debug("Client id file appeared concurrently at {}, using the existing value", path)
        return _read_client_id(path)

    logger.debug("Created new client id at {}", path)
    return new_client_id
