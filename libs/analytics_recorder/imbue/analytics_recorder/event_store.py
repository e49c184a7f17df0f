"""Read back the event files that the recorder leaves in a cache directory.

This is the consumer side of the directory: an uploader lists pending events
oldest first, ships them, and deletes the files itself.
"""

from pathlib import Path

from loguru import logger

from imbue.analytics_recorder.consts import EVENT_FILE_PREFIX
from imbue.analytics_recorder.consts import EVENT_FILE_SUFFIX
from imbue.analytics_recorder.data_types import Event
from imbue.analytics_recorder.errors import EventParseError
from imbue.analytics_recorder.primitives import EventTimestamp


def _timestamp_from_file_name(path: Path) -> EventTimestamp:
    # The timestamp contains a '.', so strip the known suffix rather than using Path.stem
    return EventTimestamp(path.name[len(EVENT_FILE_PREFIX) : -len(EVENT_FILE_SUFFIX)])


def _file_sort_key(path: Path) -> tuple[int, int, int, str]:
    sort_key = _timestamp_from_file_name(path).sort_key()
    if sort_key is None:
        return (1, 0, 0, path.name)
    return (0, sort_key[0], sort_key[1], path.name)


def list_event_files(cache_dir: Path) -> list[Path]:
    """Return the event files in cache_dir ordered by recorded timestamp.

    Files whose names do not carry a numeric timestamp sort last, by name.
    Returns an empty list if the directory does not exist.
    """
    if not cache_dir.is_dir():
        return []
    event_files = [path for path in cache_dir.glob(f"{EVENT_FILE_PREFIX}*{EVENT_FILE_SUFFIX}") if path.is_file()]
    return sorted(event_files, key=_file_sort_key)


def read_event_file(path: Path) -> Event:
    """Parse a single event file.

    Raises EventParseError if the contents are not a track event and OSError if
    the file cannot be read.
    """
    return Event.from_json(path.read_text(encoding="utf-8"))


def read_recorded_events(cache_dir: Path) -> list[Event]:
    """Read every event in cache_dir, oldest first, skipping files that fail to parse.

    A file can be removed by the uploader between listing and reading; such
    files are skipped as well.
    """
    events: list[Event] = []
    for path in list_event_files(cache_dir):
        try:
            events.append(read_event_file(path))
        except (EventParseError, UnicodeDecodeError, OSError) as e:
            logger.warning("Skipping unreadable event file {}: {}", path, e)
            continue
    return events
