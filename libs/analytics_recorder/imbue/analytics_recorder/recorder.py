import time
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from imbue.analytics_recorder.client_identity import get_or_create_client_id
from imbue.analytics_recorder.data_types import Event
from imbue.analytics_recorder.data_types import FrozenModel
from imbue.analytics_recorder.errors import EventWriteError
from imbue.analytics_recorder.file_utils import atomic_write
from imbue.analytics_recorder.logging import log_span
from imbue.analytics_recorder.primitives import EventName
from imbue.analytics_recorder.primitives import EventTimestamp

# Returns wall-clock nanoseconds since the unix epoch, like time.time_ns
EpochNanosClock = Callable[[], int]


def get_event_timestamp(clock: EpochNanosClock = time.time_ns) -> EventTimestamp:
    """Return the current time as an event timestamp.

    A clock that fails or reports a time before the epoch yields the "0.0"
    sentinel instead of an error, so the event is still recorded.
    """
    try:
        return EventTimestamp.from_epoch_nanos(clock())
    except (OSError, OverflowError, ValueError) as e:
        logger.debug("Cannot generate system time: {}", e)
        return EventTimestamp.sentinel()


class EventRecorder(FrozenModel):
    """Writes track events as standalone JSON files into an analytics cache directory.

    Each event lands in <cache_dir>/event-<timestamp>.json and is never touched
    again; an external uploader consumes and deletes the files. Two events with
    the same timestamp share a file name, and the later write wins.
    """

    cache_dir: Path
    clock: EpochNanosClock = time.time_ns

    def record(self, name: str) -> Path:
        """Record one occurrence of the named event and return the file written.

        Raises ClientIdentityError or EventWriteError if the cache directory
        cannot be written. These are never retried.
        """
        event_name = EventName(name)
        with log_span("Recording event {}", event_name, event_name=event_name, cache_dir=str(self.cache_dir)):
            timestamp = get_event_timestamp(self.clock)
            client_id = get_or_create_client_id(self.cache_dir)
            event = Event.create(event_name, client_id, timestamp)

            event_path = self.cache_dir / event.file_name
            try:
                atomic_write(event_path, event.to_json())
            except OSError as e:
                raise EventWriteError("Unable to write event file", event_path) from e

        logger.debug("Recorded event {} to {}", event_name, event_path)
        return event_path


def record_event(name: str, cache_dir: Path) -> Path:
    """Record one occurrence of the named event in cache_dir using the system clock."""
    return EventRecorder(cache_dir=cache_dir).record(name)
