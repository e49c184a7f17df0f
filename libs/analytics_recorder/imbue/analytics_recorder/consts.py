from typing import Final

# Supported events. Callers may record any other non-empty name as well.
EVENT_BUILDER_PROJECT_CREATE: Final[str] = "builder-project-create"

# Every recorded event is a Segment-compatible "track" call
EVENT_TYPE_TRACK: Final[str] = "track"

CLIENT_ID_FILENAME: Final[str] = "CLIENT_ID"

EVENT_FILE_PREFIX: Final[str] = "event-"
EVENT_FILE_SUFFIX: Final[str] = ".json"

# Property keys that every event carries
CLIENT_ID_PROPERTY: Final[str] = "clientid"
TIMESTAMP_PROPERTY: Final[str] = "timestamp"

# Recorded in place of a real timestamp when the system clock is unusable
SENTINEL_TIMESTAMP: Final[str] = "0.0"

NANOS_PER_SECOND: Final[int] = 1_000_000_000
