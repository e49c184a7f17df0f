import re
from enum import StrEnum
from enum import auto
from typing import Any
from typing import Final
from typing import Self
from uuid import uuid4

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema
from pydantic_core import core_schema

from imbue.analytics_recorder.consts import NANOS_PER_SECOND
from imbue.analytics_recorder.consts import SENTINEL_TIMESTAMP
from imbue.analytics_recorder.errors import InvalidEventNameError

_CANONICAL_UUID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)


class UpperCaseStrEnum(StrEnum):
    """A StrEnum that automatically converts enum member names to uppercase values."""

    @staticmethod
    def _generate_next_value_(
        name: str,
        start: int,
        count: int,
        last_values: list[str],
    ) -> str:
        return name.upper()


class LogLevel(UpperCaseStrEnum):
    """Log verbosity level."""

    TRACE = auto()
    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()


class _VerbatimStr(str):
    """A string that pydantic validates as a plain str and serializes back to one."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(),
            serialization=core_schema.to_string_ser_schema(),
        )


class EventName(_VerbatimStr):
    """Name of a recorded event kind (e.g. 'builder-project-create').

    Any non-empty string is accepted and kept exactly as given.
    """

    def __new__(cls, value: str) -> Self:
        if not value:
            raise InvalidEventNameError(f"{cls.__name__} cannot be empty")
        return super().__new__(cls, value)


class ClientId(_VerbatimStr):
    """Anonymous per-installation identifier.

    Values read back from disk are taken verbatim and never rejected, so a
    hand-edited identity file is reported as-is rather than replaced.
    """

    @classmethod
    def generate(cls) -> Self:
        return cls(str(uuid4()))

    def is_canonical(self) -> bool:
        """Whether this is a lowercase hyphenated UUID (8-4-4-4-12 hex digits)."""
        return _CANONICAL_UUID_PATTERN.match(self) is not None


class EventTimestamp(_VerbatimStr):
    """Time an event was recorded, as '<unix_seconds>.<nanos_within_second>'.

    The nanosecond part is the plain integer, not zero-padded, so
    1479330000 s + 13442404 ns renders as '1479330000.13442404'.
    """

    @classmethod
    def from_epoch_nanos(cls, nanos: int) -> Self:
        if nanos < 0:
            raise ValueError(f"{cls.__name__} cannot precede the unix epoch, got {nanos} ns")
        seconds, subsec_nanos = divmod(nanos, NANOS_PER_SECOND)
        return cls(f"{seconds}.{subsec_nanos}")

    @classmethod
    def sentinel(cls) -> Self:
        return cls(SENTINEL_TIMESTAMP)

    def is_sentinel(self) -> bool:
        return self == SENTINEL_TIMESTAMP

    def sort_key(self) -> tuple[int, int] | None:
        """Numeric (seconds, nanos) pair for ordering, or None if not in the recorded format."""
        seconds, sep, subsec_nanos = self.partition(".")
        if not sep or not seconds.isdigit() or not subsec_nanos.isdigit():
            return None
        return int(seconds), int(subsec_nanos)
