"""Immutable value types for recorded analytics events.

The JSON rendering of an Event is Segment.io "track" compatible:

    {"event":"builder-project-create","properties":{"clientid":"0a5c0882-...","timestamp":"1479330000.13442404"},"type":"track"}

Keys are sorted at serialization time so the output is byte-for-byte stable
regardless of how the properties mapping was built.
"""

import json
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
from typing import Self

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator
from pydantic import model_validator

from imbue.analytics_recorder.consts import CLIENT_ID_PROPERTY
from imbue.analytics_recorder.consts import EVENT_FILE_PREFIX
from imbue.analytics_recorder.consts import EVENT_FILE_SUFFIX
from imbue.analytics_recorder.consts import EVENT_TYPE_TRACK
from imbue.analytics_recorder.consts import TIMESTAMP_PROPERTY
from imbue.analytics_recorder.errors import EventParseError
from imbue.analytics_recorder.primitives import ClientId
from imbue.analytics_recorder.primitives import EventName
from imbue.analytics_recorder.primitives import EventTimestamp


class FrozenModel(BaseModel):
    """Base class for immutable pydantic models that prevent attribute mutation after construction."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=False,
    )


class Event(FrozenModel):
    """One recorded occurrence of a user action."""

    name: EventName
    client_id: ClientId
    timestamp: EventTimestamp
    properties: Mapping[str, str]

    @field_validator("properties", mode="after")
    @classmethod
    def _freeze_properties(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def _check_standard_properties(self) -> Self:
        if self.properties.get(TIMESTAMP_PROPERTY) != self.timestamp:
            raise ValueError(f"properties[{TIMESTAMP_PROPERTY!r}] must equal the event timestamp")
        if self.properties.get(CLIENT_ID_PROPERTY) != self.client_id:
            raise ValueError(f"properties[{CLIENT_ID_PROPERTY!r}] must equal the event client id")
        return self

    @classmethod
    def create(cls, name: str, client_id: str, timestamp: str) -> Self:
        return cls(
            name=EventName(name),
            client_id=ClientId(client_id),
            timestamp=EventTimestamp(timestamp),
            properties={
                TIMESTAMP_PROPERTY: timestamp,
                CLIENT_ID_PROPERTY: client_id,
            },
        )

    @property
    def file_name(self) -> str:
        return f"{EVENT_FILE_PREFIX}{self.timestamp}{EVENT_FILE_SUFFIX}"

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": EVENT_TYPE_TRACK,
            "event": str(self.name),
            "properties": dict(self.properties),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> Self:
        """Parse a document produced by to_json back into an Event.

        Raises EventParseError if the document is not a well-formed track event.
        """
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise EventParseError(f"Event document is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise EventParseError(f"Event document must be a JSON object, got {type(payload).__name__}")
        if payload.get("type") != EVENT_TYPE_TRACK:
            raise EventParseError(f"Event type must be {EVENT_TYPE_TRACK!r}, got {payload.get('type')!r}")
        extra_keys = set(payload) - {"type", "event", "properties"}
        if extra_keys:
            raise EventParseError(f"Unexpected top-level event keys: {sorted(extra_keys)}")

        name = payload.get("event")
        properties = payload.get("properties")
        if not isinstance(name, str) or not name:
            raise EventParseError("Event name must be a non-empty string")
        if not isinstance(properties, dict) or not all(
            isinstance(key, str) and isinstance(value, str) for key, value in properties.items()
        ):
            raise EventParseError("Event properties must map strings to strings")

        client_id = properties.get(CLIENT_ID_PROPERTY)
        timestamp = properties.get(TIMESTAMP_PROPERTY)
        if client_id is None or timestamp is None:
            raise EventParseError(
                f"Event properties must include {CLIENT_ID_PROPERTY!r} and {TIMESTAMP_PROPERTY!r}"
            )

        return cls(
            name=EventName(name),
            client_id=ClientId(client_id),
            timestamp=EventTimestamp(timestamp),
            properties=properties,
        )
