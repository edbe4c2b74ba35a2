from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .builder import build_document
from .config import AppConfig
from .escape import escape_string
from .models import EVENT_PROPERTIES, TIMESTAMP_PROPERTIES, Event
from .timestamps import TimestampFormatError, format_timestamp

logger = logging.getLogger(__name__)


def _new_uid() -> str:
    return uuid.uuid4().hex


class Calendar:
    """Ordered store of validated events sharing one default timezone.

    Not thread-safe: callers that share an instance across threads must
    serialize ``add_event`` themselves.
    """

    def __init__(self, timezone: str = "UTC") -> None:
        # Validated lazily, on the first timestamp that needs it.
        self._default_timezone = timezone
        self._events: List[Event] = []

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "Calendar":
        return cls(timezone=cfg.timezone)

    @property
    def default_timezone(self) -> str:
        return self._default_timezone

    @property
    def events(self) -> Tuple[Event, ...]:
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def add_event(self, props: Mapping[str, Any]) -> bool:
        """Validate ``props`` and append them as an event.

        Unknown keys are dropped. Returns False, leaving the store untouched,
        when any timestamp field cannot be normalized.
        """
        raw_tz = props.get("timezone")
        tz = str(raw_tz) if raw_tz else self._default_timezone

        properties: Dict[str, str] = {}
        for key, value in props.items():
            if key not in EVENT_PROPERTIES:
                logger.debug("Dropping unknown event property %r", key)
                continue
            if key == "timezone":
                continue
            if key in TIMESTAMP_PROPERTIES:
                try:
                    properties[key] = format_timestamp(value, tz)
                except TimestampFormatError as exc:
                    logger.warning("Rejecting event: %s=%r is not a valid timestamp (%s)", key, value, exc)
                    return False
            else:
                properties[key] = escape_string(value)

        uid = properties.get("uid")
        if not uid:
            uid = _new_uid()
            properties["uid"] = uid

        event = Event(timezone=tz, uid=uid, properties=properties)
        self._events.append(event)
        logger.debug("Added event uid=%s (%d total)", uid, len(self._events))
        return True

    def build(self, now: Optional[datetime] = None) -> str:
        return build_document(self._events, now=now)
