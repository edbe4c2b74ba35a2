from __future__ import annotations
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .models import TIMESTAMP_PROPERTIES, Event
from .timestamps import format_timestamp

PRODID = "-//hacksw/handcal//NONSGML v1.0//EN"

CALENDAR_HEADER = (
    "BEGIN:VCALENDAR",
    "VERSION:2.0",
    f"PRODID:{PRODID}",
    "CALSCALE:GREGORIAN",
)
CALENDAR_FOOTER = "END:VCALENDAR"


def _event_lines(event: Event, dtstamp: str) -> List[str]:
    lines = ["BEGIN:VEVENT"]
    for key, value in event.properties.items():
        if key in TIMESTAMP_PROPERTIES:
            # Stored values are UTC-marked, so this yields the same text.
            value = format_timestamp(value, event.timezone)
        lines.append(f"{key.upper()}:{value}")
    lines.append(f"DTSTAMP:{dtstamp}")
    lines.append("END:VEVENT")
    return lines


def build_document(events: Iterable[Event], now: Optional[datetime] = None) -> str:
    """Render events into one ``\\n``-joined ICS document.

    Every VEVENT gets a DTSTAMP for ``now`` (current UTC time by default),
    whether or not the event already has one.
    """
    dtstamp = format_timestamp(now or datetime.now(tz=timezone.utc), "UTC")

    lines = list(CALENDAR_HEADER)
    for event in events:
        lines.extend(_event_lines(event, dtstamp))
    lines.append(CALENDAR_FOOTER)
    return "\n".join(lines)
