from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict

EVENT_PROPERTIES = (
    "description",
    "dtend",
    "dtstart",
    "location",
    "summary",
    "url",
    "uid",
    "timezone",
)

TIMESTAMP_PROPERTIES = frozenset({"dtstart", "dtend", "dtstamp"})

@dataclass(frozen=True)
class Event:
    timezone: str               # zone used to interpret dtstart/dtend
    uid: str
    # insertion-ordered, already escaped / normalized to UTC; never holds "timezone"
    properties: Dict[str, str] = field(default_factory=dict)
