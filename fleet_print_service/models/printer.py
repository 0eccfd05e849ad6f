"""
Printer Models
==============

Printers as discovered on the transport, as held in the cache, and their
transient status.
"""

from datetime import datetime, timezone
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp as written by any cache producer.

    Accepts a trailing ``Z`` (JavaScript ``toISOString()``). Naive values
    are taken as UTC.
    """
    if value.endswith(('Z', 'z')):
        value = value[:-1] + '+00:00'
    return as_utc(datetime.fromisoformat(value))


class PrinterState(str, Enum):
    ONLINE = 'ONLINE'
    OFFLINE = 'OFFLINE'
    PAUSED = 'PAUSED'
    ERROR = 'ERROR'
    UNKNOWN = 'UNKNOWN'


@dataclass
class Printer:
    """A queue as reported by discovery. Never persisted on its own."""

    name: str
    uri: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'uri': self.uri}


@dataclass
class CachedPrinter:
    """A discovered printer with its stable identifier."""

    id: str
    name: str
    uri: str
    cached_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'uri': self.uri,
            'cachedAt': self.cached_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CachedPrinter':
        """Create from dictionary."""
        cached_at = data.get('cachedAt')
        if isinstance(cached_at, str):
            cached_at = parse_timestamp(cached_at)
        return cls(
            id=data['id'],
            name=data['name'],
            uri=data['uri'],
            cached_at=cached_at or utc_now(),
        )


@dataclass
class PrinterStatus:
    """Live printer status. Derived per request, never cached."""

    name: str
    status: PrinterState = PrinterState.UNKNOWN
    jobs_in_queue: int = 0
    status_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'name': self.name,
            'status': self.status.value,
            'jobsInQueue': self.jobs_in_queue,
        }
        if self.status_message:
            data['statusMessage'] = self.status_message
        return data
