"""
Cache Entry Model
=================

The unit stored under the printer cache key. Producers and consumers share
the ``{"printers": [...], "lastUpdated": "<iso>"}`` shape.
"""

import json
from datetime import datetime
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

from .printer import CachedPrinter, as_utc, parse_timestamp, utc_now


@dataclass
class CacheEntry:
    printers: List[CachedPrinter] = field(default_factory=list)
    last_updated: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'printers': [p.to_dict() for p in self.printers],
            'lastUpdated': self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheEntry':
        return cls(
            printers=[CachedPrinter.from_dict(p) for p in data.get('printers', [])],
            last_updated=parse_timestamp(data['lastUpdated']),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> 'CacheEntry':
        return cls.from_dict(json.loads(raw))

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        return (as_utc(now or utc_now()) - as_utc(self.last_updated)).total_seconds()

    def find(self, printer_id: str) -> Optional[CachedPrinter]:
        for printer in self.printers:
            if printer.id == printer_id:
                return printer
        return None
