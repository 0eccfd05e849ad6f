"""
Fleet Print Service Models
"""

from .printer import Printer, CachedPrinter, PrinterStatus, PrinterState, parse_timestamp, utc_now
from .job import PrintJob, JobState, TransferResult
from .cache import CacheEntry

__all__ = [
    'Printer', 'CachedPrinter', 'PrinterStatus', 'PrinterState', 'parse_timestamp', 'utc_now',
    'PrintJob', 'JobState', 'TransferResult',
    'CacheEntry',
]
