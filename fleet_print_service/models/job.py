"""
Print Job Models
================

Jobs are owned by the remote spooler. The service only observes them.
"""

from datetime import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any

from .printer import utc_now


class JobState(str, Enum):
    QUEUED = 'QUEUED'
    PRINTING = 'PRINTING'
    PAUSED = 'PAUSED'
    ERROR = 'ERROR'
    PRINTED = 'PRINTED'
    DELETED = 'DELETED'


@dataclass
class PrintJob:
    """A job in a remote queue."""

    job_id: int
    printer_name: str
    user_name: str = 'unknown'
    document_name: str = 'unknown'
    total_pages: int = 0
    # rpcclient does not report progress or submission time; these are
    # placeholders, not spooler values
    pages_printed: int = 0
    size: int = 0
    status: JobState = JobState.QUEUED
    submitted_time: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'jobId': self.job_id,
            'printerName': self.printer_name,
            'userName': self.user_name,
            'documentName': self.document_name,
            'totalPages': self.total_pages,
            'pagesPrinted': self.pages_printed,
            'size': self.size,
            'status': self.status.value,
            'submittedTime': self.submitted_time.isoformat(),
        }


@dataclass
class TransferResult:
    """
    Outcome of handing a document to a transport.

    ``job_id`` is the service's transfer reference. ``spooler_job_id`` is the
    number the remote spooler assigned, when it could be learned; only that
    one can be used for job management.
    """

    job_id: str
    spooler_job_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'jobId': self.job_id, 'spoolerJobId': self.spooler_job_id}
