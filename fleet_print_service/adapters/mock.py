"""
Mock Adapter
============

Deterministic in-process adapter for tests and local development.
No external tools are called.
"""

import logging
import uuid
from typing import Dict, List, Optional

from .base import BaseAdapter, FULL_MANAGEMENT, decode_payload
from ..models import Printer, PrinterStatus, PrinterState, PrintJob, TransferResult

logger = logging.getLogger(__name__)


class MockAdapter(BaseAdapter):
    """Adapter that returns canned data and records every call."""

    kind = 'mock'
    capabilities = FULL_MANAGEMENT

    def __init__(self, printers: Optional[List[Printer]] = None):
        if printers is None:
            printers = [
                Printer(name='Mock Printer 1', uri='mock://printer1'),
                Printer(name='Mock Printer 2', uri='mock://printer2'),
            ]
        self.printers = list(printers)
        self.jobs: Dict[str, List[PrintJob]] = {}
        self.calls: List[tuple] = []

    def _record(self, operation: str, *args):
        self.calls.append((operation, *args))

    def call_count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    # Helpers for tests

    def add_printer(self, name: str, uri: str):
        self.printers.append(Printer(name=name, uri=uri))

    def clear_printers(self):
        self.printers = []

    # Adapter operations

    def list_printers(self) -> List[Printer]:
        self._record('list_printers')
        return list(self.printers)

    def print_transfer(self, queue_name: str, file_base64: str) -> TransferResult:
        self._record('print_transfer', queue_name)
        decode_payload(file_base64)
        logger.info("[MOCK] Simulated print on %s", queue_name)
        return TransferResult(job_id=f'mock-job-{uuid.uuid4().hex[:8]}')

    def query_status(self, printer_name: str) -> PrinterStatus:
        self._record('query_status', printer_name)
        return PrinterStatus(
            name=printer_name,
            status=PrinterState.ONLINE,
            jobs_in_queue=len(self.jobs.get(printer_name, [])),
            status_message='Mock status - always online',
        )

    def list_jobs(self, printer_name: str) -> List[PrintJob]:
        self._record('list_jobs', printer_name)
        return list(self.jobs.get(printer_name, []))

    def cancel_job(self, printer_name: str, job_id: int) -> bool:
        self._record('cancel_job', printer_name, job_id)
        jobs = self.jobs.get(printer_name, [])
        self.jobs[printer_name] = [j for j in jobs if j.job_id != job_id]
        return True

    def pause_job(self, printer_name: str, job_id: int) -> bool:
        self._record('pause_job', printer_name, job_id)
        return True

    def resume_job(self, printer_name: str, job_id: int) -> bool:
        self._record('resume_job', printer_name, job_id)
        return True

    def pause_printer(self, printer_name: str) -> bool:
        self._record('pause_printer', printer_name)
        return True

    def resume_printer(self, printer_name: str) -> bool:
        self._record('resume_printer', printer_name)
        return True

    def clear_queue(self, printer_name: str) -> int:
        self._record('clear_queue', printer_name)
        count = len(self.jobs.get(printer_name, []))
        self.jobs[printer_name] = []
        return count
