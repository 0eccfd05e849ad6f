"""
Printer Management
==================

Queue and printer control addressed by cached printer id. Job state is read
from the adapter on every call and never cached.
"""

import logging
from typing import Any, Dict, List

from .adapters import BaseAdapter, OPERATION_CAPABILITIES
from .adapters.base import MANAGEMENT_ADAPTER
from .errors import UnsupportedOperationError
from .models import CachedPrinter, PrinterStatus, PrintJob
from .service import PrintersService

logger = logging.getLogger(__name__)


class PrintersManagementService:
    """Management operations on top of the printer cache."""

    def __init__(self, printers: PrintersService, adapter: BaseAdapter):
        self.printers = printers
        self.adapter = adapter

    def _resolve(self, printer_id: str, operation: str) -> CachedPrinter:
        """Check the adapter can do ``operation``, then resolve the printer."""
        if not self.adapter.supports(OPERATION_CAPABILITIES[operation]):
            raise UnsupportedOperationError(operation, self.adapter.kind, MANAGEMENT_ADAPTER)
        return self.printers.require_printer(printer_id)

    def get_printer_status(self, printer_id: str) -> PrinterStatus:
        printer = self._resolve(printer_id, 'query_status')
        return self.adapter.query_status(printer.name)

    def get_queue(self, printer_id: str) -> List[PrintJob]:
        printer = self._resolve(printer_id, 'list_jobs')
        return self.adapter.list_jobs(printer.name)

    def cancel_job(self, printer_id: str, job_id: int) -> Dict[str, Any]:
        printer = self._resolve(printer_id, 'cancel_job')
        success = self.adapter.cancel_job(printer.name, job_id)
        return {
            'success': success,
            'message': f'Job {job_id} cancelled' if success else f'Failed to cancel job {job_id}',
        }

    def clear_queue(self, printer_id: str) -> Dict[str, Any]:
        printer = self._resolve(printer_id, 'clear_queue')
        cancelled = self.adapter.clear_queue(printer.name)
        logger.info("Cleared %d job(s) from %s", cancelled, printer.name)
        return {
            'canceledCount': cancelled,
            'message': f'{cancelled} job(s) cancelled',
        }

    def pause_printer(self, printer_id: str) -> Dict[str, Any]:
        printer = self._resolve(printer_id, 'pause_printer')
        success = self.adapter.pause_printer(printer.name)
        return {
            'success': success,
            'message': f'Printer "{printer.name}" paused' if success else f'Failed to pause printer "{printer.name}"',
        }

    def resume_printer(self, printer_id: str) -> Dict[str, Any]:
        printer = self._resolve(printer_id, 'resume_printer')
        success = self.adapter.resume_printer(printer.name)
        return {
            'success': success,
            'message': f'Printer "{printer.name}" resumed' if success else f'Failed to resume printer "{printer.name}"',
        }

    def pause_job(self, printer_id: str, job_id: int) -> Dict[str, Any]:
        printer = self._resolve(printer_id, 'pause_job')
        success = self.adapter.pause_job(printer.name, job_id)
        return {
            'success': success,
            'message': f'Job {job_id} paused' if success else f'Failed to pause job {job_id}',
        }

    def resume_job(self, printer_id: str, job_id: int) -> Dict[str, Any]:
        printer = self._resolve(printer_id, 'resume_job')
        success = self.adapter.resume_job(printer.name, job_id)
        return {
            'success': success,
            'message': f'Job {job_id} resumed' if success else f'Failed to resume job {job_id}',
        }
