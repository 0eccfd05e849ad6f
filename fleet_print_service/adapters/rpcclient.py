"""
SMB Management Adapter
======================

Full printer management against a Windows/Samba print server through
``rpcclient`` (MS-RPRN). Documents are still submitted with ``smbclient``.

Requires: rpcclient and smbclient (samba-common-bin, smbclient)
"""

import logging
import os
from typing import List, Optional

from .base import FULL_MANAGEMENT, payload_file, job_id_from_path
from .smbclient import SmbClientAdapter
from ..errors import TransportError, ValidationError
from ..models import Printer, PrinterStatus, PrintJob, TransferResult
from ..parser import parse_printers, parse_printer_status, parse_jobs
from ..runner import CommandResult

logger = logging.getLogger(__name__)

# setjob command codes
JOB_PAUSE = 1
JOB_RESUME = 2
JOB_DELETE = 4

# setprinter command codes
PRINTER_PAUSE = 1
PRINTER_RESUME = 2


def quote_printer_name(printer_name: str) -> str:
    """
    Quote a printer name for an rpcclient command.

    rpcclient has no escape for quotes inside a quoted argument, so names
    containing a double quote or a line break are rejected.
    """
    if any(c in printer_name for c in '"\r\n'):
        raise ValidationError(f'Printer name {printer_name!r} cannot be used in an rpcclient command')
    return f'"{printer_name}"'


class RpcClientAdapter(SmbClientAdapter):
    """Adapter with queue and job management via ``rpcclient``."""

    kind = 'rpcclient'
    capabilities = FULL_MANAGEMENT

    def _auth(self) -> str:
        if self.creds.domain:
            return f'{self.creds.domain}\\{self.creds.user_arg()}'
        return self.creds.user_arg()

    def _rpc(self, command: str) -> CommandResult:
        args = ['-U', self._auth(), f'//{self.creds.host}', '-c', command]
        return self._runner('rpcclient', args, timeout=self._timeout)

    def _rpc_output(self, command: str) -> str:
        """Run a query command; non-zero exit raises TransportError."""
        result = self._rpc(command)
        if not result.ok:
            verb = command.split()[0]
            raise TransportError(
                f'rpcclient {verb} failed ({result.exit_code}): {result.failure_reason()}',
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return result.stdout

    def _rpc_ok(self, command: str) -> bool:
        """Run a mutation; success is exit code 0. Never raises."""
        try:
            result = self._rpc(command)
        except TransportError as e:
            logger.error("rpcclient %r failed: %s", command, e)
            return False

        if not result.ok:
            logger.error("rpcclient %r failed (%s): %s", command, result.exit_code, result.failure_reason())
            return False
        return True

    # =========================================================================
    # Discovery & Transfer
    # =========================================================================

    def list_printers(self) -> List[Printer]:
        return parse_printers(self._rpc_output('enumprinters'), self.creds.host)

    def print_transfer(self, queue_name: str, file_base64: str) -> TransferResult:
        """
        Submit with ``smbclient`` and look up the spooler's job id.

        smbclient names the job after the submitted file, so the new job is
        found by its document name. The lookup is best effort.
        """
        with payload_file(file_base64, self._tmp_dir) as path:
            self._submit(queue_name, path)
            job_id = job_id_from_path(path)
            spooler_job_id = self._find_spooler_job(queue_name, os.path.basename(path))

        logger.info("Sent %s to //%s/%s (spooler job %s)", job_id, self.creds.host, queue_name, spooler_job_id)
        return TransferResult(job_id=job_id, spooler_job_id=spooler_job_id)

    def _find_spooler_job(self, queue_name: str, file_name: str) -> Optional[int]:
        try:
            jobs = self.list_jobs(queue_name)
        except (TransportError, ValidationError) as e:
            logger.warning("Could not resolve spooler job for %s: %s", file_name, e)
            return None

        for job in jobs:
            if job.document_name.endswith(file_name):
                return job.job_id
        return None

    # =========================================================================
    # Status & Queue
    # =========================================================================

    def query_status(self, printer_name: str) -> PrinterStatus:
        """Printer status from ``getprinter`` plus the queue depth from ``enumjobs``."""
        state, message = parse_printer_status(self._rpc_output(f'getprinter {quote_printer_name(printer_name)}'))
        jobs = self.list_jobs(printer_name)

        return PrinterStatus(
            name=printer_name,
            status=state,
            jobs_in_queue=len(jobs),
            status_message=message,
        )

    def list_jobs(self, printer_name: str) -> List[PrintJob]:
        return parse_jobs(self._rpc_output(f'enumjobs {quote_printer_name(printer_name)}'), printer_name)

    # =========================================================================
    # Job Control
    # =========================================================================

    def cancel_job(self, printer_name: str, job_id: int) -> bool:
        return self._rpc_ok(f'setjob {quote_printer_name(printer_name)} {int(job_id)} {JOB_DELETE}')

    def pause_job(self, printer_name: str, job_id: int) -> bool:
        return self._rpc_ok(f'setjob {quote_printer_name(printer_name)} {int(job_id)} {JOB_PAUSE}')

    def resume_job(self, printer_name: str, job_id: int) -> bool:
        return self._rpc_ok(f'setjob {quote_printer_name(printer_name)} {int(job_id)} {JOB_RESUME}')

    def clear_queue(self, printer_name: str) -> int:
        """
        Cancel every job in the queue.

        Jobs that fail to cancel are skipped, not retried.

        Returns:
            Number of jobs cancelled
        """
        cancelled = 0
        for job in self.list_jobs(printer_name):
            if self.cancel_job(printer_name, job.job_id):
                cancelled += 1
            else:
                logger.warning("Skipping job %s on %s: cancel failed", job.job_id, printer_name)
        return cancelled

    # =========================================================================
    # Printer Control
    # =========================================================================

    def pause_printer(self, printer_name: str) -> bool:
        return self._rpc_ok(f'setprinter {quote_printer_name(printer_name)} {PRINTER_PAUSE}')

    def resume_printer(self, printer_name: str) -> bool:
        return self._rpc_ok(f'setprinter {quote_printer_name(printer_name)} {PRINTER_RESUME}')
