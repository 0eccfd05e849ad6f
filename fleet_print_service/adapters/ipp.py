"""
IPP Transfer Adapter
====================

Discovers and submits to queues on a remote CUPS/IPP server with the CUPS
command line tools (``lpstat``, ``lp``). Transfer only.

Requires: cups-client
"""

import logging
from typing import Callable, List, Optional
from urllib.parse import quote

from .base import BaseAdapter, TRANSFER_ONLY, payload_file, job_id_from_path
from ..config import TMP_DIR
from ..errors import TransportError
from ..models import Printer, TransferResult
from ..parser import parse_lpstat_queues, parse_lp_request_id
from ..runner import CommandResult, run_command

logger = logging.getLogger(__name__)


class IppAdapter(BaseAdapter):
    """Adapter for IPP queues via the CUPS client tools."""

    kind = 'ipp'
    capabilities = TRANSFER_ONLY

    def __init__(self, host: str, port: int = 631, runner: Callable[..., CommandResult] = run_command,
                 timeout: Optional[float] = None, tmp_dir: str = TMP_DIR):
        self.host = host
        self.port = port
        self._runner = runner
        self._timeout = timeout
        self._tmp_dir = tmp_dir

    @property
    def server(self) -> str:
        return f'{self.host}:{self.port}'

    def _check(self, tool: str, result: CommandResult) -> CommandResult:
        if not result.ok:
            raise TransportError(
                f'{tool} failed ({result.exit_code}) {result.failure_reason()}',
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return result

    def list_printers(self) -> List[Printer]:
        result = self._runner('lpstat', ['-h', self.server, '-a'], timeout=self._timeout)
        self._check('lpstat', result)

        return [
            Printer(name=name, uri=f'ipp://{self.server}/printers/{quote(name, safe="")}')
            for name in parse_lpstat_queues(result.stdout)
        ]

    def print_transfer(self, queue_name: str, file_base64: str) -> TransferResult:
        """Submit with ``lp``; the spooler job number is read from its output."""
        with payload_file(file_base64, self._tmp_dir) as path:
            result = self._runner('lp', ['-h', self.server, '-d', queue_name, path], timeout=self._timeout)
            self._check('lp', result)
            job_id = job_id_from_path(path)

        spooler_job_id = parse_lp_request_id(result.stdout)
        logger.info("Sent %s to ipp://%s/%s (spooler job %s)", job_id, self.server, queue_name, spooler_job_id)
        return TransferResult(job_id=job_id, spooler_job_id=spooler_job_id)
