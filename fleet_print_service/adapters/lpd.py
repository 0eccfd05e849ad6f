"""
LPD Transfer Adapter
====================

Submits to Line Printer Daemon queues with ``lpr``. LPD has no discovery,
so the queue list comes from configuration.
"""

import logging
from typing import Callable, List, Optional, Sequence
from urllib.parse import quote

from .base import BaseAdapter, TRANSFER_ONLY, payload_file, job_id_from_path
from ..config import TMP_DIR
from ..errors import TransportError
from ..models import Printer, TransferResult
from ..runner import CommandResult, run_command

logger = logging.getLogger(__name__)


class LpdAdapter(BaseAdapter):
    kind = 'lpd'
    capabilities = TRANSFER_ONLY

    def __init__(self, host: str, queues: Sequence[str] = (), runner: Callable[..., CommandResult] = run_command,
                 timeout: Optional[float] = None, tmp_dir: str = TMP_DIR):
        self.host = host
        self.queues = list(queues)
        self._runner = runner
        self._timeout = timeout
        self._tmp_dir = tmp_dir

    def list_printers(self) -> List[Printer]:
        return [Printer(name=q, uri=f'lpd://{self.host}/{quote(q, safe="")}') for q in self.queues]

    def print_transfer(self, queue_name: str, file_base64: str) -> TransferResult:
        with payload_file(file_base64, self._tmp_dir) as path:
            result = self._runner('lpr', ['-H', self.host, '-P', queue_name, path], timeout=self._timeout)
            if not result.ok:
                raise TransportError(
                    f'lpr failed ({result.exit_code}) {result.failure_reason()}',
                    exit_code=result.exit_code,
                    stderr=result.stderr,
                )
            job_id = job_id_from_path(path)

        logger.info("Sent %s to lpd://%s/%s", job_id, self.host, queue_name)
        return TransferResult(job_id=job_id)
