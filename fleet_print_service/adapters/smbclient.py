"""
SMB Transfer Adapter
====================

Lists printer shares and submits documents with ``smbclient``.
Transfer only: the SMB file protocol has no queue management.

Requires: smbclient (samba-client / smbclient package)
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .base import BaseAdapter, TRANSFER_ONLY, payload_file, job_id_from_path
from ..config import TMP_DIR
from ..errors import TransportError
from ..models import Printer, TransferResult
from ..parser import parse_smb_shares
from ..runner import CommandResult, run_command

logger = logging.getLogger(__name__)

Runner = Callable[..., CommandResult]


@dataclass
class SmbCredentials:
    host: str
    user: str
    password: str
    domain: Optional[str] = None
    dialect: Optional[str] = None  # e.g. SMB3

    def user_arg(self) -> str:
        return f'{self.user}%{self.password}'


class SmbClientAdapter(BaseAdapter):
    """Adapter for SMB print shares via ``smbclient``."""

    kind = 'smbclient'
    capabilities = TRANSFER_ONLY

    def __init__(self, creds: SmbCredentials, runner: Runner = run_command,
                 timeout: Optional[float] = None, tmp_dir: str = TMP_DIR):
        self.creds = creds
        self._runner = runner
        self._timeout = timeout
        self._tmp_dir = tmp_dir

    def _smbclient_args(self, *lead: str) -> List[str]:
        args = [*lead, '-U', self.creds.user_arg()]
        if self.creds.dialect:
            args += ['-m', self.creds.dialect]
        if self.creds.domain:
            args += ['-W', self.creds.domain]
        return args

    def _smbclient(self, *lead: str) -> CommandResult:
        return self._runner('smbclient', self._smbclient_args(*lead), timeout=self._timeout)

    def list_printers(self) -> List[Printer]:
        """List printer shares on the server."""
        result = self._smbclient('-L', f'//{self.creds.host}')
        if not result.ok:
            raise TransportError(
                f'smbclient -L failed ({result.exit_code}) {result.failure_reason()}',
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return parse_smb_shares(result.stdout, self.creds.host)

    def _submit(self, queue_name: str, path: str) -> CommandResult:
        result = self._smbclient(f'//{self.creds.host}/{queue_name}', '-c', f'print {path}')
        if not result.ok:
            raise TransportError(
                f'print failed ({result.exit_code}) {result.failure_reason()}',
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return result

    def print_transfer(self, queue_name: str, file_base64: str) -> TransferResult:
        """
        Send a document to a share with ``smbclient -c "print <file>"``.

        SMB returns no spooler job id, so the job id is the temporary file
        name and cannot be used for job management.
        """
        with payload_file(file_base64, self._tmp_dir) as path:
            self._submit(queue_name, path)
            job_id = job_id_from_path(path)

        logger.info("Sent %s to //%s/%s", job_id, self.creds.host, queue_name)
        return TransferResult(job_id=job_id)
