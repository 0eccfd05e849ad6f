"""
Base Adapter
============

Abstract base class for printer adapters.

Every adapter can list printers and transfer documents. Management
operations are optional: adapters declare what they support through
``capabilities`` and the defaults here refuse with UnsupportedOperationError.
"""

import base64
import binascii
import logging
import os
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import FrozenSet, Iterator, List

from ..errors import UnsupportedOperationError, ValidationError
from ..models import Printer, PrinterStatus, PrintJob, TransferResult

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    DISCOVERY = 'discovery'
    TRANSFER = 'transfer'
    STATUS = 'status'
    QUEUE = 'queue'
    JOB_CONTROL = 'job_control'
    PRINTER_CONTROL = 'printer_control'


TRANSFER_ONLY = frozenset({Capability.DISCOVERY, Capability.TRANSFER})
FULL_MANAGEMENT = frozenset(Capability)

OPERATION_CAPABILITIES = {
    'list_printers': Capability.DISCOVERY,
    'print_transfer': Capability.TRANSFER,
    'query_status': Capability.STATUS,
    'list_jobs': Capability.QUEUE,
    'cancel_job': Capability.JOB_CONTROL,
    'pause_job': Capability.JOB_CONTROL,
    'resume_job': Capability.JOB_CONTROL,
    'clear_queue': Capability.JOB_CONTROL,
    'pause_printer': Capability.PRINTER_CONTROL,
    'resume_printer': Capability.PRINTER_CONTROL,
}

# Adapter kind that implements every management operation
MANAGEMENT_ADAPTER = 'rpcclient'


def decode_payload(file_base64: str) -> bytes:
    """Decode a base64 document payload."""
    try:
        return base64.b64decode(file_base64, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise ValidationError(f'fileBase64 is not valid base64: {e}') from e


@contextmanager
def payload_file(file_base64: str, tmp_dir: str, suffix: str = '.pdf') -> Iterator[str]:
    """
    Write a decoded payload to a temporary file for the duration of the block.

    The file is removed on every exit path.
    """
    data = decode_payload(file_base64)
    os.makedirs(tmp_dir, exist_ok=True)
    path = os.path.join(tmp_dir, f'job-{uuid.uuid4()}{suffix}')

    try:
        with open(path, 'wb') as f:
            f.write(data)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove temporary payload %s: %s", path, e)


def job_id_from_path(path: str) -> str:
    """Transfer reference derived from a payload file name."""
    return os.path.splitext(os.path.basename(path))[0]


class BaseAdapter(ABC):
    """Abstract base class for printer adapters."""

    kind = 'base'
    capabilities: FrozenSet[Capability] = TRANSFER_ONLY

    def supports(self, capability: Capability) -> bool:
        """Check if the adapter supports a capability."""
        return capability in self.capabilities

    def supports_operation(self, operation: str) -> bool:
        return self.supports(OPERATION_CAPABILITIES[operation])

    def _unsupported(self, operation: str):
        return UnsupportedOperationError(operation, self.kind, MANAGEMENT_ADAPTER)

    @abstractmethod
    def list_printers(self) -> List[Printer]:
        """
        List the queues reachable through this transport.

        Raises:
            TransportError: discovery failed
        """
        pass

    @abstractmethod
    def print_transfer(self, queue_name: str, file_base64: str) -> TransferResult:
        """
        Submit a document to a queue.

        Args:
            queue_name: Transport-level queue name
            file_base64: Base64 encoded document

        Returns:
            TransferResult with the transfer reference

        Raises:
            ValidationError: the payload is not valid base64
            TransportError: submission failed
        """
        pass

    def query_status(self, printer_name: str) -> PrinterStatus:
        """Get printer status (override in adapters that support it)."""
        raise self._unsupported('query_status')

    def list_jobs(self, printer_name: str) -> List[PrintJob]:
        """List jobs in a queue (override in adapters that support it)."""
        raise self._unsupported('list_jobs')

    def cancel_job(self, printer_name: str, job_id: int) -> bool:
        raise self._unsupported('cancel_job')

    def pause_job(self, printer_name: str, job_id: int) -> bool:
        raise self._unsupported('pause_job')

    def resume_job(self, printer_name: str, job_id: int) -> bool:
        raise self._unsupported('resume_job')

    def pause_printer(self, printer_name: str) -> bool:
        raise self._unsupported('pause_printer')

    def resume_printer(self, printer_name: str) -> bool:
        raise self._unsupported('resume_printer')

    def clear_queue(self, printer_name: str) -> int:
        """Cancel every job in a queue and return how many were cancelled."""
        raise self._unsupported('clear_queue')

    def describe(self):
        return {
            'adapter': self.kind,
            'capabilities': sorted(c.value for c in self.capabilities),
            'operations': sorted(op for op in OPERATION_CAPABILITIES if self.supports_operation(op)),
        }
