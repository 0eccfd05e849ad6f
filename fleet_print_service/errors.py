"""
Service Errors
==============

Every failure the core raises derives from PrintServiceError. The HTTP layer
maps each subclass to a status code through ``http_status``.
"""

from typing import Optional


class PrintServiceError(Exception):
    """Base class for service errors."""

    code = 'error'
    http_status = 500

    def to_dict(self):
        return {'success': False, 'error': str(self), 'code': self.code}


class TransportError(PrintServiceError):
    """An external tool could not be spawned or exited non-zero."""

    code = 'transport_failure'
    http_status = 502

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr: str = ''):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class UnsupportedOperationError(PrintServiceError):
    """The configured adapter variant cannot perform a management operation."""

    code = 'unsupported'
    http_status = 501

    def __init__(self, operation: str, variant: str, supported_by: str = 'rpcclient'):
        super().__init__(
            f"{operation} is not supported by the '{variant}' adapter; "
            f"use the '{supported_by}' adapter for printer management"
        )
        self.operation = operation
        self.variant = variant
        self.supported_by = supported_by


class PrinterNotFoundError(PrintServiceError):
    code = 'not_found'
    http_status = 404

    def __init__(self, printer_id: str):
        super().__init__(
            f'Printer "{printer_id}" not found. Call GET /api/printers to refresh the list.'
        )
        self.printer_id = printer_id


class ValidationError(PrintServiceError):
    code = 'validation'
    http_status = 400
