"""
Print Job Consumer
==================

Handles print requests arriving from a message broker. Each message carries
``{"printerId": ..., "fileBase64": ...}`` and goes through the same dispatch
as ``POST /api/printers/print``.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

from .errors import ValidationError
from .service import PrintersService

logger = logging.getLogger(__name__)


def decode_message(message: Any) -> Dict[str, Any]:
    """
    Normalize a broker message to a dict.

    Accepts raw bytes/str JSON, a dict, or an envelope dict whose ``value``
    holds any of those.
    """
    if isinstance(message, dict) and 'value' in message and 'printerId' not in message:
        message = message['value']

    if isinstance(message, (bytes, bytearray)):
        try:
            message = message.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ValidationError(f'Message is not valid UTF-8: {e}') from e

    if isinstance(message, str):
        try:
            message = json.loads(message)
        except ValueError as e:
            raise ValidationError(f'Message is not valid JSON: {e}') from e

    if not isinstance(message, dict):
        raise ValidationError(f'Message must be a JSON object, got {type(message).__name__}')
    return message


def handle_print_message(service: PrintersService, message: Any) -> Dict[str, Any]:
    """
    Dispatch one print message.

    Errors are logged and re-raised so the broker can retry or dead-letter.
    """
    started = time.monotonic()
    data = decode_message(message)
    printer_id = data.get('printerId')

    logger.info("Print message received - printerId: %s...", str(printer_id)[:8])

    try:
        result = service.print(printer_id, data.get('fileBase64'))
    except Exception as e:
        duration_ms = int((time.monotonic() - started) * 1000)
        logger.error("Failed to process print message (%dms): %s", duration_ms, e)
        raise

    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info("Print message dispatched - jobId: %s (%dms)", result.job_id, duration_ms)

    return {
        'status': 'success',
        'jobId': result.job_id,
        'spoolerJobId': result.spooler_job_id,
        'processedAt': datetime.now(timezone.utc).isoformat(),
    }
