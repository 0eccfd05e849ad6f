"""
Command Runner
==============

Runs one external tool invocation per call and captures its output.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def failure_reason(self) -> str:
        return (self.stderr or self.stdout).strip()


def run_command(program: str, args: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
    """
    Spawn ``program`` with ``args`` and wait for it to exit.

    stdin is closed and stdout/stderr are captured as text. A non-zero exit
    code is returned, not raised; the caller decides what success means.

    Raises:
        TransportError: the program could not be started or ``timeout``
            expired.
    """
    cmd = [program, *args]
    logger.debug("Running %s (%d args)", program, len(args))

    try:
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise TransportError(f"{program} not found in PATH") from e
    except subprocess.TimeoutExpired as e:
        raise TransportError(f"{program} timed out after {timeout}s") from e
    except OSError as e:
        raise TransportError(f"{program} could not be started: {e}") from e

    if proc.returncode != 0:
        logger.debug("%s exited with %s", program, proc.returncode)

    return CommandResult(
        exit_code=proc.returncode,
        stdout=proc.stdout or '',
        stderr=proc.stderr or '',
    )
