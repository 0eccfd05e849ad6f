"""
Tool Output Parser
==================

Turns the text printed by ``rpcclient``, ``smbclient`` and the CUPS client
tools into typed records. Kept free of any process handling so it can be fed
captured output directly.

enumprinters::

    flags:[0x800000]
    name:[\\\\server\\HP LaserJet 9020]
    description:[\\\\server\\HP LaserJet 9020,HP Universal,Floor 2]
    comment:[]

getprinter::

    servername:[\\\\server]
    printername:[\\\\server\\HP LaserJet 9020]
    ...
    status:[0x0]
    cjobs:[0]

enumjobs (one block per job, blocks separated by blank lines)::

    Job Id: 12
    Printer: HP LaserJet 9020
    User: CORP\\jdoe
    Document: report.pdf
    Total Pages: 5
    Size: 20480
    Status: 0x10

smbclient -L::

        Sharename       Type      Comment
        ---------       ----      -------
        HP-1            Printer   HP LaserJet 9020
        print$          Disk      Printer Drivers

lp::

    request id is HP-1-42 (1 file(s))
"""

import re
from typing import List, Optional, Tuple
from urllib.parse import quote

from .models import Printer, PrinterState, PrintJob, JobState, utc_now

# =============================================================================
# Field patterns
# =============================================================================

_PRINTER_NAME_RE = re.compile(r'^\s*name:\[\\\\[^\\\]]+\\(.+?)\]\s*$')
_PRINTER_STATUS_RE = re.compile(r'^\s*status:\[0x([0-9a-fA-F]+)\]', re.MULTILINE)

_BLOCK_SPLIT_RE = re.compile(r'\r?\n\s*\r?\n')

_JOB_FIELDS = {
    'job_id': re.compile(r'Job Id:\s*(\d+)', re.IGNORECASE),
    'user': re.compile(r'User:[ \t]*(?:[^\r\n]*\\)?([^\r\n]+)', re.IGNORECASE),
    'document': re.compile(r'Document:[ \t]*([^\r\n]+)', re.IGNORECASE),
    'total_pages': re.compile(r'Total Pages:\s*(\d+)', re.IGNORECASE),
    'size': re.compile(r'Size:\s*(\d+)', re.IGNORECASE),
    'status': re.compile(r'Status:\s*0x([0-9a-fA-F]+)', re.IGNORECASE),
}

# =============================================================================
# Status bits
# =============================================================================

PRINTER_STATUS_PAUSED = 0x1
PRINTER_STATUS_ERROR = 0x2
PRINTER_STATUS_OFFLINE = 0x4

# Checked in order, first match wins
JOB_STATUS_BITS = (
    (0x1, JobState.PAUSED),
    (0x2, JobState.ERROR),
    (0x10, JobState.PRINTING),
    (0x80, JobState.DELETED),
    (0x100, JobState.PRINTED),
)

_PRINTER_STATUS_MESSAGES = {
    PrinterState.PAUSED: 'Printer paused',
    PrinterState.ERROR: 'Printer error',
    PrinterState.OFFLINE: 'Printer offline',
}


def smb_uri(host: str, name: str) -> str:
    return f'smb://{host}/{quote(name, safe="")}'


def decode_printer_status(code: Optional[int]) -> PrinterState:
    """Decode the ``getprinter`` status bit field."""
    if code is None:
        return PrinterState.UNKNOWN
    if code == 0:
        return PrinterState.ONLINE
    if code & PRINTER_STATUS_PAUSED:
        return PrinterState.PAUSED
    if code & PRINTER_STATUS_ERROR:
        return PrinterState.ERROR
    if code & PRINTER_STATUS_OFFLINE:
        return PrinterState.OFFLINE
    return PrinterState.UNKNOWN


def decode_job_status(code: int) -> JobState:
    """Decode an ``enumjobs`` status bit field."""
    for bit, state in JOB_STATUS_BITS:
        if code & bit:
            return state
    return JobState.QUEUED


def parse_printers(output: str, host: str) -> List[Printer]:
    """Extract printers from ``enumprinters`` output."""
    printers = []
    for line in output.splitlines():
        match = _PRINTER_NAME_RE.match(line)
        if match:
            name = match.group(1)
            printers.append(Printer(name=name, uri=smb_uri(host, name)))
    return printers


def parse_printer_status(output: str) -> Tuple[PrinterState, Optional[str]]:
    """
    Extract the status of one printer from ``getprinter`` output.

    Returns:
        (state, message) where message describes non-online states
    """
    match = _PRINTER_STATUS_RE.search(output)
    code = int(match.group(1), 16) if match else None
    state = decode_printer_status(code)

    if state is PrinterState.UNKNOWN:
        if code is None:
            message = f'Unparsed getprinter output: {output.strip()[:200]}'
        else:
            message = f'Unrecognized status 0x{code:x}'
        return state, message
    return state, _PRINTER_STATUS_MESSAGES.get(state)


def _int_field(block: str, name: str) -> int:
    match = _JOB_FIELDS[name].search(block)
    return int(match.group(1)) if match else 0


def _text_field(block: str, name: str) -> str:
    match = _JOB_FIELDS[name].search(block)
    value = match.group(1).strip() if match else ''
    return value or 'unknown'


def parse_job_block(block: str, printer_name: str) -> Optional[PrintJob]:
    """Parse one job block. Blocks without a job id yield None."""
    job_id = _JOB_FIELDS['job_id'].search(block)
    if not job_id:
        return None

    status = _JOB_FIELDS['status'].search(block)
    status_code = int(status.group(1), 16) if status else 0

    return PrintJob(
        job_id=int(job_id.group(1)),
        printer_name=printer_name,
        user_name=_text_field(block, 'user'),
        document_name=_text_field(block, 'document'),
        total_pages=_int_field(block, 'total_pages'),
        pages_printed=0,
        size=_int_field(block, 'size'),
        status=decode_job_status(status_code),
        submitted_time=utc_now(),
    )


def parse_jobs(output: str, printer_name: str) -> List[PrintJob]:
    """Extract the jobs of one queue from ``enumjobs`` output."""
    jobs = []
    for block in _BLOCK_SPLIT_RE.split(output):
        if not block.strip():
            continue
        job = parse_job_block(block, printer_name)
        if job is not None:
            jobs.append(job)
    return jobs


# =============================================================================
# smbclient / CUPS
# =============================================================================

# smbclient pads the type column to 10 characters, so "Printer" is followed by
# at least two spaces or the end of the line
_SMB_PRINTER_SHARE_RE = re.compile(r'^\s*(?P<name>\S.*?)\s+Printer(?:\s{2,}.*)?\s*$')
_LP_REQUEST_RE = re.compile(r'request id is (\S+)-(\d+)')


def parse_smb_shares(output: str, host: str) -> List[Printer]:
    """Extract printer shares from ``smbclient -L`` output."""
    printers = []
    for line in output.splitlines():
        match = _SMB_PRINTER_SHARE_RE.match(line)
        if not match:
            continue
        name = match.group('name')
        # driver share, not a queue
        if name.lower() == 'print$':
            continue
        printers.append(Printer(name=name, uri=smb_uri(host, name)))
    return printers


def parse_lpstat_queues(output: str) -> List[str]:
    """Queue names from ``lpstat -a`` output (first word of each line)."""
    return [line.split()[0] for line in output.splitlines() if line.strip()]


def parse_lp_request_id(output: str) -> Optional[int]:
    """Spooler job number from ``lp`` output, if present."""
    match = _LP_REQUEST_RE.search(output)
    return int(match.group(2)) if match else None
