"""
Fleet Print Service Configuration
"""

import os
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional


def _env_bool(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() == 'true'


def _env_float(name: str) -> Optional[float]:
    value = os.environ.get(name, '').strip()
    return float(value) if value else None


# =============================================================================
# Server Configuration
# =============================================================================

PORT = int(os.environ.get('FLEET_PRINT_PORT', 5100))
HOST = os.environ.get('FLEET_PRINT_HOST', '0.0.0.0')
DEBUG = _env_bool('FLEET_PRINT_DEBUG')

# API Key for authentication
API_KEY = os.environ.get('FLEET_PRINT_API_KEY', 'fleet-print-2026')

LOG_LEVEL = os.environ.get('FLEET_PRINT_LOG_LEVEL', 'INFO').upper()

# =============================================================================
# Transport / Adapter
# =============================================================================

# rpcclient, smbclient, ipp, lpd, mock
ADAPTER = os.environ.get('FLEET_PRINT_ADAPTER', 'mock').lower()

SMB_HOST = os.environ.get('FLEET_PRINT_SMB_HOST', '')
SMB_USER = os.environ.get('FLEET_PRINT_SMB_USER', '')
SMB_PASS = os.environ.get('FLEET_PRINT_SMB_PASS', '')
SMB_DOMAIN = os.environ.get('FLEET_PRINT_SMB_DOMAIN') or None
SMB_DIALECT = os.environ.get('FLEET_PRINT_SMB_DIALECT') or None  # e.g. SMB3

IPP_HOST = os.environ.get('FLEET_PRINT_IPP_HOST', '')
IPP_PORT = int(os.environ.get('FLEET_PRINT_IPP_PORT', 631))

LPD_HOST = os.environ.get('FLEET_PRINT_LPD_HOST', '')
LPD_QUEUES = [q.strip() for q in os.environ.get('FLEET_PRINT_LPD_QUEUES', '').split(',') if q.strip()]

# No timeout unless configured; a hung tool call stalls its own request only
COMMAND_TIMEOUT = _env_float('FLEET_PRINT_COMMAND_TIMEOUT')

# Decoded payloads are written here before submission
TMP_DIR = os.environ.get('FLEET_PRINT_TMP_DIR', os.path.join(tempfile.gettempdir(), 'prints'))

# =============================================================================
# Printer Cache
# =============================================================================

CACHE_KEY = 'printers:list'

# Stale entries are still served but trigger a background refresh
STALE_SECONDS = float(os.environ.get('FLEET_PRINT_STALE_SECONDS', 5 * 60))

# Entries are evicted from the store only after this long
STORAGE_TTL = float(os.environ.get('FLEET_PRINT_STORAGE_TTL', 24 * 60 * 60))

# memory, file
CACHE_BACKEND = os.environ.get('FLEET_PRINT_CACHE_BACKEND', 'memory').lower()

DATA_DIR = os.environ.get('FLEET_PRINT_DATA_DIR', os.path.expanduser('~/.fleet_print_service'))

# =============================================================================
# Dispatch
# =============================================================================

SIMULATE_PRINT = _env_bool('FLEET_PRINT_SIMULATE')
SIMULATE_DELAY = float(os.environ.get('FLEET_PRINT_SIMULATE_DELAY', 1.0))


@dataclass
class ServiceConfig:
    """Settings passed to the adapter, the cache layer and the app."""

    adapter: str = ADAPTER

    smb_host: str = SMB_HOST
    smb_user: str = SMB_USER
    smb_pass: str = SMB_PASS
    smb_domain: Optional[str] = SMB_DOMAIN
    smb_dialect: Optional[str] = SMB_DIALECT

    ipp_host: str = IPP_HOST
    ipp_port: int = IPP_PORT

    lpd_host: str = LPD_HOST
    lpd_queues: List[str] = field(default_factory=lambda: list(LPD_QUEUES))

    command_timeout: Optional[float] = COMMAND_TIMEOUT
    tmp_dir: str = TMP_DIR

    cache_key: str = CACHE_KEY
    stale_seconds: float = STALE_SECONDS
    storage_ttl: float = STORAGE_TTL
    cache_backend: str = CACHE_BACKEND
    data_dir: str = DATA_DIR

    simulate_print: bool = SIMULATE_PRINT
    simulate_delay: float = SIMULATE_DELAY

    api_key: str = API_KEY

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Build from the environment values read at import time."""
        return cls()
