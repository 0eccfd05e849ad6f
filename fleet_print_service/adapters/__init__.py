"""
Fleet Print Service Adapters
============================

Transport adapters for the printer fleet.
"""

from .base import BaseAdapter, Capability, OPERATION_CAPABILITIES, TRANSFER_ONLY, FULL_MANAGEMENT
from .smbclient import SmbClientAdapter, SmbCredentials
from .rpcclient import RpcClientAdapter
from .ipp import IppAdapter
from .lpd import LpdAdapter
from .mock import MockAdapter
from ..config import ServiceConfig

__all__ = [
    'BaseAdapter', 'Capability', 'OPERATION_CAPABILITIES', 'TRANSFER_ONLY', 'FULL_MANAGEMENT',
    'SmbClientAdapter', 'SmbCredentials', 'RpcClientAdapter', 'IppAdapter', 'LpdAdapter', 'MockAdapter',
    'ADAPTERS', 'get_adapter', 'build_adapter',
]

# Adapter registry
ADAPTERS = {
    'rpcclient': RpcClientAdapter,
    'smbclient': SmbClientAdapter,
    'ipp': IppAdapter,
    'lpd': LpdAdapter,
    'mock': MockAdapter,
}


def get_adapter(kind: str) -> type:
    """Get adapter class by kind."""
    return ADAPTERS.get(kind)


def build_adapter(config: ServiceConfig) -> BaseAdapter:
    """Construct the adapter selected by ``config.adapter``."""
    adapter_class = get_adapter(config.adapter)
    if adapter_class is None:
        raise ValueError(f'Unknown adapter {config.adapter!r}. Valid: {list(ADAPTERS.keys())}')

    if adapter_class is MockAdapter:
        return MockAdapter()

    if adapter_class is IppAdapter:
        return IppAdapter(config.ipp_host, config.ipp_port,
                          timeout=config.command_timeout, tmp_dir=config.tmp_dir)

    if adapter_class is LpdAdapter:
        return LpdAdapter(config.lpd_host, config.lpd_queues,
                          timeout=config.command_timeout, tmp_dir=config.tmp_dir)

    creds = SmbCredentials(
        host=config.smb_host,
        user=config.smb_user,
        password=config.smb_pass,
        domain=config.smb_domain,
        dialect=config.smb_dialect,
    )
    return adapter_class(creds, timeout=config.command_timeout, tmp_dir=config.tmp_dir)
