"""
Fleet Print Service
===================

Uniform management API and resilient printer cache for a fleet of network
print queues.

Supports:
- SMB print servers with full queue management (via rpcclient)
- SMB print shares, transfer only (via smbclient)
- IPP/CUPS queues, transfer only (via lp/lpstat)
- LPD queues, transfer only (via lpr)

Usage:
    python -m fleet_print_service

API Endpoints:
    GET    /api/printers                  - List printers (cached)
    GET    /api/printers/{id}             - Get printer
    POST   /api/printers/print            - Submit print job
    GET    /api/printers/{id}/status      - Live status
    GET    /api/printers/{id}/queue       - Job queue
    DELETE /api/printers/{id}/queue       - Clear queue
"""

__version__ = '1.0.0'
