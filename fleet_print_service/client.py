"""
Fleet Print Service Client
==========================

Python SDK for interacting with Fleet Print Service.

Usage:
    from fleet_print_service.client import PrintClient

    client = PrintClient('http://localhost:5100', api_key='your-key')

    # List printers
    printers = client.list_printers()

    # Print a PDF
    with open('report.pdf', 'rb') as f:
        result = client.print_document(printers[0]['id'], f.read())

    # Queue management
    client.get_queue(printers[0]['id'])
    client.clear_queue(printers[0]['id'])
"""

import base64
import requests
from typing import Dict, Any, Optional, List


class PrintClient:
    """Client for Fleet Print Service."""

    def __init__(self, base_url: str = 'http://localhost:5100', api_key: str = None):
        """
        Initialize client.

        Args:
            base_url: Base URL of the print service
            api_key: API key for authentication
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key

    def _headers(self) -> Dict[str, str]:
        """Get request headers."""
        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f'Bearer {self.api_key}'
        return headers

    def _request(self, method: str, endpoint: str, data: Dict = None) -> Dict[str, Any]:
        """Make API request."""
        url = f'{self.base_url}{endpoint}'

        try:
            if method == 'GET':
                response = requests.get(url, headers=self._headers(), timeout=30)
            elif method == 'POST':
                response = requests.post(url, json=data or {}, headers=self._headers(), timeout=60)
            elif method == 'DELETE':
                response = requests.delete(url, headers=self._headers(), timeout=30)
            else:
                raise ValueError(f'Unknown method: {method}')

            return response.json()

        except requests.exceptions.Timeout:
            return {'success': False, 'error': 'Request timeout'}
        except requests.exceptions.ConnectionError:
            return {'success': False, 'error': f'Cannot connect to {self.base_url}'}
        except ValueError as e:
            return {'success': False, 'error': str(e)}

    # =========================================================================
    # Health
    # =========================================================================

    def health(self) -> Dict[str, Any]:
        """Check service health."""
        return self._request('GET', '/health')

    def is_online(self) -> bool:
        """Check if service is online."""
        result = self.health()
        return result.get('status') == 'online'

    def capabilities(self) -> Dict[str, Any]:
        """Operations supported by the service's adapter."""
        return self._request('GET', '/api/capabilities')

    # =========================================================================
    # Printers
    # =========================================================================

    def list_printers(self, refresh: bool = False) -> List[Dict[str, Any]]:
        """List printers (refresh=True waits for a fresh list)."""
        endpoint = '/api/printers?refresh=true' if refresh else '/api/printers'
        result = self._request('GET', endpoint)
        return result.get('printers', [])

    def get_printer(self, printer_id: str) -> Optional[Dict[str, Any]]:
        """Get printer by ID."""
        result = self._request('GET', f'/api/printers/{printer_id}')
        return result.get('printer') if result.get('success') else None

    def clear_cache(self) -> Dict[str, Any]:
        """Drop the service's printer cache."""
        return self._request('DELETE', '/api/cache')

    # =========================================================================
    # Printing
    # =========================================================================

    def print_document(self, printer_id: str, data: bytes) -> Dict[str, Any]:
        """
        Print a document.

        Args:
            printer_id: Target printer ID
            data: Raw document bytes (PDF)

        Returns:
            Dict with jobId and spoolerJobId on success
        """
        payload = {
            'printerId': printer_id,
            'fileBase64': base64.b64encode(data).decode('utf-8'),
        }
        return self._request('POST', '/api/printers/print', payload)

    def print_file(self, printer_id: str, file_path: str) -> Dict[str, Any]:
        """Print a file from disk."""
        with open(file_path, 'rb') as f:
            return self.print_document(printer_id, f.read())

    # =========================================================================
    # Status & Queue
    # =========================================================================

    def get_status(self, printer_id: str) -> Dict[str, Any]:
        """Get live printer status."""
        return self._request('GET', f'/api/printers/{printer_id}/status')

    def get_queue(self, printer_id: str) -> List[Dict[str, Any]]:
        """List jobs waiting on a printer."""
        result = self._request('GET', f'/api/printers/{printer_id}/queue')
        return result.get('jobs', [])

    def cancel_job(self, printer_id: str, job_id: int) -> Dict[str, Any]:
        return self._request('DELETE', f'/api/printers/{printer_id}/queue/{job_id}')

    def clear_queue(self, printer_id: str) -> Dict[str, Any]:
        """Cancel every job on a printer."""
        return self._request('DELETE', f'/api/printers/{printer_id}/queue')

    def pause_job(self, printer_id: str, job_id: int) -> Dict[str, Any]:
        return self._request('POST', f'/api/printers/{printer_id}/queue/{job_id}/pause')

    def resume_job(self, printer_id: str, job_id: int) -> Dict[str, Any]:
        return self._request('POST', f'/api/printers/{printer_id}/queue/{job_id}/resume')

    # =========================================================================
    # Printer Control
    # =========================================================================

    def pause_printer(self, printer_id: str) -> Dict[str, Any]:
        return self._request('POST', f'/api/printers/{printer_id}/pause')

    def resume_printer(self, printer_id: str) -> Dict[str, Any]:
        return self._request('POST', f'/api/printers/{printer_id}/resume')
