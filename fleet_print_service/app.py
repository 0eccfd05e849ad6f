"""
Fleet Print Service - Main Application
======================================

HTTP API over the printer cache, dispatch and management services.

Run: python -m fleet_print_service
"""

import logging
import platform
import socket
import sys
from datetime import datetime
from typing import Optional

from flask import Flask, request, jsonify
from flask_cors import CORS

from . import __version__
from .adapters import BaseAdapter, build_adapter
from .config import ServiceConfig, PORT, HOST, DEBUG, LOG_LEVEL
from .errors import PrintServiceError, ValidationError
from .management import PrintersManagementService
from .service import PrintersService
from .store import CacheStore, build_store

logger = logging.getLogger(__name__)


def create_app(config: Optional[ServiceConfig] = None, adapter: Optional[BaseAdapter] = None,
               store: Optional[CacheStore] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        config: Service settings (defaults to the environment)
        adapter: Printer adapter (defaults to ``config.adapter``)
        store: Cache store (defaults to ``config.cache_backend``)
    """
    config = config or ServiceConfig.from_env()
    adapter = adapter or build_adapter(config)
    store = store or build_store(config)

    printers = PrintersService(adapter, store, config)
    management = PrintersManagementService(printers, adapter)

    app = Flask(__name__)
    CORS(app)
    app.config['SERVICE_CONFIG'] = config
    app.printers = printers
    app.management = management

    def _check_api_key():
        """Validate API key from request."""
        data = request.get_json(silent=True)
        auth_header = request.headers.get('Authorization', '')

        # Check body
        if isinstance(data, dict) and data.get('api_key') == config.api_key:
            return True

        # Check header (Bearer token)
        if auth_header.startswith('Bearer ') and auth_header[7:] == config.api_key:
            return True

        return False

    def _unauthorized():
        return jsonify({'success': False, 'error': 'Invalid API key'}), 401

    @app.errorhandler(PrintServiceError)
    def handle_service_error(e: PrintServiceError):
        if e.http_status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, e)
        return jsonify(e.to_dict()), e.http_status

    # =========================================================================
    # Health & Info Endpoints
    # =========================================================================

    @app.route('/api', methods=['GET'])
    def api_info():
        """API info (JSON)."""
        return jsonify({
            'service': 'Fleet Print Service',
            'version': __version__,
            'status': 'running',
            'endpoints': {
                'health': '/health',
                'printers': '/api/printers',
                'print': '/api/printers/print',
                'capabilities': '/api/capabilities',
                'cache': '/api/cache',
            }
        })

    @app.route('/health', methods=['GET'])
    def health():
        """Health check with cache info."""
        return jsonify({
            'status': 'online',
            'version': __version__,
            'hostname': socket.gethostname(),
            'platform': platform.system(),
            'python': sys.version.split()[0],
            'adapter': adapter.kind,
            'cache': printers.cache_info(),
            'timestamp': datetime.now().isoformat(),
        })

    @app.route('/api/capabilities', methods=['GET'])
    def capabilities():
        return jsonify({'success': True, **adapter.describe()})

    # =========================================================================
    # Printers & Printing
    # =========================================================================

    @app.route('/api/printers', methods=['GET'])
    def list_printers():
        """List printers.

        Query params:
            refresh=true - Fetch from the print server and wait for it
        """
        force_refresh = request.args.get('refresh', 'false').lower() == 'true'
        cached = printers.list(force_refresh=force_refresh)

        return jsonify({
            'success': True,
            'printers': [p.to_dict() for p in cached],
            'count': len(cached),
        })

    @app.route('/api/printers/<printer_id>', methods=['GET'])
    def get_printer(printer_id):
        """Get printer details."""
        printer = printers.require_printer(printer_id)
        return jsonify({
            'success': True,
            'printer': printer.to_dict()
        })

    @app.route('/api/printers/print', methods=['POST'])
    def print_document():
        """Submit print job: {printerId, fileBase64}."""
        if not _check_api_key():
            return _unauthorized()

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')
        result = printers.print(data.get('printerId'), data.get('fileBase64'))

        return jsonify({'success': True, **result.to_dict()})

    @app.route('/api/cache', methods=['DELETE'])
    def clear_cache():
        if not _check_api_key():
            return _unauthorized()

        printers.clear_cache()
        return jsonify({'success': True, 'message': 'Printer cache cleared'})

    # =========================================================================
    # Printer Management
    # =========================================================================

    @app.route('/api/printers/<printer_id>/status', methods=['GET'])
    def printer_status(printer_id):
        """Live printer status (never cached)."""
        status = management.get_printer_status(printer_id)
        return jsonify({'success': True, **status.to_dict()})

    @app.route('/api/printers/<printer_id>/queue', methods=['GET'])
    def printer_queue(printer_id):
        jobs = management.get_queue(printer_id)
        return jsonify({
            'success': True,
            'jobs': [j.to_dict() for j in jobs],
            'count': len(jobs),
        })

    @app.route('/api/printers/<printer_id>/queue', methods=['DELETE'])
    def clear_printer_queue(printer_id):
        if not _check_api_key():
            return _unauthorized()
        return jsonify({'success': True, **management.clear_queue(printer_id)})

    @app.route('/api/printers/<printer_id>/queue/<int:job_id>', methods=['DELETE'])
    def cancel_job(printer_id, job_id):
        if not _check_api_key():
            return _unauthorized()
        return jsonify(management.cancel_job(printer_id, job_id))

    @app.route('/api/printers/<printer_id>/queue/<int:job_id>/pause', methods=['POST'])
    def pause_job(printer_id, job_id):
        if not _check_api_key():
            return _unauthorized()
        return jsonify(management.pause_job(printer_id, job_id))

    @app.route('/api/printers/<printer_id>/queue/<int:job_id>/resume', methods=['POST'])
    def resume_job(printer_id, job_id):
        if not _check_api_key():
            return _unauthorized()
        return jsonify(management.resume_job(printer_id, job_id))

    @app.route('/api/printers/<printer_id>/pause', methods=['POST'])
    def pause_printer(printer_id):
        if not _check_api_key():
            return _unauthorized()
        return jsonify(management.pause_printer(printer_id))

    @app.route('/api/printers/<printer_id>/resume', methods=['POST'])
    def resume_printer(printer_id):
        if not _check_api_key():
            return _unauthorized()
        return jsonify(management.resume_printer(printer_id))

    return app


# =============================================================================
# Main
# =============================================================================

def main():
    """Run the service."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    config = ServiceConfig.from_env()

    print("=" * 60)
    print("  Fleet Print Service")
    print("=" * 60)
    print(f"  Version: {__version__}")
    print(f"  Port: {PORT}")
    print(f"  Adapter: {config.adapter}")
    print(f"  Cache: {config.cache_backend} (stale after {config.stale_seconds:g}s)")
    if config.simulate_print:
        print("  SIMULATION MODE - documents are not sent to printers")
    print("=" * 60)
    print("  API Endpoints:")
    print("    GET  /health                              - Health check")
    print("    GET  /api/printers                        - List printers")
    print("    GET  /api/printers/{id}                   - Get printer")
    print("    POST /api/printers/print                  - Submit print job")
    print("    GET  /api/printers/{id}/status            - Live status")
    print("    GET  /api/printers/{id}/queue             - Job queue")
    print("    DEL  /api/printers/{id}/queue[/{job}]     - Cancel jobs")
    print("    POST /api/printers/{id}/pause|resume      - Printer control")
    print("    POST /api/printers/{id}/queue/{job}/pause - Job control")
    print("    DEL  /api/cache                           - Clear printer cache")
    print("=" * 60)

    app = create_app(config)
    app.run(host=HOST, port=PORT, debug=DEBUG)


if __name__ == '__main__':
    main()
