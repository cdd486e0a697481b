# ==============================================================================
# APLICACIÓN FLASK - API JSON sobre el núcleo
# ==============================================================================
# Las rutas solo reciben el request, llaman a repositorios/servicios y
# devuelven JSON. La lógica de negocio vive en repositories/ y services/.
#
# Formato de respuesta:
#   éxito  → {"success": true, ...}
#   error  → {"success": false, "error": "mensaje"}, código HTTP
# ==============================================================================

import logging
import time
from typing import Any, Dict, Mapping

from flask import Flask, current_app, g, request
from werkzeug.exceptions import BadRequest, HTTPException

from vyapar_app import config
from vyapar_app.app_container import AppContainer
from vyapar_app.errors import StorageError, ValidationError
from vyapar_app.repositories import newest_first

logger = logging.getLogger(__name__)

# Umbrales de tiempo por request (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700


def get_container() -> AppContainer:
    """Contenedor de la aplicación actual."""
    return current_app.extensions['vyapar']


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest('Expected a JSON object')
    return data


def create_app(overrides: Mapping[str, Any] = None) -> Flask:
    """
    Crea la aplicación.

    Args:
        overrides: Valores para app.config (DATA_DIR, STORE, CLOCK, TESTING...)

    Returns:
        Aplicación Flask configurada
    """
    config.configure_logging()

    app = Flask(__name__)
    app.config.update(config.flask_defaults())
    if overrides:
        app.config.update(overrides)

    app.extensions['vyapar'] = AppContainer(
        data_dir=app.config['DATA_DIR'],
        store=app.config.get('STORE'),
        clock=app.config.get('CLOCK'),
    )

    _register_timing(app)
    _register_error_handlers(app)
    _register_routes(app)
    return app


# ═══════════════════════════════════════════════════════════════════════════
# TIEMPOS DE RESPUESTA
# ═══════════════════════════════════════════════════════════════════════════

def _register_timing(app: Flask) -> None:

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        start = g.pop('start_time', None)
        if start is None:
            return response
        elapsed = (time.perf_counter() - start) * 1000  # ms
        if elapsed >= THRESHOLD_CRITICAL:
            logger.warning("[CRÍTICO] %s %s %.0f ms", request.method, request.path, elapsed)
        elif elapsed >= THRESHOLD_WARNING:
            logger.warning("[LENTO] %s %s %.0f ms", request.method, request.path, elapsed)
        else:
            logger.debug("%s %s %s %.0f ms", request.method, request.path, response.status_code, elapsed)
        return response


# ═══════════════════════════════════════════════════════════════════════════
# MANEJO DE ERRORES
# ═══════════════════════════════════════════════════════════════════════════

def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return {"success": False, "error": str(e)}, 400

    @app.errorhandler(StorageError)
    def _storage_error(e):
        logger.error("[STORAGE] %s", e)
        return {"success": False, "error": str(e)}, 503

    @app.errorhandler(HTTPException)
    def _http_error(e):
        return {"success": False, "error": e.description}, e.code


# ═══════════════════════════════════════════════════════════════════════════
# RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def _register_routes(app: Flask) -> None:

    @app.route('/health')
    def health():
        return {"success": True, "status": "ok"}

    # ---- Inventario ----

    @app.route('/api/inventory', methods=['GET'])
    def list_inventory():
        items = newest_first(get_container().inventory_repo.list())
        return {"success": True, "items": [item.to_dict() for item in items]}

    @app.route('/api/inventory', methods=['POST'])
    def add_inventory_item():
        data = _json_body()
        item = get_container().inventory_repo.add(
            data.get('name'), data.get('quantity'), data.get('price')
        )
        return {"success": True, "item": item.to_dict()}, 201

    @app.route('/api/inventory/<item_id>', methods=['PATCH'])
    def update_inventory_item(item_id):
        repo = get_container().inventory_repo
        repo.update(item_id, _json_body())
        item = repo.get(item_id)
        return {"success": True, "item": item.to_dict() if item else None}

    @app.route('/api/inventory/<item_id>', methods=['DELETE'])
    def delete_inventory_item(item_id):
        get_container().inventory_repo.delete(item_id)
        return {"success": True}

    @app.route('/api/inventory/<item_id>/reduce', methods=['POST'])
    def reduce_inventory_item(item_id):
        data = _json_body()
        amount = data.get('amount')
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValidationError("Amount must be a whole number")
        repo = get_container().inventory_repo
        repo.reduce_quantity(item_id, amount)
        item = repo.get(item_id)
        return {"success": True, "item": item.to_dict() if item else None}

    # ---- Facturas ----

    @app.route('/api/invoices', methods=['GET'])
    def list_invoices():
        invoices = newest_first(get_container().invoice_repo.list())
        return {"success": True, "invoices": [inv.to_dict() for inv in invoices]}

    @app.route('/api/invoices', methods=['POST'])
    def create_invoice():
        data = _json_body()
        invoice = get_container().invoice_service.create_invoice(
            data.get('customerName'), data.get('items')
        )
        return {"success": True, "invoice": invoice.to_dict()}, 201

    @app.route('/api/invoices/preview', methods=['POST'])
    def preview_invoice():
        data = _json_body()
        total = get_container().invoice_service.preview_total(data.get('items'))
        return {"success": True, "total": total}

    @app.route('/api/invoices/<invoice_id>', methods=['DELETE'])
    def delete_invoice(invoice_id):
        get_container().invoice_repo.delete(invoice_id)
        return {"success": True}

    # ---- Analítica ----

    @app.route('/api/analytics', methods=['GET'])
    def analytics_summary():
        return {"success": True, "summary": get_container().analytics_service.summary()}

    @app.route('/api/analytics/insights', methods=['GET'])
    def analytics_insights():
        return {"success": True, "insights": get_container().analytics_service.generate_insights()}

    @app.route('/api/analytics/low-stock', methods=['GET'])
    def analytics_low_stock():
        items = get_container().analytics_service.low_stock_items()
        return {"success": True, "items": [item.to_dict() for item in items]}
