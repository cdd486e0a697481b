# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================
# Constantes fijas del dominio + valores sobreescribibles por variables de
# entorno. Comando de ejemplo:
#   export VYAPAR_DATA_DIR=/var/lib/vyapar
#   export VYAPAR_LOG_LEVEL=DEBUG
# ==============================================================================

import logging
import os
from typing import Any, Dict

BASE = os.path.dirname(os.path.abspath(__file__))

# ═══════════════════════════════════════════════════════════════════════════════
# CLAVES DE ALMACENAMIENTO (fijas)
# ═══════════════════════════════════════════════════════════════════════════════
INVENTORY_KEY = 'vyapar_inventory'
INVOICES_KEY = 'vyapar_invoices'

# Umbral de stock bajo: quantity < 5 unidades
LOW_STOCK_THRESHOLD = 5

# ═══════════════════════════════════════════════════════════════════════════════
# VALORES POR ENTORNO
# ═══════════════════════════════════════════════════════════════════════════════
DATA_DIR = os.environ.get('VYAPAR_DATA_DIR', os.path.join(BASE, 'data'))
LOG_LEVEL = os.environ.get('VYAPAR_LOG_LEVEL', 'INFO').upper()

_DEFAULT_SECRET = 'vyapar_dev_secret_key_change_in_production'
SECRET_KEY = os.environ.get('VYAPAR_SECRET_KEY') or _DEFAULT_SECRET

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def flask_defaults() -> Dict[str, Any]:
    """Configuración base para app.config."""
    return {
        'SECRET_KEY': SECRET_KEY,
        'DATA_DIR': DATA_DIR,
        'STORE': None,          # Store inyectado (tests); None = JSON en DATA_DIR
        'MAX_CONTENT_LENGTH': 1 * 1024 * 1024,  # 1 MB
    }


_logging_configured = False


def configure_logging(level: str = None) -> None:
    """
    Configura el logging raíz una sola vez.
    Los módulos usan logging.getLogger(__name__).
    """
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format=LOG_FORMAT,
    )
    _logging_configured = True
