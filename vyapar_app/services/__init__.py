# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones del llamador
# 3. Las rutas (controllers) solo llaman a repositorios y servicios
# 4. Los servicios NO conocen el tipo de almacenamiento
#
# ESTRUCTURA:
# ├── invoice_service.py   → Validación de stock y creación de facturas
# └── analytics_service.py → Totales, más vendido, stock bajo, insights
# ==============================================================================

from vyapar_app.services.analytics_service import AnalyticsService, format_amount
from vyapar_app.services.invoice_service import InvoiceService

__all__ = [
    'AnalyticsService',
    'InvoiceService',
    'format_amount',
]
