# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio definidas con dataclasses, independientes del
# mecanismo de persistencia (JSON en disco o en memoria).
# ==============================================================================

from .entities import (
    # Inventario
    InventoryItem,
    ItemPatch,

    # Facturas
    Invoice,
    InvoiceLine,
    InvoiceLineRequest,

    # Analítica
    ProductSales,

    # Utilidades
    new_id,
    parse_timestamp,
    utc_now_iso,
)

__all__ = [
    'InventoryItem',
    'ItemPatch',
    'Invoice',
    'InvoiceLine',
    'InvoiceLineRequest',
    'ProductSales',
    'new_id',
    'parse_timestamp',
    'utc_now_iso',
]
