# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (store clave/valor).
#
# ESTRUCTURA:
# ├── interfaces.py            → Protocolos (contratos de store y repositorios)
# ├── base.py                  → JSONFileStore, MemoryStore, CollectionRepository
# ├── inventory_repository.py  → Colección vyapar_inventory
# └── invoice_repository.py    → Colección vyapar_invoices
# ==============================================================================

# Interfaces
from .interfaces import (
    IStore,
    IInventoryRepository,
    IInvoiceRepository,
)

# Implementaciones concretas
from .base import CollectionRepository, JSONFileStore, MemoryStore
from .inventory_repository import InventoryRepository, newest_first
from .invoice_repository import InvoiceRepository

__all__ = [
    # Interfaces
    'IStore',
    'IInventoryRepository',
    'IInvoiceRepository',

    # Store y clase base
    'CollectionRepository',
    'JSONFileStore',
    'MemoryStore',

    # Repositorios
    'InventoryRepository',
    'InvoiceRepository',
    'newest_first',
]
