# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que deben cumplir el store y los repositorios. Los servicios
# dependen de estos protocolos, NO de las implementaciones concretas:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - JSONFileStore en disco, MemoryStore en tests
#
# 2. TESTING
#    - Fácil sustituir el store por uno en memoria o uno que falle
#
# ==============================================================================

from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

from vyapar_app.models import InventoryItem, Invoice, InvoiceLineRequest, ItemPatch


@runtime_checkable
class IStore(Protocol):
    """
    Adaptador de persistencia clave/valor.
    Una clave ausente se representa con None.
    """

    def load(self, key: str) -> Optional[bytes]:
        """Lee el blob de una clave."""
        ...

    def store(self, key: str, data: bytes) -> None:
        """Escribe el blob de una clave."""
        ...


@runtime_checkable
class IInventoryRepository(Protocol):
    """
    Interfaz para el repositorio de inventario.
    """

    def list(self) -> List[InventoryItem]:
        """Todos los ítems en el orden guardado."""
        ...

    def get(self, item_id: str) -> Optional[InventoryItem]:
        """Obtiene un ítem por id."""
        ...

    def add(self, name: str, quantity: int, price: float) -> InventoryItem:
        """Crea un ítem validado."""
        ...

    def update(self, item_id: str, patch: Union[ItemPatch, Mapping[str, Any]]) -> None:
        """Actualización parcial; no-op si no existe."""
        ...

    def delete(self, item_id: str) -> None:
        """Elimina un ítem; no-op si no existe."""
        ...

    def reduce_quantity(self, item_id: str, amount: int) -> None:
        """Descuenta stock con piso en 0."""
        ...


@runtime_checkable
class IInvoiceRepository(Protocol):
    """
    Interfaz para el repositorio de facturas.
    """

    def list(self) -> List[Invoice]:
        """Todas las facturas en el orden guardado."""
        ...

    def get(self, invoice_id: str) -> Optional[Invoice]:
        """Obtiene una factura por id."""
        ...

    def create(self, customer_name: str, line_items: Sequence[InvoiceLineRequest]) -> Invoice:
        """Crea la factura y descuenta el inventario."""
        ...

    def delete(self, invoice_id: str) -> None:
        """Elimina una factura sin restaurar inventario."""
        ...
