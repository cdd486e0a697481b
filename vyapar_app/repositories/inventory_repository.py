# ==============================================================================
# REPOSITORIO DE INVENTARIO
# ==============================================================================
# Encapsula todo el acceso a la colección de inventario.
# El inventario se almacena como lista: [{id, name, quantity, price, createdAt}]
# ==============================================================================

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from vyapar_app.config import INVENTORY_KEY
from vyapar_app.models import InventoryItem, ItemPatch
from vyapar_app.repositories.base import CollectionRepository

logger = logging.getLogger(__name__)


def newest_first(records: Iterable[Any]) -> List[Any]:
    """Orden por defecto de visualización: createdAt descendente."""
    return sorted(records, key=lambda record: record.created_at, reverse=True)


class InventoryRepository(CollectionRepository):
    """
    Repositorio para gestión del inventario de productos.

    Formato de datos:
    [
        {
            "id": "3f0c...",
            "name": "Widget",
            "quantity": 10,
            "price": 50,
            "createdAt": "2024-01-01T10:00:00+00:00"
        }
    ]
    """

    def __init__(self, store, key: str = INVENTORY_KEY):
        """
        Args:
            store: Adaptador de persistencia
            key: Clave de la colección
        """
        super().__init__(store, key)

    def _load_items(self) -> List[InventoryItem]:
        return [self._decode(record, InventoryItem.from_dict) for record in self.get_all()]

    def _save_items(self, items: List[InventoryItem]) -> None:
        self.save_all([item.to_dict() for item in items])

    def list(self) -> List[InventoryItem]:
        """
        Obtiene todos los ítems.

        Returns:
            Ítems en el orden guardado (el llamador ordena)
        """
        return self._load_items()

    def get(self, item_id: str) -> Optional[InventoryItem]:
        """
        Obtiene un ítem por su ID.

        Returns:
            InventoryItem o None si no existe
        """
        record = self.find_by('id', item_id)
        return self._decode(record, InventoryItem.from_dict) if record is not None else None

    def add(self, name: Any, quantity: Any, price: Any) -> InventoryItem:
        """
        Crea un nuevo ítem.

        Args:
            name: Nombre (no vacío)
            quantity: Unidades iniciales (>= 0)
            price: Precio unitario (> 0)

        Returns:
            Ítem creado con id y createdAt asignados

        Raises:
            ValidationError: Si algún campo es inválido
        """
        item = InventoryItem.create(name, quantity, price)
        self.append(item.to_dict())
        logger.info("[INVENTARIO] Ítem creado %s (%s)", item.id, item.name)
        return item

    def update(self, item_id: str, patch: Union[ItemPatch, Mapping[str, Any]]) -> None:
        """
        Mezcla los campos del patch en el ítem existente.
        No-op si el id no existe (el patch no se valida en ese caso).

        Raises:
            ValidationError: Si algún valor del patch es inválido
        """
        items = self._load_items()
        index = next((i for i, item in enumerate(items) if item.id == item_id), None)
        if index is None:
            logger.debug("[INVENTARIO] update ignorado, %s no existe", item_id)
            return

        if not isinstance(patch, ItemPatch):
            patch = ItemPatch.from_dict(patch)
        items[index] = patch.validated().apply_to(items[index])
        self._save_items(items)
        logger.info("[INVENTARIO] Ítem actualizado %s", item_id)

    def delete(self, item_id: str) -> None:
        """Elimina el ítem si existe; no-op si no."""
        if self.remove_where('id', item_id):
            logger.info("[INVENTARIO] Ítem eliminado %s", item_id)

    def reduce_quantity(self, item_id: str, amount: int) -> None:
        """
        Descuenta stock: quantity = max(0, quantity - amount).
        Nunca lanza error por pedir más de lo disponible. No-op si no existe.
        """
        items = self._load_items()
        for item in items:
            if item.id == item_id:
                before = item.quantity
                item.quantity = max(0, item.quantity - amount)
                self._save_items(items)
                logger.debug(
                    "[INVENTARIO] Stock %s: %s -> %s", item_id, before, item.quantity
                )
                return

    def low_stock(self, threshold: int) -> List[InventoryItem]:
        """Ítems con quantity estrictamente menor al umbral."""
        return [item for item in self._load_items() if item.is_low_stock(threshold)]
