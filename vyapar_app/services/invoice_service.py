# ==============================================================================
# SERVICIO DE FACTURACIÓN
# ==============================================================================
# Validaciones del lado del llamador antes de crear una factura:
#   - descarta filas incompletas del formulario
#   - verifica stock suficiente con una lectura FRESCA del inventario
# El repositorio de facturas no revalida stock; por eso esta verificación
# vive aquí y debe ejecutarse justo antes de create().
# ==============================================================================

import logging
from typing import Any, Dict, List, Mapping, Sequence

from vyapar_app.errors import ValidationError
from vyapar_app.models import Invoice, InvoiceLineRequest
from vyapar_app.models.entities import validate_name
from vyapar_app.repositories.inventory_repository import InventoryRepository
from vyapar_app.repositories.invoice_repository import InvoiceRepository

logger = logging.getLogger(__name__)


def to_int(value: Any):
    """Convierte a int o retorna None."""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def as_rows(raw_lines: Any) -> Sequence[Any]:
    """Filas del formulario; None equivale a ninguna fila."""
    if raw_lines is None:
        return []
    if not isinstance(raw_lines, (list, tuple)):
        raise ValidationError("Items must be a list")
    return raw_lines


class InvoiceService:
    """
    Servicio para creación de facturas.

    Responsabilidades:
    - Normalizar las líneas que llegan del formulario
    - Verificar stock disponible
    - Calcular el total previo (vista previa)
    - Delegar la creación al repositorio
    """

    def __init__(self, invoice_repo: InvoiceRepository, inventory_repo: InventoryRepository):
        """
        Args:
            invoice_repo: Repositorio de facturas
            inventory_repo: Repositorio de inventario (lecturas frescas)
        """
        self.invoice_repo = invoice_repo
        self.inventory_repo = inventory_repo

    def normalize_lines(self, raw_lines: Sequence[Mapping[str, Any]]) -> List[InvoiceLineRequest]:
        """
        Filtra filas sin producto o con cantidad <= 0.

        Raises:
            ValidationError: Si raw_lines no es una lista o no queda
                             ninguna línea válida
        """
        lines = []
        for raw in as_rows(raw_lines):
            if isinstance(raw, InvoiceLineRequest):
                item_id, quantity = raw.item_id, to_int(raw.quantity)
            elif not isinstance(raw, Mapping):
                continue
            else:
                item_id, quantity = raw.get('itemId'), to_int(raw.get('quantity'))
            if not item_id or quantity is None or quantity <= 0:
                continue
            lines.append(InvoiceLineRequest(item_id=item_id, quantity=quantity))
        if not lines:
            raise ValidationError("Please add at least one item")
        return lines

    def check_stock(self, lines: Sequence[InvoiceLineRequest]) -> None:
        """
        Verifica que cada producto exista y tenga stock suficiente.
        Las cantidades del mismo producto en varias filas se suman.

        Raises:
            ValidationError: Con todos los problemas unidos por '; '
        """
        inventory = {item.id: item for item in self.inventory_repo.list()}

        requested: Dict[str, int] = {}
        for line in lines:
            requested[line.item_id] = requested.get(line.item_id, 0) + line.quantity

        errors = []
        for item_id, quantity in requested.items():
            item = inventory.get(item_id)
            if item is None:
                errors.append(f"Item {item_id} not found")
                continue
            if quantity > item.quantity:
                errors.append(f'Only {item.quantity} units of "{item.name}" available')

        if errors:
            logger.info("[FACTURA] Rechazada: %s", '; '.join(errors))
            raise ValidationError('; '.join(errors))

    def preview_total(self, raw_lines: Sequence[Mapping[str, Any]]) -> float:
        """
        Total que tendría la factura con los precios actuales.
        Filas incompletas o de productos inexistentes suman 0.
        """
        prices = {item.id: item.price for item in self.inventory_repo.list()}
        total = 0
        for raw in as_rows(raw_lines):
            if not isinstance(raw, Mapping):
                continue
            quantity = to_int(raw.get('quantity'))
            price = prices.get(raw.get('itemId'))
            if price is None or quantity is None or quantity <= 0:
                continue
            total += price * quantity
        return total

    def create_invoice(self, customer_name: Any, raw_lines: Sequence[Mapping[str, Any]]) -> Invoice:
        """
        Crea una factura validando primero del lado del llamador.

        Args:
            customer_name: Nombre del cliente
            raw_lines: Filas {itemId, quantity} del formulario

        Returns:
            Factura creada

        Raises:
            ValidationError: Cliente vacío, sin líneas o stock insuficiente
        """
        validate_name(customer_name, 'customer name')
        lines = self.normalize_lines(raw_lines)
        self.check_stock(lines)
        return self.invoice_repo.create(customer_name, lines)
