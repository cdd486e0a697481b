# ==============================================================================
# REPOSITORIO DE FACTURAS
# ==============================================================================
# Encapsula todo el acceso a la colección de facturas.
# Las facturas se almacenan como lista: [{factura1}, {factura2}, ...]
#
# CREACIÓN EN DOS FASES (no atómica):
#   build()          -> arma la factura con snapshots del inventario
#   record()         -> FASE 1: guarda la factura
#   consume_stock()  -> FASE 2: descuenta el inventario
# Si el proceso se interrumpe entre FASE 1 y FASE 2 queda una factura
# registrada con el inventario sin descontar. El núcleo no lo repara.
# ==============================================================================

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from vyapar_app.config import INVOICES_KEY
from vyapar_app.errors import ValidationError
from vyapar_app.models import Invoice, InvoiceLine, InvoiceLineRequest
from vyapar_app.models.entities import validate_name
from vyapar_app.repositories.base import CollectionRepository
from vyapar_app.repositories.inventory_repository import InventoryRepository

logger = logging.getLogger(__name__)

LineInput = Union[InvoiceLineRequest, Mapping[str, Any]]


class InvoiceRepository(CollectionRepository):
    """
    Repositorio para gestión de facturas.

    Formato de datos:
    [
        {
            "id": "9b1d...",
            "customerName": "Acme",
            "items": [
                {"itemId": "3f0c...", "itemName": "Widget",
                 "quantity": 3, "price": 50, "total": 150}
            ],
            "total": 150,
            "createdAt": "2024-01-01T10:00:00+00:00"
        }
    ]

    NO valida stock suficiente: esa verificación la hace el llamador con una
    lectura fresca del inventario (ver InvoiceService.check_stock).
    """

    def __init__(self, store, inventory_repo: InventoryRepository, key: str = INVOICES_KEY):
        """
        Args:
            store: Adaptador de persistencia
            inventory_repo: Repositorio de inventario (snapshots y descuento)
            key: Clave de la colección
        """
        super().__init__(store, key)
        self.inventory_repo = inventory_repo

    def list(self) -> List[Invoice]:
        """Todas las facturas en el orden guardado."""
        return [self._decode(record, Invoice.from_dict) for record in self.get_all()]

    def get(self, invoice_id: str) -> Optional[Invoice]:
        record = self.find_by('id', invoice_id)
        return self._decode(record, Invoice.from_dict) if record is not None else None

    # =========================================================================
    # CREACIÓN DE FACTURAS
    # =========================================================================

    def build(self, customer_name: Any, line_items: Sequence[LineInput]) -> Invoice:
        """
        Arma una factura sin persistir nada.
        Toma nombre y precio actuales de cada producto (snapshot).

        Args:
            customer_name: Nombre del cliente
            line_items: Pares {itemId, quantity}

        Returns:
            Factura con id, createdAt y totales calculados

        Raises:
            ValidationError: Cliente vacío, sin líneas, cantidad <= 0 o
                             producto inexistente
        """
        customer = validate_name(customer_name, 'customer name')
        if not line_items:
            raise ValidationError("Please add at least one item")

        lines = []
        for raw in line_items:
            request = raw if isinstance(raw, InvoiceLineRequest) else InvoiceLineRequest.from_dict(raw)
            quantity = request.quantity
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise ValidationError("Quantity must be a whole number greater than 0")
            item = self.inventory_repo.get(request.item_id)
            if item is None:
                raise ValidationError(f"Item {request.item_id} not found")
            lines.append(InvoiceLine.snapshot(item, quantity))

        return Invoice.create(customer, lines)

    def record(self, invoice: Invoice) -> Invoice:
        """FASE 1: agrega la factura a la colección y persiste."""
        self.append(invoice.to_dict())
        logger.info(
            "[FACTURA] Registrada %s para '%s' total=%s",
            invoice.id, invoice.customer_name, invoice.total
        )
        return invoice

    def consume_stock(self, invoice: Invoice) -> None:
        """FASE 2: descuenta el inventario de cada línea (piso en 0)."""
        for line in invoice.items:
            self.inventory_repo.reduce_quantity(line.item_id, line.quantity)
        logger.debug("[FACTURA] Stock descontado para %s", invoice.id)

    def create(self, customer_name: Any, line_items: Sequence[LineInput]) -> Invoice:
        """
        Crea una factura: build -> record (FASE 1) -> consume_stock (FASE 2).

        Returns:
            Factura creada
        """
        invoice = self.build(customer_name, line_items)
        self.record(invoice)
        self.consume_stock(invoice)
        return invoice

    def delete(self, invoice_id: str) -> None:
        """
        Elimina la factura; no-op si no existe.
        NO restaura el inventario que la factura consumió.
        """
        if self.remove_where('id', invoice_id):
            logger.info("[FACTURA] Eliminada %s", invoice_id)
