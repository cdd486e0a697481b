# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Los nombres de atributo persistidos usan camelCase (formato de la colección
# guardada); en Python se usan nombres snake_case.
# ==============================================================================

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from vyapar_app.errors import ValidationError


def new_id() -> str:
    """Genera un identificador opaco único."""
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Timestamp actual en ISO-8601 con offset UTC."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parsea un timestamp ISO-8601.
    Acepta el sufijo 'Z'. Los valores sin zona se asumen UTC.
    Retorna None si no puede parsear.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (ValueError, TypeError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ==============================================================================
# LECTURA DE REGISTROS GUARDADOS
# ==============================================================================
# Los from_dict no rellenan campos faltantes: un registro incompleto lanza
# KeyError/TypeError/ValueError y el repositorio lo reporta como CorruptData.

def _text(data: Mapping[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string")
    return value


def _whole(data: Mapping[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{key}' must be an integer")
    return value


def _lines(data: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    lines = data['items']
    if not isinstance(lines, list) or not all(isinstance(line, dict) for line in lines):
        raise TypeError("'items' must be a list of objects")
    return lines


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"'{key}' must be a number")
    return value


# ==============================================================================
# VALIDACIONES
# ==============================================================================

def validate_name(name: Any, label: str = 'item name') -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Please enter {label}")
    return name.strip()


def validate_quantity(quantity: Any) -> int:
    """Cantidad entera >= 0."""
    if isinstance(quantity, int) and not isinstance(quantity, bool):
        value = quantity
    elif isinstance(quantity, float) and quantity.is_integer():
        value = int(quantity)
    elif isinstance(quantity, str):
        try:
            value = int(quantity.strip())
        except ValueError:
            raise ValidationError("Please enter valid quantity")
    else:
        # 2.5 unidades no es una cantidad válida
        raise ValidationError("Please enter valid quantity")
    if value < 0:
        raise ValidationError("Please enter valid quantity")
    return value


def validate_price(price: Any) -> float:
    """Precio numérico > 0."""
    if isinstance(price, bool):
        raise ValidationError("Please enter valid price")
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise ValidationError("Please enter valid price")
    if not value > 0 or value == float('inf'):
        raise ValidationError("Please enter valid price")
    return value


# ==============================================================================
# ENTIDADES DE INVENTARIO
# ==============================================================================

@dataclass
class InventoryItem:
    """
    Producto en inventario.

    Attributes:
        id: Identificador opaco, asignado al crear, inmutable
        name: Nombre visible (no vacío)
        quantity: Unidades en stock (nunca negativo)
        price: Precio unitario de venta (> 0)
        created_at: Timestamp ISO-8601 de creación, inmutable
    """
    id: str
    name: str
    quantity: int
    price: float
    created_at: str

    @classmethod
    def create(cls, name: Any, quantity: Any, price: Any) -> 'InventoryItem':
        """Valida los campos y crea un ítem nuevo con id y timestamp."""
        return cls(
            id=new_id(),
            name=validate_name(name),
            quantity=validate_quantity(quantity),
            price=validate_price(price),
            created_at=utc_now_iso(),
        )

    @property
    def stock_value(self) -> float:
        """Valor del stock actual (quantity * price)."""
        return self.quantity * self.price

    def is_low_stock(self, threshold: int) -> bool:
        return self.quantity < threshold

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'name': self.name,
            'quantity': self.quantity,
            'price': self.price,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InventoryItem':
        """Crea instancia desde diccionario."""
        return cls(
            id=_text(data, 'id'),
            name=_text(data, 'name'),
            quantity=_whole(data, 'quantity'),
            price=_number(data, 'price'),
            created_at=_text(data, 'createdAt'),
        )


@dataclass
class ItemPatch:
    """
    Actualización parcial de un InventoryItem.
    Solo se aplican los campos distintos de None; id y createdAt no se
    pueden modificar.
    """
    name: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[float] = None

    # Campos permitidos para actualización
    ALLOWED_FIELDS = ('name', 'quantity', 'price')

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ItemPatch':
        """Ignora claves desconocidas o inmutables (id, createdAt)."""
        return cls(**{k: data[k] for k in cls.ALLOWED_FIELDS if data.get(k) is not None})

    def validated(self) -> 'ItemPatch':
        """Retorna una copia con los valores normalizados."""
        return ItemPatch(
            name=validate_name(self.name) if self.name is not None else None,
            quantity=validate_quantity(self.quantity) if self.quantity is not None else None,
            price=validate_price(self.price) if self.price is not None else None,
        )

    def apply_to(self, item: InventoryItem) -> InventoryItem:
        changes = {k: getattr(self, k) for k in self.ALLOWED_FIELDS if getattr(self, k) is not None}
        return replace(item, **changes)


# ==============================================================================
# ENTIDADES DE FACTURACIÓN
# ==============================================================================

@dataclass
class InvoiceLineRequest:
    """Línea solicitada al crear una factura: {itemId, quantity}."""
    item_id: str
    quantity: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'InvoiceLineRequest':
        return cls(
            item_id=data.get('itemId') or '',
            quantity=data.get('quantity', 0),
        )


@dataclass
class InvoiceLine:
    """
    Línea de factura.
    item_name y price son copias (snapshot) del inventario al momento de la
    venta: editar o borrar el producto después no cambia la factura.

    Attributes:
        item_id: Referencia al InventoryItem (no se revalida)
        item_name: Nombre del producto al vender
        quantity: Cantidad vendida
        price: Precio unitario al vender
        total: quantity * price
    """
    item_id: str
    item_name: str
    quantity: int
    price: float
    total: float = 0.0

    @classmethod
    def snapshot(cls, item: InventoryItem, quantity: int) -> 'InvoiceLine':
        return cls(
            item_id=item.id,
            item_name=item.name,
            quantity=quantity,
            price=item.price,
            total=item.price * quantity,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'itemId': self.item_id,
            'itemName': self.item_name,
            'quantity': self.quantity,
            'price': self.price,
            'total': self.total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InvoiceLine':
        """Crea instancia desde diccionario."""
        return cls(
            item_id=_text(data, 'itemId'),
            item_name=_text(data, 'itemName'),
            quantity=_whole(data, 'quantity'),
            price=_number(data, 'price'),
            total=_number(data, 'total'),
        )


@dataclass
class Invoice:
    """
    Factura de un cliente. Inmutable después de crearse.

    Attributes:
        id: Identificador opaco
        customer_name: Nombre del cliente (no vacío)
        items: Líneas en orden
        total: Suma de los totales de línea, calculada una sola vez al crear
        created_at: Timestamp ISO-8601 de creación
    """
    id: str
    customer_name: str
    items: List[InvoiceLine] = field(default_factory=list)
    total: float = 0.0
    created_at: str = ''

    @classmethod
    def create(cls, customer_name: str, lines: List[InvoiceLine]) -> 'Invoice':
        return cls(
            id=new_id(),
            customer_name=customer_name,
            items=list(lines),
            total=sum(line.total for line in lines),
            created_at=utc_now_iso(),
        )

    @property
    def created(self) -> Optional[datetime]:
        return parse_timestamp(self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'customerName': self.customer_name,
            'items': [line.to_dict() for line in self.items],
            'total': self.total,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Invoice':
        """Crea instancia desde diccionario."""
        return cls(
            id=_text(data, 'id'),
            customer_name=_text(data, 'customerName'),
            items=[InvoiceLine.from_dict(line) for line in _lines(data)],
            total=_number(data, 'total'),
            created_at=_text(data, 'createdAt'),
        )


# ==============================================================================
# RESULTADOS DE ANALÍTICA
# ==============================================================================

@dataclass
class ProductSales:
    """Cantidad vendida acumulada de un producto (ranking de más vendidos)."""
    item_id: str
    name: str
    quantity: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'itemId': self.item_id, 'name': self.name, 'quantity': self.quantity}
