# ==============================================================================
# SERVICIO DE ANALÍTICA DE VENTAS
# ==============================================================================
# Calcula totales de ventas por ventana de tiempo, el producto más vendido,
# el stock bajo y los "insights" (frases fijas elegidas por reglas).
#
# REGLA PRINCIPAL: solo lectura. Nunca modifica inventario ni facturas; cada
# llamada vuelve a recorrer las colecciones.
#
# VENTANAS (hora local):
# - hoy          → misma fecha calendario
# - este mes     → mismo mes y año calendario
# - esta semana  → [ahora - 7d, ahora)      (ventana móvil, no semana calendario)
# - semana ant.  → [ahora - 14d, ahora - 7d)
# ==============================================================================

import math
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from vyapar_app.config import LOW_STOCK_THRESHOLD
from vyapar_app.models import InventoryItem, Invoice, ProductSales


def local_now() -> datetime:
    """
    Hora actual con la zona horaria local.
    El tzinfo es un offset fijo (el vigente ahora), no la zona con sus
    reglas de horario de verano.
    """
    return datetime.now().astimezone()


def format_amount(value: float) -> str:
    """
    Formatea un monto para mostrar: separador de miles y hasta 2 decimales,
    sin ceros sobrantes (1234.5 -> '1,234.5', 150.0 -> '150').
    """
    text = f"{value:,.2f}"
    return text.rstrip('0').rstrip('.') if '.' in text else text


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class AnalyticsService:
    """
    Servicio de analítica derivada.

    Responsabilidades:
    - Totales de ventas por ventana (hoy, mes, semana, semana anterior)
    - Ranking del producto más vendido
    - Detección de stock bajo
    - Generación de insights por reglas
    """

    # Mensajes de insights (plantillas fijas)
    MSG_SALES_UP = "📈 Sales are up {percent}% compared to last week. Great momentum!"
    MSG_SALES_DOWN = "📉 Sales have decreased compared to last week. Consider running a promotion."
    MSG_STEADY = "📊 Your business is generating steady sales. Keep it up!"
    MSG_LOW_STOCK = "⚠️ Low stock alert: {names}{more} may run out soon."
    MSG_BEST_SELLER = "🏆 \"{name}\" is your best seller with {quantity} units sold."
    MSG_TODAY = "💰 You've made ₹{amount} in sales today."
    MSG_WELCOME = "🚀 Welcome! Start by adding inventory items and creating invoices to see insights."

    # El más vendido solo se menciona con más de 3 unidades
    BEST_SELLER_MIN_UNITS = 3
    LOW_STOCK_NAMES_SHOWN = 2

    def __init__(
        self,
        inventory_repo,
        invoice_repo,
        clock: Optional[Callable[[], datetime]] = None,
        low_stock_threshold: int = LOW_STOCK_THRESHOLD
    ):
        """
        Inicializa el servicio.

        Args:
            inventory_repo: Repositorio de inventario (solo lectura)
            invoice_repo: Repositorio de facturas (solo lectura)
            clock: Función que retorna "ahora" con zona horaria.
                   Permite inyectar un reloj fijo para testing.
            low_stock_threshold: Umbral de stock bajo
        """
        self.inventory_repo = inventory_repo
        self.invoice_repo = invoice_repo
        self._clock = clock
        self.low_stock_threshold = low_stock_threshold

    def _now(self) -> datetime:
        now = self._clock() if self._clock else local_now()
        if now.tzinfo is None:
            now = now.astimezone()
        return now

    def _invoices_with_dates(self, now: datetime) -> List[tuple]:
        """
        Facturas con su createdAt en hora local.
        Con el reloj del sistema se usa la zona del sistema (respeta el
        horario de verano); con un reloj inyectado, la zona de `now`.
        Las facturas sin fecha válida se ignoran.
        """
        result = []
        for invoice in self.invoice_repo.list():
            created = invoice.created
            if created is None:
                continue
            local = created.astimezone(now.tzinfo) if self._clock else created.astimezone()
            result.append((invoice, local))
        return result

    @staticmethod
    def _sum_totals(invoices: List[Invoice]) -> float:
        return sum((invoice.total for invoice in invoices), 0)

    # =========================================================================
    # TOTALES POR VENTANA
    # =========================================================================

    def today_sales(self) -> float:
        """Suma de facturas creadas en la fecha calendario actual."""
        now = self._now()
        return self._sum_totals([
            inv for inv, created in self._invoices_with_dates(now)
            if created.date() == now.date()
        ])

    def this_month_sales(self) -> float:
        """Suma de facturas del mes y año calendario actuales."""
        now = self._now()
        return self._sum_totals([
            inv for inv, created in self._invoices_with_dates(now)
            if created.year == now.year and created.month == now.month
        ])

    def this_week_sales(self) -> float:
        """Suma de facturas en [ahora - 7 días, ahora)."""
        now = self._now()
        start = now - timedelta(days=7)
        return self._sum_totals([
            inv for inv, created in self._invoices_with_dates(now)
            if start <= created < now
        ])

    def last_week_sales(self) -> float:
        """Suma de facturas en [ahora - 14 días, ahora - 7 días)."""
        now = self._now()
        start = now - timedelta(days=14)
        end = now - timedelta(days=7)
        return self._sum_totals([
            inv for inv, created in self._invoices_with_dates(now)
            if start <= created < end
        ])

    # =========================================================================
    # PRODUCTOS
    # =========================================================================

    def top_selling_product(self) -> Optional[ProductSales]:
        """
        Producto con mayor cantidad vendida entre todas las facturas.

        Se acumula por itemId en orden de aparición; el primero es el líder
        inicial y solo se reemplaza por una cantidad estrictamente mayor
        (en empate gana el que se acumuló primero).

        Returns:
            ProductSales o None si no hay ventas
        """
        # dict conserva el orden de inserción
        product_sales: Dict[str, ProductSales] = {}
        for invoice in self.invoice_repo.list():
            for line in invoice.items:
                if line.item_id not in product_sales:
                    product_sales[line.item_id] = ProductSales(line.item_id, line.item_name)
                product_sales[line.item_id].quantity += line.quantity

        top = None
        for product in product_sales.values():
            if top is None or product.quantity > top.quantity:
                top = product
        return top

    def low_stock_items(self) -> List[InventoryItem]:
        """Ítems con quantity < umbral (5)."""
        return self.inventory_repo.low_stock(self.low_stock_threshold)

    def inventory_value(self) -> float:
        """Valor total del inventario: suma de quantity * price."""
        return sum((item.stock_value for item in self.inventory_repo.list()), 0)

    def invoice_count(self) -> int:
        return len(self.invoice_repo.list())

    def item_count(self) -> int:
        return len(self.inventory_repo.list())

    # =========================================================================
    # INSIGHTS
    # =========================================================================

    def generate_insights(self) -> List[str]:
        """
        Genera frases fijas según reglas evaluadas en orden.

        1-3. Tendencia semanal (sube / baja / ventas estables), excluyentes
        4.   Alerta de stock bajo (máx. 2 nombres + "and N more")
        5.   Más vendido, si vendió más de 3 unidades
        6.   Ingresos de hoy
        7.   Bienvenida si no aplicó ninguna regla

        Returns:
            Lista ordenada de insights (nunca vacía)
        """
        insights = []
        this_week = self.this_week_sales()
        last_week = self.last_week_sales()
        low_stock = self.low_stock_items()
        top_product = self.top_selling_product()
        today = self.today_sales()

        # Tendencia de ventas
        if this_week > last_week and last_week > 0:
            percent = round_half_up((this_week - last_week) / last_week * 100)
            insights.append(self.MSG_SALES_UP.format(percent=percent))
        elif this_week < last_week and last_week > 0:
            insights.append(self.MSG_SALES_DOWN)
        elif this_week > 0:
            insights.append(self.MSG_STEADY)

        # Alertas de stock bajo
        if low_stock:
            shown = low_stock[:self.LOW_STOCK_NAMES_SHOWN]
            names = ', '.join(item.name for item in shown)
            extra = len(low_stock) - len(shown)
            more = f" and {extra} more" if extra > 0 else ''
            insights.append(self.MSG_LOW_STOCK.format(names=names, more=more))

        # Producto estrella
        if top_product and top_product.quantity > self.BEST_SELLER_MIN_UNITS:
            insights.append(self.MSG_BEST_SELLER.format(
                name=top_product.name, quantity=top_product.quantity
            ))

        # Desempeño del día
        if today > 0:
            insights.append(self.MSG_TODAY.format(amount=format_amount(today)))

        if not insights:
            insights.append(self.MSG_WELCOME)

        return insights

    def summary(self) -> Dict[str, Any]:
        """
        Todas las cifras del panel de analítica en un solo dict.

        Returns:
            {
                'todaySales': float,
                'thisMonthSales': float,
                'thisWeekSales': float,
                'lastWeekSales': float,
                'inventoryValue': float,
                'invoiceCount': int,
                'itemCount': int,
                'lowStockCount': int,
                'topProduct': {'itemId', 'name', 'quantity'} | None,
                'insights': [str]
            }
        """
        top_product = self.top_selling_product()
        return {
            'todaySales': self.today_sales(),
            'thisMonthSales': self.this_month_sales(),
            'thisWeekSales': self.this_week_sales(),
            'lastWeekSales': self.last_week_sales(),
            'inventoryValue': self.inventory_value(),
            'invoiceCount': self.invoice_count(),
            'itemCount': self.item_count(),
            'lowStockCount': len(self.low_stock_items()),
            'topProduct': top_product.to_dict() if top_product else None,
            'insights': self.generate_insights(),
        }
