# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único para obtener el store, los repositorios y los servicios.
# Facilita:
#   - Inyección de dependencias (el store es explícito, no global)
#   - Testing (se sustituye el store por MemoryStore)
#
# Orden de construcción: store → repositorios → servicios
# ==============================================================================

import logging
from typing import Callable, Optional

from vyapar_app import config
from vyapar_app.repositories import (
    InventoryRepository,
    InvoiceRepository,
    JSONFileStore,
)
from vyapar_app.services import AnalyticsService, InvoiceService

logger = logging.getLogger(__name__)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Uso:
        container = AppContainer(data_dir='/path/to/data')
        item = container.inventory_repo.add('Widget', 10, 50)
        insights = container.analytics_service.generate_insights()

    En tests:
        container = AppContainer(store=MemoryStore())
    """

    def __init__(self, data_dir: str = None, store=None, clock: Optional[Callable] = None):
        """
        Args:
            data_dir: Directorio de datos JSON (si no se inyecta store)
            store: Adaptador de persistencia ya construido
            clock: Reloj para la analítica (testing)
        """
        self._data_dir = data_dir or config.DATA_DIR
        self._store = store
        self._clock = clock

        # Lazy loading
        self._inventory_repo: Optional[InventoryRepository] = None
        self._invoice_repo: Optional[InvoiceRepository] = None
        self._invoice_service: Optional[InvoiceService] = None
        self._analytics_service: Optional[AnalyticsService] = None

    # =========================================================================
    # PERSISTENCIA
    # =========================================================================

    @property
    def store(self):
        """Adaptador de persistencia (JSON en disco por defecto)."""
        if self._store is None:
            self._store = JSONFileStore(self._data_dir)
            logger.info("[STORAGE] Datos en %s", self._data_dir)
        return self._store

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def inventory_repo(self) -> InventoryRepository:
        if self._inventory_repo is None:
            self._inventory_repo = InventoryRepository(self.store)
        return self._inventory_repo

    @property
    def invoice_repo(self) -> InvoiceRepository:
        if self._invoice_repo is None:
            self._invoice_repo = InvoiceRepository(self.store, self.inventory_repo)
        return self._invoice_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def invoice_service(self) -> InvoiceService:
        if self._invoice_service is None:
            self._invoice_service = InvoiceService(self.invoice_repo, self.inventory_repo)
        return self._invoice_service

    @property
    def analytics_service(self) -> AnalyticsService:
        if self._analytics_service is None:
            self._analytics_service = AnalyticsService(
                self.inventory_repo,
                self.invoice_repo,
                clock=self._clock
            )
        return self._analytics_service
