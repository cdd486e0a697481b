from datetime import datetime, timezone

import pytest

from vyapar_app.main import create_app
from vyapar_app.models import Invoice, InvoiceLine, new_id
from vyapar_app.repositories import InventoryRepository, InvoiceRepository, MemoryStore
from vyapar_app.services import AnalyticsService, InvoiceService

# Sábado 15/06/2024 12:00 UTC
FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def inventory_repo(store):
    return InventoryRepository(store)


@pytest.fixture
def invoice_repo(store, inventory_repo):
    return InvoiceRepository(store, inventory_repo)


@pytest.fixture
def invoice_service(invoice_repo, inventory_repo):
    return InvoiceService(invoice_repo, inventory_repo)


@pytest.fixture
def analytics(inventory_repo, invoice_repo):
    return AnalyticsService(inventory_repo, invoice_repo, clock=lambda: FIXED_NOW)


@pytest.fixture
def record_sale(invoice_repo):
    """Registra una factura con fecha arbitraria (sin tocar el inventario)."""
    def _record(total, created, item_id=None, name='Item', quantity=1):
        line = InvoiceLine(
            item_id=item_id or new_id(),
            item_name=name,
            quantity=quantity,
            price=total / quantity,
            total=total,
        )
        invoice = Invoice(
            id=new_id(),
            customer_name='Cliente',
            items=[line],
            total=total,
            created_at=created.isoformat(),
        )
        return invoice_repo.record(invoice)
    return _record


@pytest.fixture
def app(store):
    app = create_app({'TESTING': True, 'STORE': store})
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c
