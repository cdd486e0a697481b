import pytest

from vyapar_app.errors import ValidationError
from vyapar_app.models import ItemPatch
from vyapar_app.models.entities import parse_timestamp
from vyapar_app.repositories import newest_first


def test_add_then_list(inventory_repo):
    item = inventory_repo.add('Widget', 10, 50)

    items = inventory_repo.list()
    assert len(items) == 1
    assert items[0] == item
    assert item.id
    assert item.name == 'Widget'
    assert item.quantity == 10
    assert item.price == 50
    assert parse_timestamp(item.created_at) is not None


def test_ids_are_unique(inventory_repo):
    ids = {inventory_repo.add(f'Item {i}', i, 1.5).id for i in range(20)}
    assert len(ids) == 20


def test_add_trims_name_and_accepts_zero_quantity(inventory_repo):
    item = inventory_repo.add('  Tornillo  ', 0, '2.50')
    assert item.name == 'Tornillo'
    assert item.quantity == 0
    assert item.price == 2.5


@pytest.mark.parametrize('name, quantity, price', [
    ('', 1, 1),
    ('   ', 1, 1),
    (None, 1, 1),
    ('Widget', -1, 1),
    ('Widget', 2.5, 1),
    ('Widget', 'abc', 1),
    ('Widget', None, 1),
    ('Widget', 1, 0),
    ('Widget', 1, -3),
    ('Widget', 1, 'free'),
    ('Widget', 1, None),
])
def test_add_rejects_invalid_input(inventory_repo, name, quantity, price):
    with pytest.raises(ValidationError):
        inventory_repo.add(name, quantity, price)
    assert inventory_repo.list() == []


def test_update_merges_only_given_fields(inventory_repo):
    item = inventory_repo.add('Widget', 10, 50)
    inventory_repo.update(item.id, {'price': 75})

    updated = inventory_repo.get(item.id)
    assert updated.price == 75
    assert updated.name == 'Widget'
    assert updated.quantity == 10
    assert updated.created_at == item.created_at


def test_update_with_patch_object(inventory_repo):
    item = inventory_repo.add('Widget', 10, 50)
    inventory_repo.update(item.id, ItemPatch(name='Gadget', quantity=4))

    updated = inventory_repo.get(item.id)
    assert (updated.name, updated.quantity, updated.price) == ('Gadget', 4, 50)


def test_update_ignores_immutable_fields(inventory_repo):
    item = inventory_repo.add('Widget', 10, 50)
    inventory_repo.update(item.id, {'id': 'other', 'createdAt': '2000-01-01T00:00:00Z', 'name': 'W2'})

    updated = inventory_repo.get(item.id)
    assert updated.id == item.id
    assert updated.created_at == item.created_at
    assert updated.name == 'W2'


def test_update_validates_values(inventory_repo):
    item = inventory_repo.add('Widget', 10, 50)
    with pytest.raises(ValidationError):
        inventory_repo.update(item.id, {'price': 0})
    with pytest.raises(ValidationError):
        inventory_repo.update(item.id, {'name': ''})
    assert inventory_repo.get(item.id) == item


def test_update_missing_id_is_noop(inventory_repo):
    item = inventory_repo.add('Widget', 10, 50)
    inventory_repo.update('missing', {'name': 'Gadget'})
    assert inventory_repo.list() == [item]


def test_update_missing_id_skips_validation(inventory_repo):
    item = inventory_repo.add('Widget', 10, 50)
    inventory_repo.update('missing', {'price': 0, 'name': ''})
    assert inventory_repo.list() == [item]


def test_delete_is_idempotent(inventory_repo):
    keep = inventory_repo.add('Keep', 1, 1)
    gone = inventory_repo.add('Gone', 1, 1)

    inventory_repo.delete(gone.id)
    assert inventory_repo.list() == [keep]

    inventory_repo.delete(gone.id)
    assert inventory_repo.list() == [keep]


@pytest.mark.parametrize('start, amount, expected', [
    (10, 3, 7),
    (3, 3, 0),
    (3, 10, 0),
    (0, 1, 0),
])
def test_reduce_quantity_clamps_at_zero(inventory_repo, start, amount, expected):
    item = inventory_repo.add('Widget', start, 50)
    inventory_repo.reduce_quantity(item.id, amount)
    assert inventory_repo.get(item.id).quantity == expected


def test_reduce_quantity_missing_id_is_noop(inventory_repo):
    item = inventory_repo.add('Widget', 5, 50)
    inventory_repo.reduce_quantity('missing', 3)
    assert inventory_repo.list() == [item]


def test_low_stock(inventory_repo):
    inventory_repo.add('A', 4, 1)
    inventory_repo.add('B', 5, 1)
    inventory_repo.add('C', 0, 1)
    assert [item.name for item in inventory_repo.low_stock(5)] == ['A', 'C']


def test_newest_first(inventory_repo):
    inventory_repo.add('Old', 1, 1)
    inventory_repo.add('New', 1, 1)
    items = inventory_repo.list()
    items[0].created_at = '2024-01-01T00:00:00+00:00'
    items[1].created_at = '2024-02-01T00:00:00+00:00'
    assert [item.name for item in newest_first(items)] == ['New', 'Old']
