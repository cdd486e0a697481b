import pytest

from vyapar_app.config import INVOICES_KEY


def add_item(client, name='Widget', quantity=10, price=50):
    r = client.post('/api/inventory', json={'name': name, 'quantity': quantity, 'price': price})
    assert r.status_code == 201
    return r.get_json()['item']


def test_health(client):
    r = client.get('/health')
    assert r.status_code == 200
    assert r.get_json() == {'success': True, 'status': 'ok'}


def test_inventory_crud(client):
    item = add_item(client)
    assert item['name'] == 'Widget'
    assert item['quantity'] == 10
    assert item['id']
    assert item['createdAt']

    r = client.patch(f"/api/inventory/{item['id']}", json={'price': 60})
    assert r.status_code == 200
    assert r.get_json()['item']['price'] == 60

    r = client.post(f"/api/inventory/{item['id']}/reduce", json={'amount': 25})
    assert r.get_json()['item']['quantity'] == 0

    r = client.delete(f"/api/inventory/{item['id']}")
    assert r.get_json() == {'success': True}
    r = client.delete(f"/api/inventory/{item['id']}")
    assert r.status_code == 200

    assert client.get('/api/inventory').get_json()['items'] == []


def test_inventory_validation_error(client):
    r = client.post('/api/inventory', json={'name': '', 'quantity': 1, 'price': 1})
    assert r.status_code == 400
    body = r.get_json()
    assert body['success'] is False
    assert body['error'] == 'Please enter item name'


def test_update_unknown_item_is_noop(client):
    r = client.patch('/api/inventory/missing', json={'name': 'Gadget'})
    assert r.status_code == 200
    assert r.get_json() == {'success': True, 'item': None}


def test_reduce_requires_whole_number(client):
    item = add_item(client)
    r = client.post(f"/api/inventory/{item['id']}/reduce", json={'amount': '3'})
    assert r.status_code == 400


def test_invoice_flow(client):
    item = add_item(client, 'Widget', 10, 50)

    r = client.post('/api/invoices/preview', json={'items': [{'itemId': item['id'], 'quantity': 3}]})
    assert r.get_json()['total'] == 150

    r = client.post('/api/invoices', json={
        'customerName': 'Acme',
        'items': [{'itemId': item['id'], 'quantity': 3}],
    })
    assert r.status_code == 201
    invoice = r.get_json()['invoice']
    assert invoice['total'] == 150
    assert invoice['items'][0]['itemName'] == 'Widget'

    [stored] = client.get('/api/inventory').get_json()['items']
    assert stored['quantity'] == 7

    r = client.delete(f"/api/invoices/{invoice['id']}")
    assert r.status_code == 200
    assert client.get('/api/invoices').get_json()['invoices'] == []
    assert client.get('/api/inventory').get_json()['items'][0]['quantity'] == 7


def test_invoice_over_stock_rejected(client):
    item = add_item(client, 'Widget', 2, 50)
    r = client.post('/api/invoices', json={
        'customerName': 'Acme',
        'items': [{'itemId': item['id'], 'quantity': 3}],
    })
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Only 2 units of "Widget" available'
    assert client.get('/api/invoices').get_json()['invoices'] == []
    assert client.get('/api/inventory').get_json()['items'][0]['quantity'] == 2


def test_invoices_newest_first(client):
    item = add_item(client, 'Widget', 10, 5)
    first = client.post('/api/invoices', json={
        'customerName': 'First', 'items': [{'itemId': item['id'], 'quantity': 1}],
    }).get_json()['invoice']
    second = client.post('/api/invoices', json={
        'customerName': 'Second', 'items': [{'itemId': item['id'], 'quantity': 1}],
    }).get_json()['invoice']

    invoices = client.get('/api/invoices').get_json()['invoices']
    ids = [inv['id'] for inv in invoices]
    if first['createdAt'] != second['createdAt']:
        assert ids == [second['id'], first['id']]
    else:
        assert sorted(ids) == sorted([first['id'], second['id']])


def test_analytics_endpoints(client):
    r = client.get('/api/analytics/insights')
    assert r.get_json()['insights'] == [
        "🚀 Welcome! Start by adding inventory items and creating invoices to see insights."
    ]

    item = add_item(client, 'Widget', 6, 100)
    client.post('/api/invoices', json={
        'customerName': 'Acme', 'items': [{'itemId': item['id'], 'quantity': 4}],
    })

    summary = client.get('/api/analytics').get_json()['summary']
    assert summary['todaySales'] == 400
    assert summary['invoiceCount'] == 1
    assert summary['topProduct']['quantity'] == 4
    assert summary['lowStockCount'] == 1

    low = client.get('/api/analytics/low-stock').get_json()['items']
    assert [i['name'] for i in low] == ['Widget']


def test_malformed_body(client):
    r = client.post('/api/inventory', data='nope', content_type='application/json')
    assert r.status_code == 400
    assert r.get_json()['success'] is False


def test_unknown_route_is_json(client):
    r = client.get('/api/nothing')
    assert r.status_code == 404
    assert r.get_json()['success'] is False


def test_corrupt_storage_is_503(client, store):
    store.store(INVOICES_KEY, b'{broken')
    r = client.get('/api/invoices')
    assert r.status_code == 503
    assert 'Corrupt data' in r.get_json()['error']


def test_widget_sales_day(client):
    """Alta, venta, borrado de factura y segunda venta hasta stock bajo."""
    widget = add_item(client, 'Widget', 10, 50)

    r = client.post('/api/invoices', json={
        'customerName': 'Acme', 'items': [{'itemId': widget['id'], 'quantity': 3}],
    })
    first = r.get_json()['invoice']
    assert first['total'] == 150
    assert client.get('/api/inventory').get_json()['items'][0]['quantity'] == 7

    client.delete(f"/api/invoices/{first['id']}")
    assert client.get('/api/invoices').get_json()['invoices'] == []
    assert client.get('/api/inventory').get_json()['items'][0]['quantity'] == 7
    assert client.get('/api/analytics/low-stock').get_json()['items'] == []

    r = client.post('/api/invoices', json={
        'customerName': 'Acme', 'items': [{'itemId': widget['id'], 'quantity': 5}],
    })
    assert r.status_code == 201
    assert r.get_json()['invoice']['total'] == 250
    assert client.get('/api/inventory').get_json()['items'][0]['quantity'] == 2

    low = client.get('/api/analytics/low-stock').get_json()['items']
    assert [i['name'] for i in low] == ['Widget']
    assert client.get('/api/analytics').get_json()['summary']['lowStockCount'] == 1


@pytest.mark.parametrize('path', ['/api/invoices', '/api/invoices/preview'])
def test_items_must_be_a_list(client, path):
    r = client.post(path, json={'customerName': 'Acme', 'items': 5})
    assert r.status_code == 400
    assert r.get_json() == {'success': False, 'error': 'Items must be a list'}


def test_infinite_quantity_is_rejected(client):
    item = add_item(client, 'Widget', 10, 50)
    body = '{"customerName": "Acme", "items": [{"itemId": "%s", "quantity": Infinity}]}' % item['id']

    r = client.post('/api/invoices', data=body, content_type='application/json')
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Please add at least one item'

    r = client.post('/api/invoices/preview', data=body, content_type='application/json')
    assert r.get_json()['total'] == 0
    assert client.get('/api/inventory').get_json()['items'][0]['quantity'] == 10
