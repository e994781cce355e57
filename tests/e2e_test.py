"""
End-to-end API test script against a running server.
Uses urllib (no external deps needed).

    API_KEY=<key> python tests/e2e_test.py
"""

import json
import os
import time
import urllib.error
import urllib.request

BASE = os.environ.get('LEDGER_BASE_URL', 'http://localhost:8000/api')
API_KEY = os.environ.get('API_KEY', '')


def api_call(method, url, data=None):
    """Make an API call and return status + body."""
    headers = {'Content-Type': 'application/json'}
    if API_KEY:
        headers['X-API-KEY'] = API_KEY

    payload = json.dumps(data).encode('utf-8') if data is not None else None
    req = urllib.request.Request(url, data=payload, headers=headers, method=method)
    try:
        response = urllib.request.urlopen(req)
        raw = response.read().decode('utf-8')
        return response.status, json.loads(raw) if raw else None
    except urllib.error.HTTPError as e:
        raw = e.read().decode('utf-8')
        return e.code, json.loads(raw) if raw else None


def main():
    print('=' * 60)
    print('SHOP LEDGER: END-TO-END API TESTS')
    print('=' * 60)

    # Unique per run so the script can be repeated against one database.
    mobile = f'9{int(time.time()) % 10 ** 9:09d}'

    print('\n--- TEST 1: POST /api/customers ---')
    status, body = api_call('POST', f'{BASE}/customers', {
        'name': 'Ravi Kumar',
        'mobile': mobile,
    })
    print(f'Status: {status}')
    print(f'Response: {json.dumps(body, indent=2)}')
    assert status == 201, f'Expected 201, got {status}'
    assert body['total_due'] == 0, 'New customer should owe nothing'
    customer_id = body['id']
    print('✓ PASSED')

    print('\n--- TEST 2: credit, payment, overpayment ---')
    status, body = api_call('POST', f'{BASE}/customers/{customer_id}/transactions', {
        'kind': 'CREDIT',
        'amount': '150.00',
    })
    assert status == 201, f'Expected 201, got {status}'
    assert body['new_balance'] == 150, f'Expected 150, got {body["new_balance"]}'

    status, body = api_call('POST', f'{BASE}/transactions', {
        'customer_id': customer_id,
        'kind': 'PAYMENT',
        'amount': '50.00',
    })
    assert status == 201, f'Expected 201, got {status}'
    assert body['new_balance'] == 100, f'Expected 100, got {body["new_balance"]}'

    status, body = api_call('POST', f'{BASE}/transactions', {
        'customer_id': customer_id,
        'kind': 'PAYMENT',
        'amount': '200.00',
    })
    assert status == 201, f'Expected 201, got {status}'
    assert body['new_balance'] == 0, f'Expected 0, got {body["new_balance"]}'
    print('✓ PASSED')

    print('\n--- TEST 3: mark a pending credit paid ---')
    status, body = api_call('POST', f'{BASE}/customers/{customer_id}/transactions', {
        'kind': 'CREDIT',
        'amount': '75.00',
    })
    txn_id = body['transaction']['id']
    assert body['new_balance'] == 75

    status, body = api_call('POST', f'{BASE}/transactions/{txn_id}/mark-status', {
        'status': 'PAID',
    })
    print(f'Status: {status}')
    print(f'Response: {json.dumps(body, indent=2)}')
    assert status == 200, f'Expected 200, got {status}'
    assert body['new_balance'] == 0

    status, body = api_call('POST', f'{BASE}/transactions/{txn_id}/mark-status', {
        'status': 'PAID',
    })
    assert status == 409, f'Repeat settlement should be 409, got {status}'
    print('✓ PASSED')

    print(f'\n--- TEST 4: GET /api/customers/{customer_id}/reconcile ---')
    status, body = api_call('GET', f'{BASE}/customers/{customer_id}/reconcile')
    print(f'Response: {json.dumps(body, indent=2)}')
    assert status == 200, f'Expected 200, got {status}'
    assert body['drift'] == 0, 'Stored due should match history'
    print('✓ PASSED')

    print('\n--- TEST 5: GET /api/dashboard/summary ---')
    status, body = api_call('GET', f'{BASE}/dashboard/summary')
    assert status == 200, f'Expected 200, got {status}'
    assert body['total_customers'] >= 1
    print('✓ PASSED')

    print('\n--- TEST 6: Error handling ---')
    status, _ = api_call('GET', f'{BASE}/customers/999999')
    assert status == 404, f'Expected 404, got {status}'
    print(f'  customers/999999 → {status} ✓')

    status, _ = api_call('POST', f'{BASE}/transactions', {
        'customer_id': customer_id,
        'kind': 'CREDIT',
        'amount': '0',
    })
    assert status == 400, f'Expected 400, got {status}'
    print(f'  zero amount → {status} ✓')

    status, _ = api_call('DELETE', f'{BASE}/customers/{customer_id}')
    assert status == 204, f'Expected 204, got {status}'
    print(f'  delete customer → {status} ✓')
    print('✓ PASSED')

    print('\n' + '=' * 60)
    print('ALL 6 TESTS PASSED ✓')
    print('=' * 60)


if __name__ == '__main__':
    main()
