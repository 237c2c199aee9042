"""
Tests for the HTTP interface.
"""
import unittest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import app


class TestValidationEndpoint(unittest.TestCase):
    """Tests for POST /movements/validation."""

    def setUp(self):
        app.config['TESTING'] = True
        self.client = app.test_client()

    def _post(self, payload):
        return self.client.post('/movements/validation', json=payload)

    def test_accepted(self):
        response = self._post({
            'movements': [
                {'id': 1, 'date': '2024-01-15', 'label': 'Deposit', 'amount': 1000},
                {'id': 2, 'date': '2024-01-20', 'label': 'Withdrawal', 'amount': -300},
            ],
            'balances': [{'date': '2024-01-31', 'balance': 700}],
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {'message': 'Accepted'})

    def test_mismatch_returns_422_with_reasons(self):
        response = self._post({
            'movements': [{'id': 1, 'date': '2024-01-15', 'label': 'Deposit', 'amount': 1000}],
            'balances': [{'date': '2024-01-31', 'balance': 500}],
        })

        self.assertEqual(response.status_code, 422)
        body = response.get_json()
        self.assertEqual(body['message'], 'Validation failed')
        self.assertGreater(len(body['reasons']), 0)
        self.assertEqual(body['reasons'][0]['type'], 'BALANCE_MISMATCH')
        self.assertEqual(body['reasons'][0]['difference'], 500)

    def test_duplicates_reported(self):
        response = self._post({
            'movements': [
                {'id': 1, 'date': '2024-01-15', 'label': 'Virement client', 'amount': 500},
                {'id': 2, 'date': '2024-01-15', 'label': 'Virement client', 'amount': 500},
            ],
            'balances': [{'date': '2024-01-31', 'balance': 500}],
        })

        self.assertEqual(response.status_code, 422)
        reasons = response.get_json()['reasons']
        duplicate = [r for r in reasons if r['type'] == 'DUPLICATE_SUSPECTED'][0]
        self.assertEqual([m['id'] for m in duplicate['movements']], [1, 2])

    def test_missing_movements_reported(self):
        response = self._post({
            'movements': [{'id': 1, 'date': '2024-01-15', 'label': 'Initial deposit', 'amount': 100}],
            'balances': [{'date': '2024-01-31', 'balance': 350}],
        })

        self.assertEqual(response.status_code, 422)
        reasons = response.get_json()['reasons']
        missing = [r for r in reasons if r['type'] == 'MISSING_MOVEMENTS'][0]
        self.assertEqual(missing['missingAmount'], 250)
        self.assertEqual(missing['periodStart'], 'N/A')

    def test_multiple_periods_accepted(self):
        response = self._post({
            'movements': [
                {'id': 1, 'date': '2024-01-10', 'label': 'Salary', 'amount': 2500},
                {'id': 2, 'date': '2024-01-25', 'label': 'Rent', 'amount': -800},
                {'id': 3, 'date': '2024-02-10', 'label': 'Salary', 'amount': 2500},
                {'id': 4, 'date': '2024-02-20', 'label': 'Groceries', 'amount': -400},
            ],
            'balances': [
                {'date': '2024-01-31', 'balance': 1700},
                {'date': '2024-02-29', 'balance': 3800},
            ],
        })
        self.assertEqual(response.status_code, 200)

    def test_large_amounts_accepted(self):
        response = self._post({
            'movements': [{'id': 1, 'date': '2024-01-15', 'label': 'Transfer', 'amount': 1e27}],
            'balances': [{'date': '2024-01-31', 'balance': 1e27}],
        })
        self.assertEqual(response.status_code, 200)

    def test_malformed_payload_returns_400(self):
        response = self._post({'movements': 'invalid', 'balances': []})

        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertEqual(body['message'], 'Invalid input')
        self.assertNotIn('reasons', body)
        self.assertIn('movements', [e['path'] for e in body['errors']])

    def test_empty_balances_returns_400(self):
        response = self._post({'movements': [], 'balances': []})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['errors'][0]['type'], 'empty_balances')

    def test_non_json_body_returns_400(self):
        response = self.client.post(
            '/movements/validation', data='not json', content_type='text/plain'
        )
        self.assertEqual(response.status_code, 400)

    def test_get_not_allowed(self):
        response = self.client.get('/movements/validation')
        self.assertEqual(response.status_code, 405)
        self.assertIn('message', response.get_json())


class TestHealthEndpoint(unittest.TestCase):

    def test_health(self):
        response = app.test_client().get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['status'], 'healthy')


if __name__ == '__main__':
    unittest.main()
