"""
Unit tests for date/amount normalizers and the JSON payload parser.
"""
import unittest
from datetime import date
from decimal import Decimal

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from normalizer.date_parser import parse_date, is_valid_date, format_date
from normalizer.amount_parser import (
    parse_amount, has_valid_amount, round_money, amounts_equal, to_number, format_amount
)
from parsers.base_parser import Checkpoint, InvalidInputError, Movement
from parsers.payload_parser import PayloadParser


class TestDateParser(unittest.TestCase):
    """Tests for date parsing functions."""

    def test_iso_date(self):
        """Test YYYY-MM-DD format."""
        self.assertEqual(parse_date("2024-01-15"), date(2024, 1, 15))

    def test_iso_datetime_drops_time(self):
        """Time of day and offset never shift the calendar date."""
        self.assertEqual(parse_date("2024-01-31T23:30:00+05:00"), date(2024, 1, 31))
        self.assertEqual(parse_date("2024-01-31T00:00:00Z"), date(2024, 1, 31))

    def test_slash_format(self):
        """Test YYYY/MM/DD format."""
        self.assertEqual(parse_date("2024/02/29"), date(2024, 2, 29))

    def test_date_object_passthrough(self):
        self.assertEqual(parse_date(date(2024, 3, 1)), date(2024, 3, 1))

    def test_invalid_dates(self):
        """Test invalid values return None."""
        self.assertIsNone(parse_date("not a date"))
        self.assertIsNone(parse_date("2024-02-30"))
        self.assertIsNone(parse_date(""))
        self.assertIsNone(parse_date(None))
        self.assertIsNone(parse_date(20240115))

    def test_is_valid_date(self):
        self.assertTrue(is_valid_date("2024-01-15"))
        self.assertFalse(is_valid_date("15 janvier"))

    def test_format_date(self):
        self.assertEqual(format_date(date(2024, 1, 5)), "05/01/2024")
        self.assertEqual(format_date(date(2024, 1, 5), "%Y%m%d"), "20240105")
        self.assertEqual(format_date(None), "")


class TestAmountParser(unittest.TestCase):
    """Tests for amount parsing and money arithmetic."""

    def test_numbers(self):
        self.assertEqual(parse_amount(100), Decimal("100"))
        self.assertEqual(parse_amount(10.99), Decimal("10.99"))
        self.assertEqual(parse_amount(-0.1), Decimal("-0.1"))

    def test_strings(self):
        self.assertEqual(parse_amount("1,250.00"), Decimal("1250.00"))
        self.assertEqual(parse_amount(" -30.5 "), Decimal("-30.5"))
        self.assertEqual(parse_amount("+12"), Decimal("12"))

    def test_rejected_values(self):
        self.assertIsNone(parse_amount(None))
        self.assertIsNone(parse_amount(True))
        self.assertIsNone(parse_amount(float("nan")))
        self.assertIsNone(parse_amount(float("inf")))
        self.assertIsNone(parse_amount("abc"))
        self.assertIsNone(parse_amount(""))
        self.assertFalse(has_valid_amount("12x"))
        self.assertTrue(has_valid_amount("12"))

    def test_round_money_half_away_from_zero(self):
        self.assertEqual(round_money(Decimal("0.125")), Decimal("0.13"))
        self.assertEqual(round_money(Decimal("-0.125")), Decimal("-0.13"))
        self.assertEqual(round_money(Decimal("2.344")), Decimal("2.34"))

    def test_round_money_large_amounts(self):
        self.assertEqual(round_money(Decimal("1E+27")), Decimal("1000000000000000000000000000.00"))
        self.assertEqual(round_money(Decimal("-123456789012345678901234567890.125")),
                         Decimal("-123456789012345678901234567890.13"))

    def test_amounts_equal_tolerance(self):
        self.assertTrue(amounts_equal(Decimal("10.00"), Decimal("10.0009")))
        self.assertFalse(amounts_equal(Decimal("10.00"), Decimal("10.001")))

    def test_decimal_sum_has_no_float_noise(self):
        total = sum([parse_amount(0.1), parse_amount(0.2)], Decimal(0))
        self.assertEqual(total, Decimal("0.3"))

    def test_to_number(self):
        self.assertEqual(to_number(Decimal("100.00")), 100)
        self.assertIsInstance(to_number(Decimal("100.00")), int)
        self.assertEqual(to_number(Decimal("10.99")), 10.99)

    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal("100.00")), "100")
        self.assertEqual(format_amount(Decimal("100"), signed=True), "+100")
        self.assertEqual(format_amount(Decimal("-2.5"), signed=True), "-2.5")


class TestPayloadParser(unittest.TestCase):
    """Tests for JSON body validation."""

    def _valid_payload(self):
        return {
            'movements': [
                {'id': 1, 'date': '2024-01-15', 'label': 'Deposit', 'amount': 1000},
                {'id': 2, 'date': '2024-01-20', 'label': 'Withdrawal', 'amount': -300.5},
            ],
            'balances': [{'date': '2024-01-31', 'balance': 699.5}],
        }

    def _issue_types(self, payload):
        with self.assertRaises(InvalidInputError) as ctx:
            PayloadParser(payload).parse()
        return {issue.issue_type for issue in ctx.exception.issues}

    def test_valid_payload(self):
        movements, checkpoints = PayloadParser(self._valid_payload()).parse()

        self.assertEqual(movements[0], Movement(1, date(2024, 1, 15), 'Deposit', Decimal('1000')))
        self.assertEqual(movements[1].amount, Decimal('-300.5'))
        self.assertEqual(checkpoints, [Checkpoint(date(2024, 1, 31), Decimal('699.5'))])

    def test_empty_movements_allowed(self):
        payload = {'movements': [], 'balances': [{'date': '2024-01-31', 'balance': 0}]}
        movements, checkpoints = PayloadParser(payload).parse()
        self.assertEqual(movements, [])
        self.assertEqual(len(checkpoints), 1)

    def test_empty_balances_rejected(self):
        payload = {'movements': [], 'balances': []}
        self.assertIn('empty_balances', self._issue_types(payload))

    def test_movements_not_an_array(self):
        payload = {'movements': 'invalid', 'balances': []}
        types = self._issue_types(payload)
        self.assertIn('not_an_array', types)
        self.assertIn('empty_balances', types)

    def test_body_not_an_object(self):
        self.assertIn('not_an_object', self._issue_types([1, 2]))

    def test_missing_top_level_field(self):
        self.assertIn('missing_field', self._issue_types({'movements': []}))

    def test_unknown_fields_rejected(self):
        payload = self._valid_payload()
        payload['extra'] = True
        payload['movements'][0]['currency'] = 'EUR'
        with self.assertRaises(InvalidInputError) as ctx:
            PayloadParser(payload).parse()
        paths = [issue.path for issue in ctx.exception.issues]
        self.assertIn('extra', paths)
        self.assertIn('movements[0].currency', paths)

    def test_strict_types(self):
        payload = self._valid_payload()
        payload['movements'][0]['id'] = '1'
        payload['movements'][1]['amount'] = '12.5'
        payload['balances'][0]['balance'] = True
        with self.assertRaises(InvalidInputError) as ctx:
            PayloadParser(payload).parse()
        paths = {issue.path: issue.issue_type for issue in ctx.exception.issues}
        self.assertEqual(paths['movements[0].id'], 'invalid_id')
        self.assertEqual(paths['movements[1].amount'], 'invalid_number')
        self.assertEqual(paths['balances[0].balance'], 'invalid_number')

    def test_boolean_id_rejected(self):
        payload = self._valid_payload()
        payload['movements'][0]['id'] = True
        self.assertIn('invalid_id', self._issue_types(payload))

    def test_invalid_date_and_label(self):
        payload = self._valid_payload()
        payload['movements'][0]['date'] = '31/01/2024'
        payload['movements'][1]['label'] = 42
        types = self._issue_types(payload)
        self.assertIn('invalid_date', types)
        self.assertIn('invalid_label', types)

    def test_missing_item_field(self):
        payload = self._valid_payload()
        del payload['movements'][0]['amount']
        with self.assertRaises(InvalidInputError) as ctx:
            PayloadParser(payload).parse()
        self.assertEqual(ctx.exception.issues[0].path, 'movements[0].amount')

    def test_size_limit(self):
        from config import get_config
        config = get_config()
        previous = config.get('max_movements')
        config.set('max_movements', 1)
        try:
            self.assertIn('too_many_items', self._issue_types(self._valid_payload()))
        finally:
            config.set('max_movements', previous)

    def test_input_is_not_mutated(self):
        payload = self._valid_payload()
        snapshot = repr(payload)
        PayloadParser(payload).parse()
        self.assertEqual(repr(payload), snapshot)


if __name__ == '__main__':
    unittest.main()
