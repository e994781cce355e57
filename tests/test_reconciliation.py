"""
Tests for the balance reconciliation rule.
"""

from decimal import Decimal

from django.test import SimpleTestCase

from apps.core.exceptions import InvalidTransitionError, ValidationError
from apps.core.utils import (
    MAX_MONEY,
    apply_transaction,
    replay_balance,
    reverse_transaction,
    to_amount,
    transition_balance,
)


class ApplyTransactionTests(SimpleTestCase):
    """Test the due computed when a transaction is recorded."""

    def test_credit_adds_amount(self):
        self.assertEqual(
            apply_transaction(Decimal('100.00'), 'CREDIT', Decimal('50.25')),
            Decimal('150.25'),
        )

    def test_credit_from_zero(self):
        self.assertEqual(apply_transaction(Decimal('0'), 'CREDIT', Decimal('150')), Decimal('150'))

    def test_payment_subtracts_amount(self):
        self.assertEqual(
            apply_transaction(Decimal('150'), 'PAYMENT', Decimal('50')),
            Decimal('100'),
        )

    def test_payment_floors_at_zero(self):
        """Overpayment is absorbed, never negative."""
        self.assertEqual(
            apply_transaction(Decimal('100'), 'PAYMENT', Decimal('200')),
            Decimal('0'),
        )

    def test_adjustment_behaves_like_payment(self):
        self.assertEqual(
            apply_transaction(Decimal('80'), 'ADJUSTMENT', Decimal('30')),
            Decimal('50'),
        )
        self.assertEqual(
            apply_transaction(Decimal('20'), 'ADJUSTMENT', Decimal('30')),
            Decimal('0'),
        )

    def test_kind_is_case_insensitive(self):
        self.assertEqual(apply_transaction(10, 'credit', 5), Decimal('15'))
        self.assertEqual(apply_transaction(10, 'Payment', 5), Decimal('5'))

    def test_accepts_int_float_and_str(self):
        self.assertEqual(apply_transaction(0, 'CREDIT', 150), Decimal('150'))
        self.assertEqual(apply_transaction('10.50', 'CREDIT', 0.25), Decimal('10.75'))

    def test_returns_decimal(self):
        self.assertIsInstance(apply_transaction(0, 'CREDIT', 1), Decimal)

    def test_payment_property_over_range(self):
        """new_due == max(0, due - amount) for a spread of inputs."""
        for due in ('0', '0.01', '49.99', '50', '1000'):
            for amount in ('0.01', '25', '50', '2000'):
                expected = max(Decimal('0'), Decimal(due) - Decimal(amount))
                with self.subTest(due=due, amount=amount):
                    self.assertEqual(
                        apply_transaction(Decimal(due), 'PAYMENT', Decimal(amount)),
                        expected,
                    )
                    self.assertGreaterEqual(expected, Decimal('0'))


class AmountValidationTests(SimpleTestCase):
    """Invalid amounts are rejected before any computation."""

    def test_zero_amount(self):
        with self.assertRaises(ValidationError):
            apply_transaction(Decimal('100'), 'CREDIT', Decimal('0'))

    def test_negative_amount(self):
        with self.assertRaises(ValidationError):
            apply_transaction(Decimal('100'), 'PAYMENT', -5)

    def test_nan_amount(self):
        with self.assertRaises(ValidationError):
            apply_transaction(Decimal('100'), 'CREDIT', float('nan'))
        with self.assertRaises(ValidationError):
            apply_transaction(Decimal('100'), 'CREDIT', Decimal('NaN'))

    def test_infinite_amount(self):
        with self.assertRaises(ValidationError):
            apply_transaction(Decimal('100'), 'CREDIT', float('inf'))

    def test_unparsable_amount(self):
        with self.assertRaises(ValidationError):
            to_amount('ten rupees')

    def test_boolean_amount(self):
        with self.assertRaises(ValidationError):
            to_amount(True)

    def test_current_due_left_unchanged_on_failure(self):
        current_due = Decimal('100')
        for bad in (0, -5, float('nan')):
            with self.subTest(amount=bad):
                with self.assertRaises(ValidationError):
                    apply_transaction(current_due, 'PAYMENT', bad)
        self.assertEqual(current_due, Decimal('100'))

    def test_negative_current_due(self):
        with self.assertRaises(ValidationError):
            apply_transaction(Decimal('-1'), 'CREDIT', Decimal('10'))

    def test_unknown_kind(self):
        with self.assertRaises(ValidationError):
            apply_transaction(Decimal('10'), 'REFUND', Decimal('5'))


class MoneyCeilingTests(SimpleTestCase):
    """Results must fit the 12-digit, 2-place money columns."""

    def test_credit_up_to_ceiling(self):
        self.assertEqual(
            apply_transaction(MAX_MONEY - Decimal('5'), 'CREDIT', Decimal('5')),
            MAX_MONEY,
        )

    def test_credit_past_ceiling_rejected(self):
        with self.assertRaises(ValidationError):
            apply_transaction(MAX_MONEY, 'CREDIT', Decimal('5.00'))

    def test_oversized_amount_rejected(self):
        with self.assertRaises(ValidationError):
            to_amount(MAX_MONEY + Decimal('0.01'))

    def test_oversized_current_due_rejected(self):
        with self.assertRaises(ValidationError):
            apply_transaction(MAX_MONEY + 1, 'PAYMENT', Decimal('1'))

    def test_payment_reversal_past_ceiling_rejected(self):
        with self.assertRaises(ValidationError):
            reverse_transaction(MAX_MONEY, 'PAYMENT', Decimal('10'), 'COMPLETED')


class ScenarioTests(SimpleTestCase):
    """Worked examples of a customer's balance over several events."""

    def test_credit_then_payments(self):
        due = Decimal('0')
        due = apply_transaction(due, 'CREDIT', Decimal('150'))
        self.assertEqual(due, Decimal('150'))
        due = apply_transaction(due, 'PAYMENT', Decimal('50'))
        self.assertEqual(due, Decimal('100'))
        due = apply_transaction(due, 'PAYMENT', Decimal('200'))
        self.assertEqual(due, Decimal('0'))

    def test_mark_pending_credit_paid(self):
        due = transition_balance(Decimal('75'), 'CREDIT', Decimal('75'), 'PENDING', 'PAID')
        self.assertEqual(due, Decimal('0'))

        # Repeating the same call from the stored PAID status is rejected.
        with self.assertRaises(InvalidTransitionError):
            transition_balance(due, 'CREDIT', Decimal('75'), 'PAID', 'PAID')


class TransitionBalanceTests(SimpleTestCase):
    """Test the due computed when a transaction changes status."""

    def test_completed_credit_settles(self):
        self.assertEqual(
            transition_balance(Decimal('100'), 'CREDIT', Decimal('40'), 'PENDING', 'COMPLETED'),
            Decimal('60'),
        )

    def test_cancelled_credit_is_removed(self):
        self.assertEqual(
            transition_balance(Decimal('100'), 'CREDIT', Decimal('40'), 'PENDING', 'CANCELLED'),
            Decimal('60'),
        )

    def test_settlement_floors_at_zero(self):
        self.assertEqual(
            transition_balance(Decimal('10'), 'CREDIT', Decimal('40'), 'PENDING', 'PAID'),
            Decimal('0'),
        )

    def test_payment_transition_leaves_due(self):
        self.assertEqual(
            transition_balance(Decimal('100'), 'PAYMENT', Decimal('40'), 'PENDING', 'COMPLETED'),
            Decimal('100'),
        )

    def test_adjustment_transition_leaves_due(self):
        self.assertEqual(
            transition_balance(Decimal('100'), 'ADJUSTMENT', Decimal('40'), 'PENDING', 'CANCELLED'),
            Decimal('100'),
        )

    def test_same_status_rejected(self):
        with self.assertRaises(InvalidTransitionError):
            transition_balance(Decimal('100'), 'CREDIT', Decimal('40'), 'PENDING', 'PENDING')

    def test_terminal_status_rejected(self):
        for current in ('PAID', 'COMPLETED', 'CANCELLED'):
            with self.subTest(current=current):
                with self.assertRaises(InvalidTransitionError):
                    transition_balance(Decimal('100'), 'CREDIT', Decimal('40'), current, 'PENDING')

    def test_paid_to_cancelled_rejected(self):
        with self.assertRaises(InvalidTransitionError):
            transition_balance(Decimal('100'), 'CREDIT', Decimal('40'), 'PAID', 'CANCELLED')

    def test_unknown_status_rejected(self):
        with self.assertRaises(ValidationError):
            transition_balance(Decimal('100'), 'CREDIT', Decimal('40'), 'PENDING', 'REFUNDED')

    def test_invalid_amount_rejected(self):
        with self.assertRaises(ValidationError):
            transition_balance(Decimal('100'), 'CREDIT', Decimal('0'), 'PENDING', 'PAID')


class ReverseTransactionTests(SimpleTestCase):
    """Test the due computed when a transaction is deleted."""

    def test_pending_credit_removed(self):
        self.assertEqual(
            reverse_transaction(Decimal('150'), 'CREDIT', Decimal('100'), 'PENDING'),
            Decimal('50'),
        )

    def test_settled_credit_no_change(self):
        self.assertEqual(
            reverse_transaction(Decimal('150'), 'CREDIT', Decimal('100'), 'PAID'),
            Decimal('150'),
        )

    def test_cancelled_credit_no_change(self):
        self.assertEqual(
            reverse_transaction(Decimal('150'), 'CREDIT', Decimal('100'), 'CANCELLED'),
            Decimal('150'),
        )

    def test_payment_added_back(self):
        self.assertEqual(
            reverse_transaction(Decimal('50'), 'PAYMENT', Decimal('30'), 'COMPLETED'),
            Decimal('80'),
        )


class ReplayBalanceTests(SimpleTestCase):
    """Test deriving a due from history."""

    def test_empty_history(self):
        self.assertEqual(replay_balance([]), Decimal('0'))

    def test_matches_incremental_updates(self):
        history = [
            ('CREDIT', Decimal('150'), 'PENDING'),
            ('PAYMENT', Decimal('50'), 'COMPLETED'),
            ('CREDIT', Decimal('75'), 'PAID'),
            ('ADJUSTMENT', Decimal('10'), 'COMPLETED'),
        ]
        due = Decimal('0')
        due = apply_transaction(due, 'CREDIT', Decimal('150'))
        due = apply_transaction(due, 'PAYMENT', Decimal('50'))
        due = apply_transaction(due, 'CREDIT', Decimal('75'))
        due = transition_balance(due, 'CREDIT', Decimal('75'), 'PENDING', 'PAID')
        due = apply_transaction(due, 'ADJUSTMENT', Decimal('10'))

        self.assertEqual(replay_balance(history), due)
        self.assertEqual(due, Decimal('90'))

    def test_overpayment_floor_applies_in_order(self):
        history = [
            ('PAYMENT', Decimal('100'), 'COMPLETED'),
            ('CREDIT', Decimal('40'), 'PENDING'),
        ]
        self.assertEqual(replay_balance(history), Decimal('40'))

    def test_cancelled_credit_does_not_count(self):
        history = [
            ('CREDIT', Decimal('40'), 'CANCELLED'),
            ('CREDIT', Decimal('25'), 'PENDING'),
        ]
        self.assertEqual(replay_balance(history), Decimal('25'))
