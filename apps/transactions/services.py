"""
Ledger service layer.

Records transactions against customers and keeps each customer's
total_due in step with them. The balance arithmetic lives in
apps.core.utils; this module owns persistence and locking.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Count, Max, Q, Sum

from apps.core.exceptions import (
    CustomerNotFoundError,
    TransactionNotFoundError,
    ValidationError,
)
from apps.core.utils import (
    apply_transaction,
    normalize_kind,
    normalize_status,
    reverse_transaction,
    to_amount,
    transition_balance,
)
from apps.customers.models import Customer
from apps.transactions.models import (
    PaymentMethod,
    Transaction,
    TransactionKind,
    TransactionStatus,
)

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for recording, settling and removing ledger entries."""

    @staticmethod
    def default_status(kind: str) -> str:
        """Credits start PENDING; payments and adjustments are COMPLETED."""
        if kind == TransactionKind.CREDIT:
            return TransactionStatus.PENDING
        return TransactionStatus.COMPLETED

    @classmethod
    def initial_status(cls, kind: str, status: Optional[str] = None) -> str:
        """
        Resolve the status a new transaction is recorded with.

        Raises:
            ValidationError: If a credit is not PENDING, or any
                transaction would start CANCELLED.
        """
        if not status:
            return cls.default_status(kind)

        status = normalize_status(status)
        if status == TransactionStatus.CANCELLED:
            raise ValidationError(
                detail="A transaction cannot be recorded as CANCELLED."
            )
        if kind == TransactionKind.CREDIT and status != TransactionStatus.PENDING:
            raise ValidationError(
                detail="Credit transactions must be recorded as PENDING."
            )
        return status

    @staticmethod
    def _lock_customer(customer_id: int) -> Customer:
        try:
            return Customer.objects.select_for_update().get(pk=customer_id)
        except Customer.DoesNotExist:
            raise CustomerNotFoundError(
                detail=f"Customer with ID {customer_id} not found."
            )

    @staticmethod
    def _lock_transaction(transaction_id: int) -> Transaction:
        try:
            return Transaction.objects.select_for_update().get(pk=transaction_id)
        except Transaction.DoesNotExist:
            raise TransactionNotFoundError(
                detail=f"Transaction with ID {transaction_id} not found."
            )

    @classmethod
    @transaction.atomic
    def create_transaction(
        cls,
        customer_id: int,
        kind: str,
        amount: Decimal,
        txn_date: Optional[date] = None,
        status: Optional[str] = None,
        description: str = '',
        payment_method: str = PaymentMethod.CASH,
        notes: str = '',
    ) -> dict:
        """
        Record a transaction and move the customer's due accordingly.

        The customer row is locked before total_due is read, and the
        transaction insert and balance update commit together, so a
        failure leaves neither behind.

        Args:
            customer_id: Customer's primary key.
            kind: CREDIT, PAYMENT or ADJUSTMENT.
            amount: Transaction amount (> 0).
            txn_date: Business date, defaults to today.
            status: Initial status, defaults per kind. A credit may only
                start PENDING and nothing may start CANCELLED.

        Returns:
            Dict with the created transaction and the balances
            before and after.
        """
        kind = normalize_kind(kind)
        amount = to_amount(amount)
        initial_status = cls.initial_status(kind, status)
        customer = cls._lock_customer(customer_id)

        previous_balance = customer.total_due
        new_balance = apply_transaction(previous_balance, kind, amount)

        txn = Transaction.objects.create(
            customer=customer,
            kind=kind,
            amount=amount,
            date=txn_date or date.today(),
            status=initial_status,
            description=description,
            payment_method=payment_method,
            notes=notes,
        )

        customer.total_due = new_balance
        if customer.last_transaction_date is None or txn.date > customer.last_transaction_date:
            customer.last_transaction_date = txn.date
        customer.save(update_fields=['total_due', 'last_transaction_date', 'updated_at'])

        logger.info(
            "Transaction #%d (%s %s) recorded for customer %d: due %s -> %s",
            txn.pk,
            kind,
            amount,
            customer.pk,
            previous_balance,
            new_balance,
        )

        return {
            'transaction': txn,
            'previous_balance': previous_balance,
            'new_balance': new_balance,
        }

    @classmethod
    @transaction.atomic
    def mark_status(cls, transaction_id: int, new_status: str) -> dict:
        """
        Move a transaction out of PENDING and adjust the customer's due.

        Raises:
            TransactionNotFoundError: If the transaction does not exist.
            InvalidTransitionError: If the status is unchanged or the
                transaction is no longer pending.
        """
        new_status = normalize_status(new_status)
        txn = cls._lock_transaction(transaction_id)
        customer = cls._lock_customer(txn.customer_id)

        previous_balance = customer.total_due
        new_balance = transition_balance(
            previous_balance,
            txn.kind,
            txn.amount,
            txn.status,
            new_status,
        )

        old_status = txn.status
        txn.status = new_status
        txn.save(update_fields=['status', 'updated_at'])

        if new_balance != previous_balance:
            customer.total_due = new_balance
            customer.save(update_fields=['total_due', 'updated_at'])

        logger.info(
            "Transaction #%d %s -> %s for customer %d: due %s -> %s",
            txn.pk,
            old_status,
            new_status,
            customer.pk,
            previous_balance,
            new_balance,
        )

        return {
            'transaction': txn,
            'previous_balance': previous_balance,
            'new_balance': new_balance,
        }

    @classmethod
    @transaction.atomic
    def delete_transaction(cls, transaction_id: int) -> dict:
        """
        Delete a transaction and take its effect back out of the due.

        Returns:
            Dict with the customer id and the balances before and after.
        """
        txn = cls._lock_transaction(transaction_id)
        customer = cls._lock_customer(txn.customer_id)

        previous_balance = customer.total_due
        new_balance = reverse_transaction(
            previous_balance, txn.kind, txn.amount, txn.status,
        )

        txn_id = txn.pk
        txn.delete()

        customer.total_due = new_balance
        customer.last_transaction_date = customer.transactions.aggregate(
            latest=Max('date'),
        )['latest']
        customer.save(update_fields=['total_due', 'last_transaction_date', 'updated_at'])

        logger.info(
            "Transaction #%d deleted for customer %d: due %s -> %s",
            txn_id,
            customer.pk,
            previous_balance,
            new_balance,
        )

        return {
            'customer_id': customer.pk,
            'previous_balance': previous_balance,
            'new_balance': new_balance,
        }

    @staticmethod
    def get_transaction(transaction_id: int) -> Transaction:
        """
        Retrieve a single transaction by ID.

        Raises:
            TransactionNotFoundError: If transaction not found.
        """
        try:
            return Transaction.objects.get(pk=transaction_id)
        except Transaction.DoesNotExist:
            raise TransactionNotFoundError(
                detail=f"Transaction with ID {transaction_id} not found."
            )

    @staticmethod
    def list_transactions(
        customer_id: Optional[int] = None,
        kind: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ):
        """Return transactions matching every filter given, newest first."""
        transactions = Transaction.objects.all()
        if customer_id is not None:
            transactions = transactions.filter(customer_id=customer_id)
        if kind:
            transactions = transactions.filter(kind=kind)
        if status:
            transactions = transactions.filter(status=status)
        if start_date:
            transactions = transactions.filter(date__gte=start_date)
        if end_date:
            transactions = transactions.filter(date__lte=end_date)
        return transactions.order_by('-date', '-id')

    @classmethod
    def get_customer_transactions(cls, customer_id: int):
        """
        Retrieve all transactions for a customer, newest first.

        Raises:
            CustomerNotFoundError: If customer not found.
        """
        if not Customer.objects.filter(pk=customer_id).exists():
            raise CustomerNotFoundError(
                detail=f"Customer with ID {customer_id} not found."
            )
        return cls.list_transactions(customer_id=customer_id)

    @classmethod
    def get_pending_transactions(cls):
        return cls.list_transactions(status=TransactionStatus.PENDING)

    @staticmethod
    def report_filters() -> dict:
        """
        Filters for the shop's day-book reports. Cancelled entries never count.

        sales:  goods given out on credit plus money received.
        cash:   money received in cash.
        credit: goods given out on credit.
        """
        live = ~Q(status=TransactionStatus.CANCELLED)
        return {
            'sales': live & Q(kind__in=[TransactionKind.CREDIT, TransactionKind.PAYMENT]),
            'cash': live & Q(kind=TransactionKind.PAYMENT, payment_method=PaymentMethod.CASH),
            'credit': live & Q(kind=TransactionKind.CREDIT),
        }

    @classmethod
    def period_totals(cls, start_date: date, end_date: date) -> dict:
        """
        Sum the sales, cash and credit reports over an inclusive date range.

        Returns:
            Dict with the range and, per report, its total and count.
        """
        if start_date > end_date:
            raise ValidationError(detail="start_date must not be after end_date.")

        aggregates = {}
        for report, condition in cls.report_filters().items():
            aggregates[f'{report}_total'] = Sum('amount', filter=condition)
            aggregates[f'{report}_count'] = Count('id', filter=condition)

        totals = Transaction.objects.filter(
            date__gte=start_date,
            date__lte=end_date,
        ).aggregate(**aggregates)

        result = {'start_date': start_date, 'end_date': end_date}
        for report in cls.report_filters():
            result[report] = {
                'total': totals[f'{report}_total'] or Decimal('0.00'),
                'count': totals[f'{report}_count'],
            }

        logger.debug("Report totals %s..%s: %s", start_date, end_date, result)
        return result

    @classmethod
    def daily_totals(cls, day: date) -> dict:
        return cls.period_totals(day, day)

    @classmethod
    def report_transactions(cls, report: str, start_date: date, end_date: date):
        """
        Return the transactions behind one report, newest first.

        Raises:
            ValidationError: If the report name is unknown.
        """
        filters = cls.report_filters()
        if report not in filters:
            raise ValidationError(detail=f"Unknown report: {report}.")
        return cls.list_transactions(
            start_date=start_date, end_date=end_date,
        ).filter(filters[report])
