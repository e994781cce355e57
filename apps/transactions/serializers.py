"""
Transaction serializers for the Shop Ledger.
"""

from datetime import date
from decimal import Decimal

from rest_framework import serializers

from apps.transactions.models import PaymentMethod, TransactionKind, TransactionStatus


class RecordTransactionSerializer(serializers.Serializer):
    """Serializer for a transaction recorded against a known customer."""

    kind = serializers.ChoiceField(
        choices=TransactionKind.choices,
        required=True,
        help_text="CREDIT, PAYMENT or ADJUSTMENT.",
    )
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
        required=True,
        help_text="Transaction amount (must be > 0).",
    )
    date = serializers.DateField(
        required=False,
        default=date.today,
        help_text="Business date, defaults to today.",
    )
    status = serializers.ChoiceField(
        choices=TransactionStatus.choices,
        required=False,
        allow_null=True,
        default=None,
        help_text="Initial status; credits always start PENDING.",
    )
    description = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default='',
    )
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices,
        required=False,
        default=PaymentMethod.CASH,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class CreateTransactionSerializer(RecordTransactionSerializer):
    """Serializer for transaction creation request."""

    customer_id = serializers.IntegerField(
        min_value=1,
        required=True,
        help_text="Customer's ID.",
    )


class MarkStatusSerializer(serializers.Serializer):
    """Serializer for a status change request."""

    status = serializers.ChoiceField(
        choices=TransactionStatus.choices,
        required=True,
    )


class TransactionResponseSerializer(serializers.Serializer):
    """Serializer for a single transaction in responses."""

    id = serializers.IntegerField()
    customer_id = serializers.IntegerField()
    kind = serializers.ChoiceField(choices=TransactionKind.choices)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=TransactionStatus.choices)
    description = serializers.CharField(allow_blank=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)
    notes = serializers.CharField(allow_blank=True)


class BalanceChangeResponseSerializer(serializers.Serializer):
    """Serializer for responses of operations that move a customer's due."""

    transaction = TransactionResponseSerializer()
    previous_balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    new_balance = serializers.DecimalField(max_digits=12, decimal_places=2)


def transaction_to_dict(txn) -> dict:
    """Flatten a Transaction instance into a response dict."""
    return {
        'id': txn.pk,
        'customer_id': txn.customer_id,
        'kind': txn.kind,
        'amount': txn.amount,
        'date': txn.date,
        'status': txn.status,
        'description': txn.description,
        'payment_method': txn.payment_method,
        'notes': txn.notes,
    }


REPORT_CHOICES = ('sales', 'cash', 'credit')


class DailyReportQuerySerializer(serializers.Serializer):
    """Query parameters for a single day's report."""

    date = serializers.DateField(required=False, default=date.today)


class PeriodReportQuerySerializer(serializers.Serializer):
    """Query parameters for a report over a date range."""

    start_date = serializers.DateField(required=True)
    end_date = serializers.DateField(required=True)

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError("start_date must not be after end_date.")
        return attrs


class ReportTotalSerializer(serializers.Serializer):
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()


class ReportTotalsResponseSerializer(serializers.Serializer):
    """Serializer for the sales, cash and credit totals of a date range."""

    start_date = serializers.DateField()
    end_date = serializers.DateField()
    sales = ReportTotalSerializer()
    cash = ReportTotalSerializer()
    credit = ReportTotalSerializer()


class ReportResponseSerializer(serializers.Serializer):
    """Serializer for one report with the transactions behind it."""

    report = serializers.ChoiceField(choices=REPORT_CHOICES)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()
    transactions = TransactionResponseSerializer(many=True)
