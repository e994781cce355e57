"""
Serializers for ledger-wide endpoints.
"""

from rest_framework import serializers

from apps.transactions.models import TransactionKind, TransactionStatus


class RecentTransactionSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    customer_id = serializers.IntegerField()
    customer_name = serializers.CharField()
    kind = serializers.ChoiceField(choices=TransactionKind.choices)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=TransactionStatus.choices)
    description = serializers.CharField(allow_blank=True)


class DashboardSummarySerializer(serializers.Serializer):
    """Serializer for the dashboard summary response."""

    total_customers = serializers.IntegerField()
    total_outstanding = serializers.DecimalField(max_digits=14, decimal_places=2)
    customers_with_outstanding = serializers.IntegerField()
    customers_fully_paid = serializers.IntegerField()
    total_transactions = serializers.IntegerField()
    pending_transactions = serializers.IntegerField()
    settled_transactions = serializers.IntegerField()
    cancelled_transactions = serializers.IntegerField()
    total_collected = serializers.DecimalField(max_digits=14, decimal_places=2)
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_start = serializers.DateField()
    month_credit = serializers.DecimalField(max_digits=14, decimal_places=2)
    month_payment = serializers.DecimalField(max_digits=14, decimal_places=2)
    recent_transactions = RecentTransactionSerializer(many=True)


class AuditRequestSerializer(serializers.Serializer):
    """Serializer for the balance audit trigger."""

    repair = serializers.BooleanField(required=False, default=False)
