"""
Customer serializers for the Shop Ledger.
"""

from decimal import Decimal

from rest_framework import serializers


class CustomerInputSerializer(serializers.Serializer):
    """Serializer for customer create and update requests."""

    name = serializers.CharField(
        max_length=150,
        required=True,
        help_text="Customer's display name.",
    )
    mobile = serializers.CharField(
        max_length=15,
        required=True,
        help_text="Customer's mobile number.",
    )
    address = serializers.CharField(required=False, allow_blank=True, default='')
    category = serializers.CharField(max_length=50, required=False, default='Regular')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    is_active = serializers.BooleanField(required=False, default=True)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be blank.")
        return value

    def validate_mobile(self, value):
        """Validate mobile is 7-15 digits, optionally prefixed with +."""
        value = value.strip().replace(' ', '')
        digits = value[1:] if value.startswith('+') else value
        if not digits.isdigit() or not 7 <= len(digits) <= 15:
            raise serializers.ValidationError(
                "Mobile number must contain 7 to 15 digits."
            )
        return value


class SetTotalDueSerializer(serializers.Serializer):
    """Serializer for a direct write of a customer's total due."""

    total_due = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0'),
        required=True,
    )


class CustomerResponseSerializer(serializers.Serializer):
    """Serializer for customer responses."""

    id = serializers.IntegerField()
    name = serializers.CharField()
    mobile = serializers.CharField()
    address = serializers.CharField(allow_blank=True)
    category = serializers.CharField(allow_blank=True)
    notes = serializers.CharField(allow_blank=True)
    is_active = serializers.BooleanField()
    total_due = serializers.DecimalField(max_digits=12, decimal_places=2)
    last_transaction_date = serializers.DateField(allow_null=True)


class BalanceCheckResponseSerializer(serializers.Serializer):
    """Serializer for stored-vs-derived balance comparison."""

    customer_id = serializers.IntegerField()
    stored_total_due = serializers.DecimalField(max_digits=12, decimal_places=2)
    derived_total_due = serializers.DecimalField(max_digits=12, decimal_places=2)
    drift = serializers.DecimalField(max_digits=12, decimal_places=2)
    repaired = serializers.BooleanField()


def customer_to_dict(customer) -> dict:
    """Flatten a Customer instance into a response dict."""
    return {
        'id': customer.pk,
        'name': customer.name,
        'mobile': customer.mobile,
        'address': customer.address,
        'category': customer.category,
        'notes': customer.notes,
        'is_active': customer.is_active,
        'total_due': customer.total_due,
        'last_transaction_date': customer.last_transaction_date,
    }
