"""
Transaction model for the Shop Ledger.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class TransactionKind(models.TextChoices):
    CREDIT = 'CREDIT', 'Credit'
    PAYMENT = 'PAYMENT', 'Payment'
    ADJUSTMENT = 'ADJUSTMENT', 'Adjustment'


class TransactionStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    PAID = 'PAID', 'Paid'
    COMPLETED = 'COMPLETED', 'Completed'
    CANCELLED = 'CANCELLED', 'Cancelled'


class PaymentMethod(models.TextChoices):
    CASH = 'CASH', 'Cash'
    UPI = 'UPI', 'UPI'
    CARD = 'CARD', 'Card'
    BANK_TRANSFER = 'BANK_TRANSFER', 'Bank transfer'
    CHEQUE = 'CHEQUE', 'Cheque'
    OTHER = 'OTHER', 'Other'


class Transaction(models.Model):
    """
    A single ledger entry recorded against one customer.

    Only the status may change after creation; every other field
    is fixed for the lifetime of the record.
    """

    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.CASCADE,
        related_name='transactions',
        db_index=True,
        help_text="The customer this entry is recorded against."
    )
    kind = models.CharField(
        max_length=20,
        choices=TransactionKind.choices,
        help_text="Credit raises the due; payment and adjustment lower it."
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    date = models.DateField(
        help_text="Business date the entry is recorded against."
    )
    status = models.CharField(
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING,
        db_index=True,
    )
    description = models.CharField(max_length=255, blank=True, default='')
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'transactions'
        ordering = ['-date', '-id']
        indexes = [
            models.Index(
                fields=['customer', 'status'],
                name='idx_txn_customer_status'
            ),
        ]

    def __str__(self):
        return (
            f"{self.get_kind_display()} #{self.pk} - Customer: {self.customer_id} "
            f"- Amount: {self.amount}"
        )

    @property
    def is_pending(self):
        return self.status == TransactionStatus.PENDING
