"""
Customer model for the Shop Ledger.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Customer(models.Model):
    """
    Represents a customer who buys from the shop on credit.

    total_due is maintained incrementally by the ledger service
    every time a transaction is recorded, settled or deleted.
    """

    name = models.CharField(
        max_length=150,
        help_text="Customer's display name."
    )
    mobile = models.CharField(
        max_length=15,
        unique=True,
        help_text="Customer's mobile number (unique per shop)."
    )
    address = models.TextField(blank=True, default='')
    category = models.CharField(
        max_length=50,
        default='Regular',
        help_text="Free-form customer grouping, e.g. Regular or Wholesale."
    )
    notes = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)
    total_due = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Outstanding amount the customer owes the shop.",
    )
    last_transaction_date = models.DateField(
        null=True,
        blank=True,
        help_text="Date of the most recently recorded transaction."
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['name', 'id']

    def __str__(self):
        return f"{self.name} ({self.mobile})"

    @property
    def has_outstanding(self):
        """True when the customer still owes money."""
        return self.total_due > 0
