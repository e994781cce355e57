"""
Customer service layer.

All customer-related business logic resides here.
Views delegate here and hold no business logic.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction

from apps.core.exceptions import CustomerNotFoundError, DuplicateMobileError
from apps.core.utils import replay_balance, to_due
from apps.customers.models import Customer

logger = logging.getLogger(__name__)

# Fields a client may change through update(); total_due is excluded.
EDITABLE_FIELDS = ('name', 'mobile', 'address', 'category', 'notes', 'is_active')


class CustomerService:
    """Service class for customer-related operations."""

    @staticmethod
    def create(validated_data: dict) -> Customer:
        """
        Register a new customer with a zero balance.

        Args:
            validated_data: Dict with name, mobile and optional
                address, category, notes, is_active.

        Returns:
            The newly created Customer instance.

        Raises:
            DuplicateMobileError: If the mobile number is taken.
        """
        mobile = validated_data['mobile']
        if Customer.objects.filter(mobile=mobile).exists():
            raise DuplicateMobileError(
                detail=f"A customer with mobile {mobile} already exists."
            )

        customer = Customer.objects.create(
            total_due=Decimal('0.00'),
            last_transaction_date=None,
            **{field: validated_data[field] for field in EDITABLE_FIELDS if field in validated_data},
        )

        logger.info(
            "Registered customer %s (ID: %d)",
            customer.name,
            customer.pk,
        )

        return customer

    @staticmethod
    def get_customer(customer_id: int) -> Customer:
        """
        Retrieve a customer by ID.

        Raises:
            CustomerNotFoundError: If customer not found.
        """
        try:
            return Customer.objects.get(pk=customer_id)
        except Customer.DoesNotExist:
            raise CustomerNotFoundError(
                detail=f"Customer with ID {customer_id} not found."
            )

    @staticmethod
    def list_customers(category: Optional[str] = None, active: Optional[bool] = None):
        """Return customers, optionally narrowed by category and active flag."""
        customers = Customer.objects.all()
        if category:
            customers = customers.filter(category=category)
        if active is not None:
            customers = customers.filter(is_active=active)
        return customers

    @classmethod
    def update(cls, customer_id: int, validated_data: dict) -> Customer:
        """
        Update a customer's descriptive fields.

        The due amount is never touched here; see set_total_due().

        Raises:
            CustomerNotFoundError: If customer not found.
            DuplicateMobileError: If the new mobile belongs to someone else.
        """
        customer = cls.get_customer(customer_id)

        mobile = validated_data.get('mobile')
        if mobile and Customer.objects.filter(mobile=mobile).exclude(pk=customer.pk).exists():
            raise DuplicateMobileError(
                detail=f"A customer with mobile {mobile} already exists."
            )

        changed = [field for field in EDITABLE_FIELDS if field in validated_data]
        for field in changed:
            setattr(customer, field, validated_data[field])

        if changed:
            customer.save(update_fields=changed + ['updated_at'])
            logger.info("Updated customer %d: %s", customer.pk, ', '.join(changed))

        return customer

    @classmethod
    def delete(cls, customer_id: int) -> None:
        """Delete a customer together with all of their transactions."""
        customer = cls.get_customer(customer_id)
        deleted, _ = customer.delete()
        logger.info(
            "Deleted customer %d (%d rows including transactions)",
            customer_id,
            deleted,
        )

    @staticmethod
    @transaction.atomic
    def set_total_due(customer_id: int, total_due) -> Customer:
        """
        Overwrite a customer's due amount directly.

        This bypasses the ledger, so the stored balance may no longer
        match the transaction history afterwards.
        """
        total_due = to_due(total_due)

        try:
            customer = Customer.objects.select_for_update().get(pk=customer_id)
        except Customer.DoesNotExist:
            raise CustomerNotFoundError(
                detail=f"Customer with ID {customer_id} not found."
            )

        previous = customer.total_due
        customer.total_due = total_due
        customer.save(update_fields=['total_due', 'updated_at'])

        logger.warning(
            "Customer %d total_due set directly: %s -> %s (bypasses ledger)",
            customer.pk,
            previous,
            total_due,
        )

        return customer

    @staticmethod
    def derive_total_due(customer: Customer) -> Decimal:
        """Replay the customer's transaction history, oldest first."""
        entries = customer.transactions.order_by('id').values_list(
            'kind', 'amount', 'status',
        )
        return replay_balance(entries)

    @classmethod
    def check_balance(cls, customer_id: int) -> dict:
        """Compare the stored due with the due derived from history."""
        customer = cls.get_customer(customer_id)
        derived = cls.derive_total_due(customer)
        return cls._build_balance_report(customer.pk, customer.total_due, derived, False)

    @classmethod
    @transaction.atomic
    def reconcile(cls, customer_id: int) -> dict:
        """
        Overwrite the stored due with the due derived from history.

        Returns:
            Dict with stored and derived balances, drift, and whether
            a write happened.
        """
        try:
            customer = Customer.objects.select_for_update().get(pk=customer_id)
        except Customer.DoesNotExist:
            raise CustomerNotFoundError(
                detail=f"Customer with ID {customer_id} not found."
            )

        stored = customer.total_due
        derived = cls.derive_total_due(customer)
        repaired = stored != derived

        if repaired:
            customer.total_due = derived
            customer.save(update_fields=['total_due', 'updated_at'])
            logger.warning(
                "Customer %d total_due repaired from history: %s -> %s",
                customer.pk,
                stored,
                derived,
            )

        return cls._build_balance_report(customer.pk, stored, derived, repaired)

    @staticmethod
    def _build_balance_report(customer_id, stored, derived, repaired) -> dict:
        return {
            'customer_id': customer_id,
            'stored_total_due': stored,
            'derived_total_due': derived,
            'drift': stored - derived,
            'repaired': repaired,
        }
