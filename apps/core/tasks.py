"""
Celery tasks for ledger maintenance.

Audits every customer's stored total_due against the due derived
from their transaction history, and optionally repairs drift.
"""

import logging

from celery import shared_task
from django.db import DatabaseError

from apps.core.exceptions import CustomerNotFoundError

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name='core.audit_customer_balances',
    max_retries=3,
    default_retry_delay=10,
)
def audit_customer_balances(self, repair=False):
    """
    Compare each customer's stored due with the due replayed from history.

    Drift is logged per customer. With repair=True the derived value
    is written back through CustomerService.reconcile().

    Running it again after a repair finds nothing to change.
    """
    from apps.customers.models import Customer
    from apps.customers.services import CustomerService

    try:
        logger.info("Starting balance audit (repair=%s)", repair)

        checked = 0
        drifted = []
        repaired_count = 0

        for customer_id in Customer.objects.order_by('id').values_list('pk', flat=True):
            try:
                if repair:
                    report = CustomerService.reconcile(customer_id)
                else:
                    report = CustomerService.check_balance(customer_id)
            except CustomerNotFoundError:
                logger.info("Customer %d deleted during audit, skipping", customer_id)
                continue
            checked += 1

            if report['drift']:
                drifted.append(customer_id)
                logger.warning(
                    "Customer %d balance drift: stored=%s derived=%s",
                    customer_id,
                    report['stored_total_due'],
                    report['derived_total_due'],
                )
            if report['repaired']:
                repaired_count += 1

        result = {
            'status': 'success',
            'checked': checked,
            'drifted': len(drifted),
            'repaired': repaired_count,
            'customers': drifted,
        }
        logger.info("Balance audit complete: %s", result)
        return result

    except DatabaseError as exc:
        logger.exception("Balance audit failed")
        raise self.retry(exc=exc)
