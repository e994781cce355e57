"""
Dashboard service.

Aggregates over every customer and transaction for the shop's
overview screen. Read-only.
"""

import logging
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db.models import Count, Q, Sum

from apps.core.utils import DECREASING_KINDS, SETTLED_STATUSES
from apps.customers.models import Customer
from apps.transactions.models import Transaction, TransactionKind, TransactionStatus

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


class DashboardService:
    """Service for ledger-wide summary figures."""

    @classmethod
    def summary(cls, today: date = None) -> dict:
        """
        Build the dashboard summary.

        Returns:
            Dict with customer counts, outstanding and collected totals,
            transaction counts by status, this month's credit and
            payment totals, and the most recent transactions.
        """
        today = today or date.today()

        customer_totals = Customer.objects.aggregate(
            total_customers=Count('id'),
            total_outstanding=Sum('total_due'),
            with_outstanding=Count('id', filter=Q(total_due__gt=0)),
            fully_paid=Count('id', filter=Q(total_due=0)),
        )

        transaction_totals = Transaction.objects.aggregate(
            total_transactions=Count('id'),
            pending_transactions=Count(
                'id', filter=Q(status=TransactionStatus.PENDING),
            ),
            settled_transactions=Count(
                'id', filter=Q(status__in=SETTLED_STATUSES),
            ),
            cancelled_transactions=Count(
                'id', filter=Q(status=TransactionStatus.CANCELLED),
            ),
            total_collected=Sum('amount', filter=Q(status__in=SETTLED_STATUSES)),
            pending_amount=Sum(
                'amount',
                filter=Q(status=TransactionStatus.PENDING, kind=TransactionKind.CREDIT),
            ),
        )

        month_start = today + relativedelta(day=1)
        next_month_start = month_start + relativedelta(months=1)
        this_month = Transaction.objects.filter(
            date__gte=month_start,
            date__lt=next_month_start,
        ).aggregate(
            credit=Sum('amount', filter=Q(kind=TransactionKind.CREDIT)),
            payment=Sum('amount', filter=Q(kind__in=DECREASING_KINDS)),
        )

        recent_limit = getattr(settings, 'LEDGER_RECENT_TRANSACTIONS', 5)
        recent = Transaction.objects.select_related('customer').order_by(
            '-date', '-id',
        )[:recent_limit]

        result = {
            'total_customers': customer_totals['total_customers'],
            'total_outstanding': customer_totals['total_outstanding'] or ZERO,
            'customers_with_outstanding': customer_totals['with_outstanding'],
            'customers_fully_paid': customer_totals['fully_paid'],
            'total_transactions': transaction_totals['total_transactions'],
            'pending_transactions': transaction_totals['pending_transactions'],
            'settled_transactions': transaction_totals['settled_transactions'],
            'cancelled_transactions': transaction_totals['cancelled_transactions'],
            'total_collected': transaction_totals['total_collected'] or ZERO,
            'pending_amount': transaction_totals['pending_amount'] or ZERO,
            'month_start': month_start,
            'month_credit': this_month['credit'] or ZERO,
            'month_payment': this_month['payment'] or ZERO,
            'recent_transactions': [
                {
                    'id': txn.pk,
                    'customer_id': txn.customer_id,
                    'customer_name': txn.customer.name,
                    'kind': txn.kind,
                    'amount': txn.amount,
                    'date': txn.date,
                    'status': txn.status,
                    'description': txn.description,
                }
                for txn in recent
            ],
        }

        logger.debug(
            "Dashboard summary: %d customers, outstanding=%s",
            result['total_customers'],
            result['total_outstanding'],
        )

        return result
