"""
Transaction URL configuration.
"""

from django.urls import path

from apps.transactions.views import (
    DailyReportView,
    DailyTotalsView,
    MarkStatusView,
    PendingTransactionsView,
    PeriodReportView,
    PeriodTotalsView,
    TransactionDetailView,
    TransactionListView,
)

urlpatterns = [
    path('transactions', TransactionListView.as_view(), name='transaction-list'),
    path(
        'transactions/pending',
        PendingTransactionsView.as_view(),
        name='transaction-pending',
    ),
    path('transactions/daily', DailyTotalsView.as_view(), name='transaction-daily'),
    path(
        'transactions/daily/<str:report>',
        DailyReportView.as_view(),
        name='transaction-daily-report',
    ),
    path('transactions/period', PeriodTotalsView.as_view(), name='transaction-period'),
    path(
        'transactions/period/<str:report>',
        PeriodReportView.as_view(),
        name='transaction-period-report',
    ),
    path(
        'transactions/<int:transaction_id>',
        TransactionDetailView.as_view(),
        name='transaction-detail',
    ),
    path(
        'transactions/<int:transaction_id>/mark-status',
        MarkStatusView.as_view(),
        name='transaction-mark-status',
    ),
]
