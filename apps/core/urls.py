"""
Core app URL configuration for dashboard and balance audit.
"""

from django.urls import path

from apps.core.views import DashboardSummaryView, TriggerAuditView

urlpatterns = [
    path(
        'dashboard/summary',
        DashboardSummaryView.as_view(),
        name='dashboard-summary',
    ),
    path(
        'audit-balances',
        TriggerAuditView.as_view(),
        name='audit-balances',
    ),
]
