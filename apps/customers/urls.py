"""
Customer URL configuration.
"""

from django.urls import path

from apps.customers.views import (
    CustomerDetailView,
    CustomerListView,
    CustomerReconcileView,
    CustomerTotalDueView,
)
from apps.transactions.views import CustomerTransactionsView

urlpatterns = [
    path('customers', CustomerListView.as_view(), name='customer-list'),
    path(
        'customers/<int:customer_id>',
        CustomerDetailView.as_view(),
        name='customer-detail',
    ),
    path(
        'customers/<int:customer_id>/total-due',
        CustomerTotalDueView.as_view(),
        name='customer-total-due',
    ),
    path(
        'customers/<int:customer_id>/reconcile',
        CustomerReconcileView.as_view(),
        name='customer-reconcile',
    ),
    path(
        'customers/<int:customer_id>/transactions',
        CustomerTransactionsView.as_view(),
        name='customer-transactions',
    ),
]
