"""
Customer views for the Shop Ledger.

Views are thin; the ledger rules live in the service layer.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.customers.serializers import (
    BalanceCheckResponseSerializer,
    CustomerInputSerializer,
    CustomerResponseSerializer,
    SetTotalDueSerializer,
    customer_to_dict,
)
from apps.customers.services import CustomerService

logger = logging.getLogger(__name__)


def _customer_response(customer, http_status=status.HTTP_200_OK):
    response_serializer = CustomerResponseSerializer(data=customer_to_dict(customer))
    response_serializer.is_valid(raise_exception=True)
    return Response(response_serializer.validated_data, status=http_status)


class CustomerListView(APIView):
    """
    GET  /api/customers
    POST /api/customers

    List customers or register a new one.
    """

    def get(self, request):
        """Handle listing customers."""
        active = request.query_params.get('active')
        if active is not None:
            active = active.lower() in ('true', '1', 'yes')

        customers = CustomerService.list_customers(
            category=request.query_params.get('category'),
            active=active,
        )

        serializer = CustomerResponseSerializer(
            data=[customer_to_dict(customer) for customer in customers],
            many=True,
        )
        serializer.is_valid(raise_exception=True)

        return Response(serializer.validated_data, status=status.HTTP_200_OK)

    def post(self, request):
        """Handle customer registration."""
        serializer = CustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        customer = CustomerService.create(serializer.validated_data)

        return _customer_response(customer, status.HTTP_201_CREATED)


class CustomerDetailView(APIView):
    """
    GET    /api/customers/<customer_id>
    PUT    /api/customers/<customer_id>
    PATCH  /api/customers/<customer_id>
    DELETE /api/customers/<customer_id>
    """

    def get(self, request, customer_id):
        customer = CustomerService.get_customer(customer_id)
        return _customer_response(customer)

    def put(self, request, customer_id):
        serializer = CustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        customer = CustomerService.update(customer_id, serializer.validated_data)
        return _customer_response(customer)

    def patch(self, request, customer_id):
        serializer = CustomerInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        customer = CustomerService.update(customer_id, serializer.validated_data)
        return _customer_response(customer)

    def delete(self, request, customer_id):
        CustomerService.delete(customer_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CustomerTotalDueView(APIView):
    """
    PUT /api/customers/<customer_id>/total-due

    Overwrite the customer's due amount without recording a transaction.
    """

    def put(self, request, customer_id):
        serializer = SetTotalDueSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        customer = CustomerService.set_total_due(
            customer_id,
            serializer.validated_data['total_due'],
        )
        return _customer_response(customer)


class CustomerReconcileView(APIView):
    """
    GET  /api/customers/<customer_id>/reconcile
    POST /api/customers/<customer_id>/reconcile

    GET compares the stored due with the due derived from history;
    POST also stores the derived value.
    """

    def get(self, request, customer_id):
        return self._respond(CustomerService.check_balance(customer_id))

    def post(self, request, customer_id):
        return self._respond(CustomerService.reconcile(customer_id))

    @staticmethod
    def _respond(result):
        response_serializer = BalanceCheckResponseSerializer(data=result)
        response_serializer.is_valid(raise_exception=True)
        return Response(response_serializer.validated_data, status=status.HTTP_200_OK)
