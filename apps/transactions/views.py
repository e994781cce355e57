"""
Transaction views for the Shop Ledger.

Views are thin; the ledger rules live in the service layer.
"""

import logging

from rest_framework import serializers, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.transactions.models import TransactionKind, TransactionStatus
from apps.transactions.serializers import (
    BalanceChangeResponseSerializer,
    CreateTransactionSerializer,
    DailyReportQuerySerializer,
    MarkStatusSerializer,
    PeriodReportQuerySerializer,
    RecordTransactionSerializer,
    ReportResponseSerializer,
    ReportTotalsResponseSerializer,
    TransactionResponseSerializer,
    transaction_to_dict,
)
from apps.transactions.services import LedgerService

logger = logging.getLogger(__name__)


class TransactionPagination(PageNumberPagination):
    """Pagination for transaction lists."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class TransactionFilterSerializer(serializers.Serializer):
    """Query parameters accepted by the transaction list."""

    customer_id = serializers.IntegerField(min_value=1, required=False)
    kind = serializers.ChoiceField(choices=TransactionKind.choices, required=False)
    status = serializers.ChoiceField(choices=TransactionStatus.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError("start_date must not be after end_date.")
        return attrs


def _paginated_transactions(request, transactions):
    paginator = TransactionPagination()
    page = paginator.paginate_queryset(transactions, request)

    serializer = TransactionResponseSerializer(
        data=[transaction_to_dict(txn) for txn in page],
        many=True,
    )
    serializer.is_valid(raise_exception=True)

    return paginator.get_paginated_response(serializer.validated_data)


def _balance_change_response(result, http_status):
    response_serializer = BalanceChangeResponseSerializer(data={
        'transaction': transaction_to_dict(result['transaction']),
        'previous_balance': result['previous_balance'],
        'new_balance': result['new_balance'],
    })
    response_serializer.is_valid(raise_exception=True)
    return Response(response_serializer.validated_data, status=http_status)


def _record(customer_id, validated_data):
    return LedgerService.create_transaction(
        customer_id=customer_id,
        kind=validated_data['kind'],
        amount=validated_data['amount'],
        txn_date=validated_data.get('date'),
        status=validated_data.get('status'),
        description=validated_data.get('description', ''),
        payment_method=validated_data['payment_method'],
        notes=validated_data.get('notes', ''),
    )


class TransactionListView(APIView):
    """
    GET  /api/transactions
    POST /api/transactions

    List transactions (filterable by customer_id, kind, status,
    start_date, end_date) or record a new one.
    """

    def get(self, request):
        """Handle listing transactions."""
        filters = TransactionFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        transactions = LedgerService.list_transactions(**filters.validated_data)
        return _paginated_transactions(request, transactions)

    def post(self, request):
        """Handle transaction creation."""
        serializer = CreateTransactionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = _record(
            serializer.validated_data['customer_id'],
            serializer.validated_data,
        )
        return _balance_change_response(result, status.HTTP_201_CREATED)


class CustomerTransactionsView(APIView):
    """
    GET  /api/customers/<customer_id>/transactions
    POST /api/customers/<customer_id>/transactions

    View a customer's history, with pagination, or record a
    transaction against that customer.
    """

    def get(self, request, customer_id):
        transactions = LedgerService.get_customer_transactions(customer_id)
        return _paginated_transactions(request, transactions)

    def post(self, request, customer_id):
        serializer = RecordTransactionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = _record(customer_id, serializer.validated_data)
        return _balance_change_response(result, status.HTTP_201_CREATED)


class PendingTransactionsView(APIView):
    """
    GET /api/transactions/pending

    View every transaction still awaiting settlement.
    """

    def get(self, request):
        return _paginated_transactions(
            request, LedgerService.get_pending_transactions(),
        )


class TransactionDetailView(APIView):
    """
    GET    /api/transactions/<transaction_id>
    DELETE /api/transactions/<transaction_id>
    """

    def get(self, request, transaction_id):
        txn = LedgerService.get_transaction(transaction_id)

        response_serializer = TransactionResponseSerializer(data=transaction_to_dict(txn))
        response_serializer.is_valid(raise_exception=True)

        return Response(response_serializer.validated_data, status=status.HTTP_200_OK)

    def delete(self, request, transaction_id):
        LedgerService.delete_transaction(transaction_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MarkStatusView(APIView):
    """
    POST /api/transactions/<transaction_id>/mark-status

    Settle or cancel a pending transaction.
    """

    def post(self, request, transaction_id):
        serializer = MarkStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = LedgerService.mark_status(
            transaction_id,
            serializer.validated_data['status'],
        )
        return _balance_change_response(result, status.HTTP_200_OK)


def _totals_response(totals):
    response_serializer = ReportTotalsResponseSerializer(data=totals)
    response_serializer.is_valid(raise_exception=True)
    return Response(response_serializer.validated_data, status=status.HTTP_200_OK)


def _report_response(report, start_date, end_date):
    transactions = LedgerService.report_transactions(report, start_date, end_date)
    totals = LedgerService.period_totals(start_date, end_date)[report]

    response_serializer = ReportResponseSerializer(data={
        'report': report,
        'start_date': start_date,
        'end_date': end_date,
        'total': totals['total'],
        'count': totals['count'],
        'transactions': [transaction_to_dict(txn) for txn in transactions],
    })
    response_serializer.is_valid(raise_exception=True)
    return Response(response_serializer.validated_data, status=status.HTTP_200_OK)


class DailyTotalsView(APIView):
    """
    GET /api/transactions/daily?date=YYYY-MM-DD

    Sales, cash and credit totals for one day (default today).
    """

    def get(self, request):
        query = DailyReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return _totals_response(LedgerService.daily_totals(query.validated_data['date']))


class DailyReportView(APIView):
    """
    GET /api/transactions/daily/<report>?date=YYYY-MM-DD

    One day's sales, cash or credit report with its transactions.
    """

    def get(self, request, report):
        query = DailyReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        day = query.validated_data['date']
        return _report_response(report, day, day)


class PeriodTotalsView(APIView):
    """
    GET /api/transactions/period?start_date=...&end_date=...
    """

    def get(self, request):
        query = PeriodReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return _totals_response(LedgerService.period_totals(
            query.validated_data['start_date'],
            query.validated_data['end_date'],
        ))


class PeriodReportView(APIView):
    """
    GET /api/transactions/period/<report>?start_date=...&end_date=...

    Sales, cash or credit report over an inclusive date range.
    """

    def get(self, request, report):
        query = PeriodReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return _report_response(
            report,
            query.validated_data['start_date'],
            query.validated_data['end_date'],
        )
