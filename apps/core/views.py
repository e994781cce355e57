"""
Core views for the Shop Ledger.
"""

import logging

from django.http import JsonResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.serializers import AuditRequestSerializer, DashboardSummarySerializer
from apps.core.services import DashboardService
from apps.core.tasks import audit_customer_balances

logger = logging.getLogger(__name__)


def health_check(request):
    """
    GET /health/

    Simple health check endpoint for Docker and load balancer checks.
    Exempt from API key authentication.
    """
    return JsonResponse({'status': 'healthy'}, status=200)


class DashboardSummaryView(APIView):
    """
    GET /api/dashboard/summary

    Ledger-wide totals for the shop's overview screen.
    """

    def get(self, request):
        result = DashboardService.summary()

        response_serializer = DashboardSummarySerializer(data=result)
        response_serializer.is_valid(raise_exception=True)

        return Response(response_serializer.validated_data, status=status.HTTP_200_OK)


class TriggerAuditView(APIView):
    """
    POST /api/audit-balances

    Queue a background audit of every customer's balance against
    their transaction history.
    """

    def post(self, request):
        """Trigger the balance audit task."""
        serializer = AuditRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        repair = serializer.validated_data['repair']

        task = audit_customer_balances.delay(repair=repair)

        logger.info("Balance audit triggered: task=%s, repair=%s", task.id, repair)

        return Response(
            {
                'message': 'Balance audit has been queued.',
                'task_id': task.id,
                'repair': repair,
            },
            status=status.HTTP_202_ACCEPTED,
        )
