"""Sale API views (staff only, read-only).

Sales are created by the order lifecycle, never through this API.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.sales.filters import SaleFilter
from modules.sales.models import Sale
from modules.sales.repositories.django_repository import SaleDjangoRepository
from modules.sales.serializers import SaleSerializer, SalesReportQuerySerializer
from modules.sales.services import SaleService


class SaleViewSet(GenericViewSet):
    """Listing, detail and period report for recorded sales."""

    queryset = Sale.objects.all()
    permission_classes = [IsAuthenticated, IsAdminUser]
    filterset_class = SaleFilter
    ordering_fields = ["created_at", "total"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = SaleService(SaleDjangoRepository())

    def get_queryset(self):
        return SaleDjangoRepository().queryset()

    def list(self, request: Request) -> Response:
        """GET /api/v1/sales/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = SaleSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/sales/{pk}/"""
        sale = self._service.get_sale(pk)
        return Response(SaleSerializer(sale).data)

    @action(detail=False, methods=["get"])
    def report(self, request: Request) -> Response:
        """GET /api/v1/sales/report/?start=YYYY-MM-DD&end=YYYY-MM-DD"""
        query = SalesReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        start, end = query.window()
        report = self._service.sales_report(start, end)
        return Response(report.model_dump(mode="json"))
