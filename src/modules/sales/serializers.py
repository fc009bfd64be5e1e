"""Sale DRF serializers (read-only) and the report query serializer."""

from __future__ import annotations

from datetime import datetime, time

from django.utils import timezone
from rest_framework import serializers

from modules.sales.models import Sale, SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleItem
        fields = ["id", "product_id", "name", "unit_price", "quantity", "image"]
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    """Read serializer for sales with nested items."""

    customer = serializers.SerializerMethodField()
    items = SaleItemSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "order_id",
            "user_id",
            "total",
            "subtotal",
            "discount",
            "payment_method",
            "customer",
            "status",
            "created_at",
            "delivered_at",
            "items",
        ]
        read_only_fields = fields

    def get_customer(self, obj: Sale) -> dict:
        return {
            "name": obj.customer_name,
            "email": obj.customer_email,
            "phone": obj.customer_phone,
            "address": obj.shipping_address,
        }


class SalesReportQuerySerializer(serializers.Serializer):
    """``?start=YYYY-MM-DD&end=YYYY-MM-DD``, both days inclusive."""

    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):
        if attrs["start"] > attrs["end"]:
            raise serializers.ValidationError(
                {"end": "End date must not be before start date."}
            )
        return attrs

    def window(self) -> tuple[datetime, datetime]:
        """The validated range as aware datetimes covering whole days."""
        data = self.validated_data
        return (
            timezone.make_aware(datetime.combine(data["start"], time.min)),
            timezone.make_aware(datetime.combine(data["end"], time.max)),
        )
