"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single line item of a checkout request."""

    product_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=1)
    image = serializers.CharField(required=False, default="", allow_blank=True)


class AddressSerializer(serializers.Serializer):
    street = serializers.CharField(required=False, default="", allow_blank=True)
    number = serializers.CharField(required=False, default="", allow_blank=True)
    city = serializers.CharField(required=False, default="", allow_blank=True)
    region = serializers.CharField(required=False, default="", allow_blank=True)
    zip_code = serializers.CharField(required=False, default="", allow_blank=True)


class CustomerSnapshotSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, default="", allow_blank=True)
    phone = serializers.CharField(required=False, default="", allow_blank=True)
    address = AddressSerializer(required=False)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the checkout request payload.

    ``total`` is required and taken as given; it is not recomputed.
    """

    items = CreateOrderItemSerializer(many=True, allow_empty=False)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    subtotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    shipping_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    customer = CustomerSnapshotSerializer()
    payment_method = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=50
    )


class UpdateOrderStatusSerializer(serializers.Serializer):
    """Carries the requested status name; parsing happens in the service."""

    status = serializers.CharField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order line items (checkout snapshot)."""

    line_total = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "name",
            "unit_price",
            "quantity",
            "image",
            "line_total",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "changed_by",
            "changed_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    status_label = serializers.SerializerMethodField()
    customer = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "status",
            "status_label",
            "total",
            "subtotal",
            "shipping_cost",
            "discount",
            "payment_method",
            "customer",
            "created_at",
            "updated_at",
            "delivered_at",
            "version",
            "items",
            "status_history",
        ]
        read_only_fields = fields

    def get_status_label(self, obj: Order) -> str:
        return OrderStatus(obj.status).label

    def get_customer(self, obj: Order) -> dict:
        return {
            "name": obj.customer_name,
            "email": obj.customer_email,
            "phone": obj.customer_phone,
            "address": obj.shipping_address,
        }


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "status",
            "total",
            "customer_name",
            "created_at",
            "delivered_at",
        ]
        read_only_fields = fields
