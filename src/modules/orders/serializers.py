"""Order DRF serializers (read side of the order screens).

Status changes carry no request body: the order id and the screen the
request came from are all the service needs.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """Order line with product and variation display fields."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)
    variation_name = serializers.CharField(
        source="variation.name", read_only=True, default=None
    )
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "product_sku",
            "variation_id",
            "variation_name",
            "quantity",
            "price_at_purchase",
            "subtotal",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order row as shown on a status screen, items nested."""

    customer_name = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "customer_name",
            "status",
            "total_amount",
            "delivery_type",
            "payment_status",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields

    def get_customer_name(self, obj: Order) -> str:
        customer = obj.customer
        return customer.get_full_name() or customer.get_username()
