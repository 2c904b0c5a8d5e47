import django_filters

from modules.orders.constants import DeliveryType, PaymentStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """Narrowing filters for a status screen (status itself comes from the URL)."""

    delivery_type = django_filters.ChoiceFilter(choices=DeliveryType.choices)
    payment_status = django_filters.ChoiceFilter(choices=PaymentStatus.choices)
    customer = django_filters.NumberFilter(field_name="customer_id")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(
        field_name="total_amount", lookup_expr="gte"
    )
    max_total = django_filters.NumberFilter(
        field_name="total_amount", lookup_expr="lte"
    )

    class Meta:
        model = Order
        fields = [
            "delivery_type",
            "payment_status",
            "customer",
            "start_date",
            "end_date",
            "min_total",
            "max_total",
        ]
