import django_filters

from modules.sales.models import Sale


class SaleFilter(django_filters.FilterSet):
    user = django_filters.NumberFilter(field_name="user_id")
    order = django_filters.UUIDFilter(field_name="order_id")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Sale
        fields = ["user", "order", "start_date", "end_date"]
