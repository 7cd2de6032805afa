import django_filters

from modules.orders.constants import OrderStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(field_name="status", choices=OrderStatus.choices)
    customer = django_filters.NumberFilter(field_name="customer_id")
    employee = django_filters.NumberFilter(field_name="employee_id")
    unassigned = django_filters.BooleanFilter(
        field_name="employee", lookup_expr="isnull"
    )
    start_date = django_filters.DateFilter(field_name="order_date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="order_date", lookup_expr="lte")
    min_total = django_filters.NumberFilter(
        field_name="total_amount", lookup_expr="gte"
    )
    max_total = django_filters.NumberFilter(
        field_name="total_amount", lookup_expr="lte"
    )

    class Meta:
        model = Order
        fields = [
            "status",
            "customer",
            "employee",
            "unassigned",
            "start_date",
            "end_date",
            "min_total",
            "max_total",
        ]
