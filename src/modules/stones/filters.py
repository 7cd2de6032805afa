import django_filters

from modules.stones.models import Stone


class StoneFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    stone_type = django_filters.CharFilter(
        field_name="stone_type", lookup_expr="iexact"
    )
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")
    min_price = django_filters.NumberFilter(field_name="unit_price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="unit_price", lookup_expr="lte")

    class Meta:
        model = Stone
        fields = ["name", "stone_type", "in_stock", "min_price", "max_price"]

    def filter_in_stock(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.filter(quantity_in_stock__gt=0)
        return queryset.filter(quantity_in_stock=0)
