import django_filters

from modules.orders.constants import OrderStatus, TransitPhase
from modules.orders.models import Order
from shared.domain.limits import POSITIVE_BIGINT_MAX


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    transit_phase = django_filters.ChoiceFilter(choices=TransitPhase.choices)
    buyer = django_filters.CharFilter(field_name="buyer")
    herder = django_filters.NumberFilter(
        field_name="herder_id", min_value=0, max_value=POSITIVE_BIGINT_MAX
    )
    transporter = django_filters.NumberFilter(
        field_name="transporter_id", min_value=0, max_value=POSITIVE_BIGINT_MAX
    )
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = [
            "status",
            "transit_phase",
            "buyer",
            "herder",
            "transporter",
            "start_date",
            "end_date",
        ]
