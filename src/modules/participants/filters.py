import django_filters

from modules.participants.models import Herder, Slaughterhouse, Transporter
from shared.domain.limits import POSITIVE_INT_MAX


class _ProfileFilter(django_filters.FilterSet):
    location = django_filters.CharFilter(field_name="location", lookup_expr="icontains")
    registered = django_filters.BooleanFilter(field_name="registered")


class HerderFilter(_ProfileFilter):
    min_livestock = django_filters.NumberFilter(
        field_name="total_livestock", lookup_expr="gte", min_value=0, max_value=POSITIVE_INT_MAX
    )

    class Meta:
        model = Herder
        fields = ["location", "registered", "min_livestock"]


class SlaughterhouseFilter(_ProfileFilter):
    class Meta:
        model = Slaughterhouse
        fields = ["location", "registered"]


class TransporterFilter(_ProfileFilter):
    class Meta:
        model = Transporter
        fields = ["location", "registered"]
