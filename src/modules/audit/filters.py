import django_filters
from django.db.models import Q

from modules.accounts.constants import Role
from modules.audit.constants import AuditAction
from modules.audit.models import ActivityLog


class ActivityLogFilter(django_filters.FilterSet):
    action = django_filters.ChoiceFilter(choices=AuditAction.choices)
    table = django_filters.CharFilter(field_name="table_affected", lookup_expr="iexact")
    role = django_filters.ChoiceFilter(field_name="actor_role", choices=Role.choices)
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = ActivityLog
        fields = ["action", "table", "role", "start_date", "end_date", "search"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(description__icontains=value) | Q(record_id__iexact=value)
        )
