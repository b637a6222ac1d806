import django_filters

from .models import Expense, InputEntry, Investment


class LogFilter(django_filters.FilterSet):
    """Owner and date range filters shared by the monitoring endpoints

    ``date_field`` names the date the range applies to; timestamps are
    compared on their local date.
    """
    user = django_filters.NumberFilter(field_name='user_id', lookup_expr='exact')
    date_from = django_filters.DateFilter(method='filter_date_from', label='From date')
    date_to = django_filters.DateFilter(method='filter_date_to', label='To date')

    date_field = 'created_at__date'

    def filter_date_from(self, queryset, name, value):
        return queryset.filter(**{f'{self.date_field}__gte': value})

    def filter_date_to(self, queryset, name, value):
        return queryset.filter(**{f'{self.date_field}__lte': value})


class ExpenseFilter(LogFilter):
    date_field = 'expense_date'

    class Meta:
        model = Expense
        fields = ['user', 'date_from', 'date_to']


class InputEntryFilter(LogFilter):
    class Meta:
        model = InputEntry
        fields = ['user', 'date_from', 'date_to']


class InvestmentFilter(LogFilter):
    class Meta:
        model = Investment
        fields = ['user', 'date_from', 'date_to']
