import logging
import math
from datetime import datetime, time

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from dailishaw.core.models import User, Role
from dailishaw.core.permissions import IsAdminRole
from dailishaw.ledger.models import Expense

logger = logging.getLogger(__name__)

RECENT_PER_SOURCE = 3
RECENT_ACTIVITY_LIMIT = 4


def month_start(day, months_back=0):
    """First day of the month ``months_back`` months before ``day``'s month"""
    month_index = day.year * 12 + (day.month - 1) - months_back
    return day.replace(year=month_index // 12, month=month_index % 12 + 1, day=1)


def growth_percent(current, previous, when_new=100):
    """Percent change rounded half up; ``when_new`` if there was nothing before"""
    if previous > 0:
        return math.floor(float(current - previous) / float(previous) * 100 + 0.5)
    if current > 0:
        return when_new
    return 0


def _aware(day):
    return timezone.make_aware(datetime.combine(day, time.min))


def recent_activities(limit=RECENT_ACTIVITY_LIMIT):
    """Newest field users and expenses merged, newest first"""
    activities = []
    for user in User.objects.filter(role=Role.USER).order_by('-created_at')[:RECENT_PER_SOURCE]:
        activities.append({
            'id': f'user-{user.pk}',
            'type': 'user_created',
            'user_name': user.username,
            'timestamp': user.created_at,
        })
    for expense in Expense.objects.select_related('user').order_by('-created_at')[:RECENT_PER_SOURCE]:
        activities.append({
            'id': f'expense-{expense.pk}',
            'type': 'expense_submitted',
            'user_id': expense.user_id,
            'user_name': expense.user.display_name or expense.user.username,
            'amount': str(expense.total),
            'timestamp': expense.created_at,
        })
    activities.sort(key=lambda activity: activity['timestamp'], reverse=True)
    return activities[:limit]


@api_view(['GET'])
@permission_classes([IsAdminRole])
def dashboard_stats(request):
    """Headline numbers for the admin dashboard"""
    today = timezone.localdate()
    this_month = month_start(today)
    last_month = month_start(today, 1)
    next_month = month_start(today, -1)

    field_users = User.objects.filter(role=Role.USER)
    total_users = field_users.count()
    active_users = field_users.filter(is_active=True).count()

    joined_this_month = field_users.filter(created_at__gte=_aware(this_month)).count()
    joined_last_month = field_users.filter(
        created_at__gte=_aware(last_month), created_at__lt=_aware(this_month)
    ).count()
    existing_before_this_month = field_users.filter(created_at__lt=_aware(this_month)).count()
    existing_before_last_month = field_users.filter(created_at__lt=_aware(last_month)).count()

    expenses_this_month = Expense.objects.filter(expense_date__gte=this_month, expense_date__lt=next_month).total()
    expenses_last_month = Expense.objects.filter(expense_date__gte=last_month, expense_date__lt=this_month).total()

    user_growth = growth_percent(joined_this_month, joined_last_month)
    expense_growth = growth_percent(expenses_this_month, expenses_last_month, when_new=0)

    logger.debug(f"Dashboard stats computed for {today}: {total_users} users, {expenses_this_month} expenses")
    return Response({
        'total_users': total_users,
        'active_users': active_users,
        'user_growth': user_growth,
        'active_user_growth': growth_percent(existing_before_this_month, existing_before_last_month),
        'total_expenses': str(expenses_this_month),
        'expense_growth': expense_growth,
        'overall_growth': math.floor((user_growth + expense_growth) / 2 + 0.5),
        'recent_activities': recent_activities(),
    })
