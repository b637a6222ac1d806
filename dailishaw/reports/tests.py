"""
Test suite for dashboard statistics
Tests: growth calculations, month boundaries, stats endpoint, recent activity
"""
import datetime
from decimal import Decimal

from django.test import SimpleTestCase
from django.utils import timezone
from rest_framework import status

from dailishaw.core.models import User
from dailishaw.core.test_utils import TestDataFactory, APITestCase
from dailishaw.reports.views import growth_percent, month_start


class GrowthTests(SimpleTestCase):
    def test_growth_percent(self):
        self.assertEqual(growth_percent(3, 2), 50)
        self.assertEqual(growth_percent(1, 3), -67)
        self.assertEqual(growth_percent(2, 2), 0)
        self.assertEqual(growth_percent(Decimal('150.00'), Decimal('100.00')), 50)

    def test_half_rounds_up(self):
        self.assertEqual(growth_percent(1, 8), -87)
        self.assertEqual(growth_percent(3, 8), -62)

    def test_nothing_before(self):
        self.assertEqual(growth_percent(4, 0), 100)
        self.assertEqual(growth_percent(0, 0), 0)
        self.assertEqual(growth_percent(Decimal('10'), Decimal('0'), when_new=0), 0)

    def test_month_start(self):
        self.assertEqual(month_start(datetime.date(2024, 3, 17)), datetime.date(2024, 3, 1))
        self.assertEqual(month_start(datetime.date(2024, 1, 17), 1), datetime.date(2023, 12, 1))
        self.assertEqual(month_start(datetime.date(2024, 12, 17), -1), datetime.date(2025, 1, 1))


class DashboardStatsTests(APITestCase):
    """Test the admin dashboard numbers"""

    def setUp(self):
        super().setUp()
        today = timezone.localdate()
        self.this_month = month_start(today)
        self.last_month = month_start(today, 1)

        TestDataFactory.create_user(is_active=False)
        veteran = TestDataFactory.create_user()
        joined = timezone.make_aware(datetime.datetime.combine(self.last_month, datetime.time(12, 0)))
        User.objects.filter(pk=veteran.pk).update(created_at=joined)

        TestDataFactory.create_expense(self.field_user, amount=Decimal('100'), fare_amount=Decimal('20'),
                                       expense_date=self.this_month)
        TestDataFactory.create_expense(veteran, amount=Decimal('60'), expense_date=self.last_month)

    def test_stats(self):
        response = self.admin_client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['total_users'], 3)
        self.assertEqual(data['active_users'], 2)
        # two joined this month against one last month
        self.assertEqual(data['user_growth'], 100)
        self.assertEqual(data['active_user_growth'], 100)
        self.assertEqual(Decimal(data['total_expenses']), Decimal('120'))
        self.assertEqual(data['expense_growth'], 100)
        self.assertEqual(data['overall_growth'], 100)

    def test_recent_activities(self):
        response = self.admin_client.get('/api/v1/dashboard/stats/')
        activities = response.data['recent_activities']
        self.assertEqual(len(activities), 4)
        timestamps = [activity['timestamp'] for activity in activities]
        self.assertEqual(timestamps, sorted(timestamps, reverse=True))
        self.assertEqual({activity['type'] for activity in activities} - {'user_created', 'expense_submitted'}, set())

    def test_admin_only(self):
        response = self.user_client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
