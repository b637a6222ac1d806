"""
Test suite for field user logs
Tests: expenses, inputs, investments, per-user isolation, admin monitoring, CSV export
"""
import datetime
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase
from rest_framework import status

from dailishaw.core.test_utils import TestDataFactory, AuthenticatedAPIClient, APITestCase
from dailishaw.ledger.export import (
    EXPENSE_HEADERS, INPUT_HEADERS, cell, render_csv, export_filename, expense_row,
)
from dailishaw.ledger.models import Expense, InputEntry, Investment


class CsvFormatTests(SimpleTestCase):
    """CSV rendering without the database"""

    def test_quotes_are_doubled_and_field_wrapped(self):
        text = render_csv(['User', 'Remarks'], [['Asha', 'said "hello"']])
        self.assertEqual(text, 'User,Remarks\nAsha,"said ""hello"""\n')

    def test_commas_and_newlines_are_quoted(self):
        text = render_csv(['A', 'B'], [['x, y', 'line1\nline2']])
        self.assertEqual(text, 'A,B\n"x, y","line1\nline2"\n')

    def test_placeholder_for_empty_values(self):
        self.assertEqual(cell(None), '-')
        self.assertEqual(cell(''), '-')
        self.assertEqual(cell('   '), '-')
        self.assertEqual(cell(0), '0')

    def test_expense_row(self):
        expense = SimpleNamespace(
            user=SimpleNamespace(display_name=''),
            expense_date=datetime.date(2024, 3, 9),
            doctor_label='Dr. "Bose"',
            location='Howrah',
            amount=Decimal('250.00'),
            fare_amount=None,
            remarks=None,
        )
        self.assertEqual(
            expense_row(expense),
            ['-', '2024-03-09', 'Dr. "Bose"', 'Howrah', '250.00', '-', '-'],
        )

    def test_filenames(self):
        today = datetime.date(2024, 5, 1)
        self.assertEqual(export_filename('Inputs', None, today), 'Inputs_All_Users_2024-05-01.csv')
        self.assertEqual(
            export_filename('Inputs', SimpleNamespace(display_name='Asha'), today),
            'Inputs_Asha_2024-05-01.csv',
        )
        self.assertEqual(
            export_filename('Expenses', SimpleNamespace(display_name=''), today),
            'Expenses_User_2024-05-01.csv',
        )


class ExpenseTests(APITestCase):
    """Field user expense log"""

    def test_create_with_free_text_doctor(self):
        response = self.user_client.post('/api/v1/user-dashboard/expenses/', {
            'expense_date': '2024-03-01',
            'doctor_name': 'Dr. Sen',
            'location': 'Salt Lake',
            'amount': '120.50',
            'fare_amount': '30',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        expense = Expense.objects.get(pk=response.data['id'])
        self.assertEqual(expense.user, self.field_user)
        self.assertEqual(expense.created_by, self.field_user)
        self.assertEqual(expense.total, Decimal('150.50'))

    def test_create_with_listed_doctor(self):
        doctor = TestDataFactory.create_doctor(name='Dr. Ghosh')
        response = self.user_client.post('/api/v1/user-dashboard/expenses/', {
            'doctor': doctor.pk,
            'location': 'Park Street',
            'amount': '80',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['doctor_details']['name'], 'Dr. Ghosh')

    def test_doctor_and_name_together_rejected(self):
        doctor = TestDataFactory.create_doctor()
        response = self.user_client.post('/api/v1/user-dashboard/expenses/', {
            'doctor': doctor.pk,
            'doctor_name': 'Someone Else',
            'location': 'Park Street',
            'amount': '80',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Expense.objects.count(), 0)

    def test_amount_required_and_non_negative(self):
        response = self.user_client.post('/api/v1/user-dashboard/expenses/', {'location': 'Howrah'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

        response = self.user_client.post('/api/v1/user-dashboard/expenses/', {
            'location': 'Howrah',
            'amount': '-1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)

    def test_list_newest_expense_date_first(self):
        old = TestDataFactory.create_expense(self.field_user, expense_date=datetime.date(2024, 1, 5))
        new = TestDataFactory.create_expense(self.field_user, expense_date=datetime.date(2024, 2, 5))
        response = self.user_client.get('/api/v1/user-dashboard/expenses/')
        self.assertEqual([row['id'] for row in response.data], [new.pk, old.pk])

    def test_update_and_delete_own_expense(self):
        expense = TestDataFactory.create_expense(self.field_user)
        response = self.user_client.patch(
            f'/api/v1/user-dashboard/expenses/{expense.pk}/', {'remarks': 'Taxi'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['remarks'], 'Taxi')

        response = self.user_client.delete(f'/api/v1/user-dashboard/expenses/{expense.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Expense.objects.filter(pk=expense.pk).exists())

    def test_other_users_expenses_are_invisible(self):
        other = TestDataFactory.create_user()
        theirs = TestDataFactory.create_expense(other)
        mine = TestDataFactory.create_expense(self.field_user)

        response = self.user_client.get('/api/v1/user-dashboard/expenses/')
        self.assertEqual([row['id'] for row in response.data], [mine.pk])

        response = self.user_client.get(f'/api/v1/user-dashboard/expenses/{theirs.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.user_client.delete(f'/api/v1/user-dashboard/expenses/{theirs.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Expense.objects.filter(pk=theirs.pk).exists())

    def test_doctor_list_only_active(self):
        active = TestDataFactory.create_doctor(name='Dr. A')
        TestDataFactory.create_doctor(name='Dr. B', is_active=False)
        response = self.user_client.get('/api/v1/user-dashboard/doctors/')
        self.assertEqual([row['id'] for row in response.data], [active.pk])


class InputAndInvestmentTests(APITestCase):
    """Field user input and investment logs"""

    def test_create_input(self):
        response = self.user_client.post('/api/v1/user-dashboard/inputs/', {
            'sl_no': '7',
            'doctor_name': 'Dr. Das',
            'input': 'Sample strips',
            'quantity': 3,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(InputEntry.objects.get().user, self.field_user)

    def test_input_quantity_must_be_positive(self):
        response = self.user_client.post('/api/v1/user-dashboard/inputs/', {
            'sl_no': '7',
            'doctor_name': 'Dr. Das',
            'input': 'Sample strips',
            'quantity': 0,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data)

    def test_input_fields_required(self):
        response = self.user_client.post('/api/v1/user-dashboard/inputs/', {'quantity': 2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ['sl_no', 'doctor_name', 'input']:
            self.assertIn(field, response.data)

    def test_investment_fields_required(self):
        response = self.user_client.post('/api/v1/user-dashboard/investments/', {
            'sl_no': '1',
            'doctor_name': 'Dr. Das',
            'investment': '',
            'roi': 'Good',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('investment', response.data)

    def test_investment_isolation(self):
        other = TestDataFactory.create_user()
        TestDataFactory.create_investment(other)
        mine = TestDataFactory.create_investment(self.field_user)
        response = self.user_client.get('/api/v1/user-dashboard/investments/')
        self.assertEqual([row['id'] for row in response.data], [mine.pk])

        other_client = AuthenticatedAPIClient().authenticate_user(other)
        response = other_client.patch(f'/api/v1/user-dashboard/investments/{mine.pk}/', {'roi': 'None'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        mine.refresh_from_db()
        self.assertEqual(mine.roi, 'High')


class MonitoringTests(APITestCase):
    """Admin views over every field user's logs"""

    def setUp(self):
        super().setUp()
        self.other = TestDataFactory.create_user(display_name='Other Rep')
        TestDataFactory.create_expense(self.field_user, amount=Decimal('100'), fare_amount=Decimal('20'),
                                       expense_date=datetime.date(2024, 3, 10))
        TestDataFactory.create_expense(self.field_user, amount=Decimal('50'),
                                       expense_date=datetime.date(2024, 4, 2))
        TestDataFactory.create_expense(self.other, amount=Decimal('10'), fare_amount=Decimal('5'),
                                       expense_date=datetime.date(2024, 3, 15))

    def test_all_expenses_with_total(self):
        response = self.admin_client.get('/api/v1/dashboard/expenses/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(Decimal(response.data['total']), Decimal('185'))
        self.assertIn('user_display_name', response.data['results'][0])

    def test_filter_by_user_and_dates(self):
        response = self.admin_client.get('/api/v1/dashboard/expenses/', {
            'user': self.field_user.pk,
            'date_from': '2024-03-01',
            'date_to': '2024-03-31',
        })
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(Decimal(response.data['total']), Decimal('120'))
        self.assertEqual(response.data['results'][0]['user_display_name'], 'Field User')

    def test_invalid_date_filter(self):
        response = self.admin_client.get('/api/v1/dashboard/expenses/', {'date_from': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inputs_and_investments_by_user(self):
        TestDataFactory.create_input(self.field_user)
        TestDataFactory.create_input(self.other)
        TestDataFactory.create_investment(self.other)
        response = self.admin_client.get('/api/v1/dashboard/inputs/', {'user': self.other.pk})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['user_display_name'], 'Other Rep')

        response = self.admin_client.get('/api/v1/dashboard/investments/')
        self.assertEqual(len(response.data), 1)


class ExportTests(APITestCase):
    """CSV downloads for the admin console"""

    def test_expense_export_for_one_user(self):
        TestDataFactory.create_expense(
            self.field_user, amount=Decimal('75.00'), expense_date=datetime.date(2024, 6, 1),
            doctor_name='Dr. "Mitra"', location='Dum Dum, North', remarks=None,
        )
        TestDataFactory.create_expense(TestDataFactory.create_user())
        response = self.admin_client.get('/api/v1/dashboard/expenses/export/', {'user': self.field_user.pk})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'text/csv; charset=utf-8')
        self.assertIn('Expenses_Field User_', response['Content-Disposition'])

        lines = response.content.decode().splitlines()
        self.assertEqual(lines[0], ','.join(EXPENSE_HEADERS))
        self.assertEqual(lines[1], 'Field User,2024-06-01,"Dr. ""Mitra""","Dum Dum, North",75.00,-,-')
        self.assertEqual(len(lines), 2)

    def test_input_export_all_users(self):
        nameless = TestDataFactory.create_user(display_name='')
        TestDataFactory.create_input(nameless, sl_no='12', input='Leaflets', quantity=4)
        response = self.admin_client.get('/api/v1/dashboard/inputs/export/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('Inputs_All_Users_', response['Content-Disposition'])
        lines = response.content.decode().splitlines()
        self.assertEqual(lines[0], ','.join(INPUT_HEADERS))
        self.assertTrue(lines[1].startswith('-,12,Dr. Rao,Leaflets,4,'))

    def test_investment_export_unknown_user(self):
        response = self.admin_client.get('/api/v1/dashboard/investments/export/', {'user': 999999})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_export_requires_admin(self):
        response = self.user_client.get('/api/v1/dashboard/investments/export/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_investment_export_columns(self):
        TestDataFactory.create_investment(self.field_user, sl_no='3', investment='CME, Kolkata', roi='Medium')
        response = self.admin_client.get('/api/v1/dashboard/investments/export/')
        lines = response.content.decode().splitlines()
        self.assertEqual(lines[0], 'User,SL No,Doctor Name,Investment,ROI,Date')
        self.assertTrue(lines[1].startswith('Field User,3,Dr. Rao,"CME, Kolkata",Medium,'))
        self.assertEqual(Investment.objects.count(), 1)
