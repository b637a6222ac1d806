from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models.functions import Coalesce
from django.utils import timezone


class Doctor(models.Model):
    """Doctors field users can pick when logging an expense"""
    name = models.CharField(max_length=200, db_index=True)
    clinic = models.CharField(max_length=200)
    specialty = models.CharField(max_length=200, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.name} ({self.clinic})"

    class Meta:
        db_table = 'doctors'
        ordering = ['name']


class ExpenseQuerySet(models.QuerySet):
    def total(self):
        """Sum of amount plus fare over the rows"""
        zero = models.Value(Decimal('0'), output_field=models.DecimalField(max_digits=12, decimal_places=2))
        total = self.aggregate(
            total=models.Sum(
                models.F('amount') + Coalesce('fare_amount', zero),
                output_field=models.DecimalField(max_digits=14, decimal_places=2),
            )
        )['total']
        return total or Decimal('0')


class Expense(models.Model):
    """A field user's visit expense, against a listed doctor or a free-text name"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='expenses')
    expense_date = models.DateField(default=timezone.localdate, db_index=True)
    doctor = models.ForeignKey(Doctor, on_delete=models.SET_NULL, null=True, blank=True, related_name='expenses')
    doctor_name = models.CharField(max_length=200, blank=True, null=True)
    location = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    fare_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(Decimal('0'))])
    remarks = models.TextField(blank=True, null=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_expenses')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ExpenseQuerySet.as_manager()

    @property
    def total(self):
        return self.amount + (self.fare_amount or Decimal('0'))

    @property
    def doctor_label(self):
        if self.doctor_id:
            return self.doctor.name
        return self.doctor_name or ''

    def __str__(self):
        return f"Expense {self.expense_date} - {self.amount}"

    class Meta:
        db_table = 'expenses'
        ordering = ['-expense_date', '-created_at']


class InputEntry(models.Model):
    """Samples or material handed to a doctor"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='inputs')
    sl_no = models.CharField(max_length=50)
    doctor_name = models.CharField(max_length=200)
    input = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.sl_no} - {self.input}"

    class Meta:
        db_table = 'inputs'
        ordering = ['-created_at']
        verbose_name = 'input'


class Investment(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='investments')
    sl_no = models.CharField(max_length=50)
    doctor_name = models.CharField(max_length=200)
    investment = models.CharField(max_length=255)
    roi = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.sl_no} - {self.investment}"

    class Meta:
        db_table = 'investments'
        ordering = ['-created_at']
