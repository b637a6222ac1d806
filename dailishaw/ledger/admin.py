from django.contrib import admin
from .models import Doctor, Expense, InputEntry, Investment


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ['name', 'clinic', 'specialty', 'is_active']
    list_filter = ['is_active', 'specialty']
    search_fields = ['name', 'clinic']
    ordering = ['name']


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ['expense_date', 'user', 'doctor', 'doctor_name', 'location', 'amount', 'fare_amount']
    list_filter = ['expense_date', 'user']
    search_fields = ['doctor_name', 'doctor__name', 'location', 'remarks', 'user__username', 'user__display_name']
    date_hierarchy = 'expense_date'
    readonly_fields = ['created_at', 'updated_at']


@admin.register(InputEntry)
class InputEntryAdmin(admin.ModelAdmin):
    list_display = ['sl_no', 'user', 'doctor_name', 'input', 'quantity', 'created_at']
    list_filter = ['created_at', 'user']
    search_fields = ['sl_no', 'doctor_name', 'input', 'user__username']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Investment)
class InvestmentAdmin(admin.ModelAdmin):
    list_display = ['sl_no', 'user', 'doctor_name', 'investment', 'roi', 'created_at']
    list_filter = ['created_at', 'user']
    search_fields = ['sl_no', 'doctor_name', 'investment', 'user__username']
    readonly_fields = ['created_at', 'updated_at']
