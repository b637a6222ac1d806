from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'display_name', 'email', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'is_staff', 'created_at']
    search_fields = ['username', 'display_name', 'email']
    ordering = ['-created_at']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Console', {'fields': ('role', 'display_name', 'shared_password')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Console', {'fields': ('role', 'display_name')}),
    )
