from django.urls import path
from .views import (
    expense_list_create, expense_detail,
    input_list_create, input_detail,
    investment_list_create, investment_detail,
    doctor_list,
    expense_monitor, input_monitor, investment_monitor,
    expense_export, input_export, investment_export,
)

urlpatterns = [
    # Field user logs
    path('user-dashboard/expenses/', expense_list_create, name='expense-list-create'),
    path('user-dashboard/expenses/<int:pk>/', expense_detail, name='expense-detail'),
    path('user-dashboard/inputs/', input_list_create, name='input-list-create'),
    path('user-dashboard/inputs/<int:pk>/', input_detail, name='input-detail'),
    path('user-dashboard/investments/', investment_list_create, name='investment-list-create'),
    path('user-dashboard/investments/<int:pk>/', investment_detail, name='investment-detail'),
    path('user-dashboard/doctors/', doctor_list, name='doctor-list'),

    # Admin monitoring
    path('dashboard/expenses/', expense_monitor, name='expense-monitor'),
    path('dashboard/expenses/export/', expense_export, name='expense-export'),
    path('dashboard/inputs/', input_monitor, name='input-monitor'),
    path('dashboard/inputs/export/', input_export, name='input-export'),
    path('dashboard/investments/', investment_monitor, name='investment-monitor'),
    path('dashboard/investments/export/', investment_export, name='investment-export'),
]
