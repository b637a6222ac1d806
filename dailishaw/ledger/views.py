import logging

from django.db import DatabaseError
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from dailishaw.core.models import User, Role
from dailishaw.core.permissions import IsAdminRole, IsFieldUser
from .export import (
    EXPENSE_HEADERS, INPUT_HEADERS, INVESTMENT_HEADERS,
    expense_row, input_row, investment_row, render_csv, export_filename,
)
from .filters import ExpenseFilter, InputEntryFilter, InvestmentFilter
from .models import Doctor, Expense, InputEntry, Investment
from .serializers import (
    DoctorSerializer,
    ExpenseSerializer, InputEntrySerializer, InvestmentSerializer,
    AdminExpenseSerializer, AdminInputEntrySerializer, AdminInvestmentSerializer,
)

logger = logging.getLogger(__name__)


def _list_create(request, queryset, serializer_class, label, **save_kwargs):
    if request.method == 'GET':
        return Response(serializer_class(queryset, many=True).data)

    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        instance = serializer.save(user=request.user, **save_kwargs)
    except DatabaseError as e:
        logger.error(f"Failed to save {label} for user {request.user.pk}: {str(e)}", exc_info=True)
        return Response({'error': f'Failed to save {label}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info(f"User {request.user.pk} logged {label} {instance.pk}")
    return Response(serializer_class(instance).data, status=status.HTTP_201_CREATED)


def _detail(request, queryset, pk, serializer_class, label):
    # Rows of other users look exactly like missing rows
    instance = get_object_or_404(queryset, pk=pk)

    if request.method == 'GET':
        return Response(serializer_class(instance).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            serializer.save()
        except DatabaseError as e:
            logger.error(f"Failed to update {label} {pk}: {str(e)}", exc_info=True)
            return Response({'error': f'Failed to update {label}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(serializer.data)

    instance.delete()
    logger.info(f"User {request.user.pk} deleted {label} {pk}")
    return Response(status=status.HTTP_204_NO_CONTENT)


# Field user logs
@api_view(['GET', 'POST'])
@permission_classes([IsFieldUser])
def expense_list_create(request):
    """The requesting user's expenses, newest expense date first"""
    expenses = Expense.objects.filter(user=request.user).select_related('doctor').order_by('-expense_date', '-created_at')
    return _list_create(request, expenses, ExpenseSerializer, 'expense', created_by=request.user)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsFieldUser])
def expense_detail(request, pk):
    expenses = Expense.objects.filter(user=request.user).select_related('doctor')
    return _detail(request, expenses, pk, ExpenseSerializer, 'expense')


@api_view(['GET', 'POST'])
@permission_classes([IsFieldUser])
def input_list_create(request):
    inputs = InputEntry.objects.filter(user=request.user).order_by('-created_at')
    return _list_create(request, inputs, InputEntrySerializer, 'input')


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsFieldUser])
def input_detail(request, pk):
    return _detail(request, InputEntry.objects.filter(user=request.user), pk, InputEntrySerializer, 'input')


@api_view(['GET', 'POST'])
@permission_classes([IsFieldUser])
def investment_list_create(request):
    investments = Investment.objects.filter(user=request.user).order_by('-created_at')
    return _list_create(request, investments, InvestmentSerializer, 'investment')


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsFieldUser])
def investment_detail(request, pk):
    return _detail(request, Investment.objects.filter(user=request.user), pk, InvestmentSerializer, 'investment')


@api_view(['GET'])
@permission_classes([IsFieldUser])
def doctor_list(request):
    """Active doctors for the expense form"""
    doctors = Doctor.objects.filter(is_active=True).order_by('name')
    return Response(DoctorSerializer(doctors, many=True).data)


# Admin monitoring
def _filtered(request, filter_class, queryset):
    filterset = filter_class(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        return None, Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
    return filterset.qs, None


@api_view(['GET'])
@permission_classes([IsAdminRole])
def expense_monitor(request):
    """All field users' expenses with owner info and the filtered total"""
    queryset = Expense.objects.select_related('user', 'doctor').order_by('-expense_date', '-created_at')
    expenses, error = _filtered(request, ExpenseFilter, queryset)
    if error:
        return error
    return Response({
        'count': expenses.count(),
        'total': str(expenses.total()),
        'results': AdminExpenseSerializer(expenses, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAdminRole])
def input_monitor(request):
    queryset = InputEntry.objects.select_related('user').order_by('-created_at')
    inputs, error = _filtered(request, InputEntryFilter, queryset)
    if error:
        return error
    return Response(AdminInputEntrySerializer(inputs, many=True).data)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def investment_monitor(request):
    queryset = Investment.objects.select_related('user').order_by('-created_at')
    investments, error = _filtered(request, InvestmentFilter, queryset)
    if error:
        return error
    return Response(AdminInvestmentSerializer(investments, many=True).data)


# CSV export
def _csv_response(request, entity, filter_class, queryset, headers, row_builder):
    owner = None
    user_id = request.query_params.get('user')
    if user_id:
        if not user_id.isdigit():
            return Response({'user': ['Enter a number.']}, status=status.HTTP_400_BAD_REQUEST)
        owner = get_object_or_404(User, pk=user_id, role=Role.USER)

    rows, error = _filtered(request, filter_class, queryset)
    if error:
        return error

    filename = export_filename(entity, owner).replace('"', '')
    response = HttpResponse(render_csv(headers, [row_builder(row) for row in rows]), content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    logger.info(f"Exported {entity} CSV for {'user ' + str(owner.pk) if owner else 'all users'}")
    return response


@api_view(['GET'])
@permission_classes([IsAdminRole])
def expense_export(request):
    queryset = Expense.objects.select_related('user', 'doctor').order_by('-expense_date', '-created_at')
    return _csv_response(request, 'Expenses', ExpenseFilter, queryset, EXPENSE_HEADERS, expense_row)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def input_export(request):
    queryset = InputEntry.objects.select_related('user').order_by('-created_at')
    return _csv_response(request, 'Inputs', InputEntryFilter, queryset, INPUT_HEADERS, input_row)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def investment_export(request):
    queryset = Investment.objects.select_related('user').order_by('-created_at')
    return _csv_response(request, 'Investments', InvestmentFilter, queryset, INVESTMENT_HEADERS, investment_row)
