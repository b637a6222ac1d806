import logging

from django.db import DatabaseError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .models import User, Role
from .permissions import IsAdminRole, IsFieldUser
from .serializers import (
    UserSerializer, FieldUserCreateSerializer, FieldUserUpdateSerializer,
    SharedCredentialSerializer, PasswordResetSerializer,
    LoginSerializer, SessionRefreshSerializer,
)
from .session_cache import session_cache

logger = logging.getLogger(__name__)


class LoginView(TokenObtainPairView):
    serializer_class = LoginSerializer


class SessionRefreshView(TokenRefreshView):
    serializer_class = SessionRefreshSerializer


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Blacklist the refresh token and forget the cached session"""
    refresh = request.data.get('refresh')
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    session_cache.invalidate(request.user.pk)
    logger.info(f"User {request.user.pk} logged out")
    return Response(status=status.HTTP_205_RESET_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with role and console capabilities"""
    user = request.user
    user_data = UserSerializer(user).data
    is_admin = IsAdminRole().has_permission(request, None)
    is_field_user = IsFieldUser().has_permission(request, None)

    user_data['is_admin'] = is_admin
    user_data['redirect_to'] = user.dashboard_path
    user_data['can_manage_users'] = is_admin
    user_data['can_manage_catalog'] = is_admin
    user_data['can_monitor_logs'] = is_admin
    user_data['can_log_activity'] = is_field_user
    user_data['can_view_media'] = is_field_user
    return Response(user_data)


# Field user administration
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def user_list_create(request):
    """List field users (newest first) or create a new one"""
    if request.method == 'GET':
        users = User.objects.filter(role=Role.USER).order_by('-created_at')
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)

    serializer = FieldUserCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        user = serializer.save()
    except DatabaseError as e:
        logger.error(f"Failed to create user '{serializer.validated_data['user_id']}': {str(e)}", exc_info=True)
        return Response({'error': 'Failed to create user'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info(f"Created field user '{user.username}' (ID: {user.pk})")
    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def active_user_list(request):
    users = User.objects.filter(role=Role.USER, is_active=True).order_by('-created_at')
    return Response(UserSerializer(users, many=True).data)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAdminRole])
def user_detail(request, pk):
    """Retrieve a field user, or change their display name / active flag"""
    user = get_object_or_404(User, pk=pk, role=Role.USER)

    if request.method == 'GET':
        return Response(UserSerializer(user).data)

    serializer = FieldUserUpdateSerializer(user, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        logger.info(f"Updated field user {user.pk}: {serializer.validated_data}")
        return Response(UserSerializer(user).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def share_credentials(request):
    """Active field users with the credentials to hand out"""
    users = User.objects.filter(role=Role.USER, is_active=True).order_by('-created_at')
    return Response(SharedCredentialSerializer(users, many=True).data)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def reset_password(request, pk):
    user = get_object_or_404(User, pk=pk, role=Role.USER)
    serializer = PasswordResetSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    password = serializer.validated_data['password']
    user.set_password(password)
    user.shared_password = password
    try:
        user.save(update_fields=['password', 'shared_password', 'updated_at'])
    except DatabaseError as e:
        logger.error(f"Failed to reset password for user {user.pk}: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to update password'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info(f"Password reset for field user {user.pk}")
    return Response({'success': True})


@api_view(['POST'])
@permission_classes([IsAdminRole])
def delete_user(request):
    """Irreversibly delete a user and everything that cascades from it"""
    user_id = request.data.get('userId')
    if not user_id:
        return Response({'error': 'User ID required'}, status=status.HTTP_400_BAD_REQUEST)

    user = User.objects.filter(pk=user_id).first() if str(user_id).isdigit() else None
    if user is None:
        return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)
    if user.pk == request.user.pk:
        return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        user.delete()
    except DatabaseError as e:
        logger.error(f"Delete user error for {user_id}: {str(e)}", exc_info=True)
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Deleted user {user_id}")
    return Response({'success': True})
