"""Bearer token authentication with the session check applied on every request"""
import logging

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

from .models import Role
from .session_cache import session_cache

logger = logging.getLogger(__name__)

DEACTIVATED_MESSAGE = 'Your account has been deactivated. Please contact administrator.'


def check_session(user):
    """Refuse users that may no longer hold a session.

    Raises AuthenticationFailed for deactivated accounts and for rows whose
    role is not one of the known roles.
    """
    if not user.is_active:
        if user.role == Role.USER:
            raise AuthenticationFailed(DEACTIVATED_MESSAGE, code='user_deactivated')
        raise AuthenticationFailed('User is inactive.', code='user_inactive')
    if user.role not in Role.values:
        logger.warning(f"User {user.pk} has unknown role '{user.role}'")
        raise AuthenticationFailed('Profile not found. Please contact administrator.', code='no_profile')


class SessionJWTAuthentication(JWTAuthentication):
    """JWT authentication backed by the per-user session cache"""

    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken('Token contained no recognizable user identification')

        user = session_cache.get(user_id)
        if user is not None:
            return user

        try:
            user = self.user_model.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except self.user_model.DoesNotExist:
            raise AuthenticationFailed('User not found', code='user_not_found')

        check_session(user)
        session_cache.store(user)
        return user
