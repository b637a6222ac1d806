from rest_framework.permissions import BasePermission

from .models import Role


class HasRole(BasePermission):
    """Admit authenticated users whose role is ``required_role``"""
    required_role = None
    message = 'You do not have access to this console.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, 'role', None) == self.required_role


class IsAdminRole(HasRole):
    required_role = Role.ADMIN
    message = 'Forbidden: Admin access required'


class IsFieldUser(HasRole):
    required_role = Role.USER
    message = 'This console is only available to field users.'
