"""
Role based API permissions.
"""
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Allow access only to authenticated users with the ADMIN role"""
    message = 'Admin access required'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, 'role', None) == 'ADMIN' or user.is_superuser
