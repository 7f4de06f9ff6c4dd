"""
Custom permission classes for role based access control.

Each route declares the roles it admits.  An anonymous request fails the
check before any role is looked at, which DRF turns into a 401; an
authenticated caller with the wrong role gets a 403 naming both roles.
"""
from rest_framework.permissions import BasePermission

from core.models import User


class RolePermission(BasePermission):
    """Allow access only to users whose role is in ``roles``."""
    roles: tuple[str, ...] = ()

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        role = getattr(user, "role", None)
        if role in self.roles:
            return True
        self.message = f"Access denied. Required role: {', '.join(self.roles)}. Your role: {role}"
        return False


class IsAdmin(RolePermission):
    roles = (User.ROLE_ADMIN,)


class IsDoctor(RolePermission):
    roles = (User.ROLE_DOCTOR,)


class IsPatient(RolePermission):
    roles = (User.ROLE_PATIENT,)


class IsReceptionist(RolePermission):
    roles = (User.ROLE_RECEPTIONIST,)
