# users/permissions.py

from rest_framework.permissions import SAFE_METHODS, BasePermission


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


# ---------------- ROLE PERMISSIONS ----------------
class IsAdmin(HasRole):
    allowed_roles = {"admin"}


class IsCustomer(HasRole):
    allowed_roles = {"customer"}


class IsAdminOrReadOnly(IsAdmin):
    """
    Anyone may read; only admins may write (catalog management).
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)


# ---------------- OBJECT OWNERSHIP ----------------
class IsOwnerOrAdmin(BasePermission):
    """
    Object-level guard for records that carry a `user` FK (orders).
    """

    def has_object_permission(self, request, view, obj):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if getattr(user, "role", None) == "admin":
            return True
        return getattr(obj, "user_id", None) == user.id
