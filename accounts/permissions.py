from rest_framework.permissions import BasePermission

from .models import AuthorAllowlist


class IsCmsAuthor(BasePermission):
    message = "Nur für freigeschaltete Autor:innen."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_staff or user.is_superuser:
            return True
        return AuthorAllowlist.is_allowed(getattr(user, "email", ""))
