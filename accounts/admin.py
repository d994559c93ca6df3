from django.contrib import admin
from .models import AuthorAllowlist


@admin.register(AuthorAllowlist)
class AuthorAllowlistAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "name", "created_at")
    search_fields = ("email", "name")
