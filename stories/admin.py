from django.contrib import admin
from .models import Story, Comment


@admin.register(Story)
class StoryAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "slug", "author", "date", "tag", "created_at")
    list_filter = ("category", "tag", "created_at")
    search_fields = ("title", "slug", "author")
    prepopulated_fields = {"slug": ("title",)}


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "story", "author_name", "status", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("author_name", "body")
    raw_id_fields = ("story",)
    actions = ["approve", "reject"]

    def approve(self, request, queryset):
        queryset.update(status=Comment.Status.APPROVED)
    approve.short_description = "Freigeben"

    def reject(self, request, queryset):
        queryset.update(status=Comment.Status.REJECTED)
    reject.short_description = "Ablehnen"
