"""Inbox admin."""

from django.contrib import admin

from linkman.contrib.inbox.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["created_at", "user", "kind", "title", "is_read"]
    list_filter = ["kind", "is_read"]
    search_fields = ["user__username", "title", "message"]
    raw_id_fields = ["user", "actor"]
    readonly_fields = ["created_at", "payload"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
