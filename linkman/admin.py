"""Linkman admin (CORE only).

Contrib models have their own admin in their respective modules:
- linkman.contrib.feed.admin: PostAdmin
- linkman.contrib.inbox.admin: NotificationAdmin
"""

import json

from django.contrib import admin
from django.utils.html import format_html

from linkman.models import Contact, Profile, QrToken


# ===========================================
# Profile Admin
# ===========================================


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "company", "position", "contact_count", "updated_at"]
    search_fields = ["user__username", "user__email", "company", "position"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["user"]}),
        ("Disclosable fields", {"fields": ["bio", "company", "position", "phone", "education", "handles", "avatar"]}),
        ("Presets", {"fields": ["presets"]}),
        ("Audit", {"fields": ["created_at", "updated_at"], "classes": ["collapse"]}),
    ]

    def contact_count(self, obj):
        return Contact.objects.approved().filter(sender=obj.user).count()

    contact_count.short_description = "Contacts"


# ===========================================
# Contact Admin
# ===========================================


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = [
        "sender",
        "receiver",
        "status_badge",
        "sender_preset",
        "receiver_preset",
        "created_at",
        "approved_at",
    ]
    list_filter = ["status", "sender_preset", "receiver_preset"]
    search_fields = ["sender__username", "receiver__username"]
    raw_id_fields = ["sender", "receiver"]
    readonly_fields = ["id", "shared_data_display", "created_at", "updated_at", "approved_at"]
    exclude = ["shared_data"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    def status_badge(self, obj):
        color = "#28a745" if obj.is_approved else "#ffc107"
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            color,
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"

    def shared_data_display(self, obj):
        return format_html("<pre>{}</pre>", json.dumps(obj.facets.as_dict(), indent=2))

    shared_data_display.short_description = "Shared data"


# ===========================================
# QrToken Admin
# ===========================================


@admin.register(QrToken)
class QrTokenAdmin(admin.ModelAdmin):
    list_display = ["owner", "preset_name", "state", "expires_at", "consumed_by", "created_at"]
    list_filter = ["preset_name"]
    search_fields = ["owner__username", "consumed_by__username"]
    raw_id_fields = ["owner", "consumed_by"]
    readonly_fields = ["token", "consumed_by", "consumed_at", "created_at"]
    ordering = ["-created_at"]
