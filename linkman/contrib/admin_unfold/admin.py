"""
Linkman Admin with Unfold theme.

This module provides Unfold-styled admin classes for Linkman models.
To use, add 'unfold' before 'django.contrib.admin' and
'linkman.contrib.admin_unfold' after 'linkman' in INSTALLED_APPS.

The admins will automatically unregister the basic admins and register
the Unfold versions.
"""

from django.contrib import admin
from django.utils.html import format_html
from unfold.admin import ModelAdmin
from unfold.decorators import display

from linkman import admin as basic
from linkman.models import Contact, Profile, QrToken


def _unfold_badge(text, color="base"):
    """Create Unfold badge with colored background."""
    base_classes = (
        "inline-block font-semibold h-6 leading-6 px-2 "
        "rounded-default whitespace-nowrap text-xs uppercase"
    )

    color_classes = {
        "base": "bg-base-100 text-base-700 dark:bg-base-500/20 dark:text-base-200",
        "red": "bg-red-100 text-red-700 dark:bg-red-500/20 dark:text-red-400",
        "green": "bg-green-100 text-green-700 dark:bg-green-500/20 dark:text-green-400",
        "yellow": "bg-yellow-100 text-yellow-700 dark:bg-yellow-500/20 dark:text-yellow-400",
    }

    classes = f"{base_classes} {color_classes.get(color, color_classes['base'])}"
    return format_html('<span class="{}">{}</span>', classes, text)


# Unregister basic admins
for model in [Profile, Contact, QrToken]:
    try:
        admin.site.unregister(model)
    except admin.sites.NotRegistered:
        pass


# =============================================================================
# PROFILE ADMIN
# =============================================================================


@admin.register(Profile)
class ProfileAdmin(basic.ProfileAdmin, ModelAdmin):
    pass


# =============================================================================
# CONTACT ADMIN
# =============================================================================


@admin.register(Contact)
class ContactAdmin(basic.ContactAdmin, ModelAdmin):
    @display(description="Status")
    def status_badge(self, obj):
        color = "green" if obj.is_approved else "yellow"
        return _unfold_badge(obj.get_status_display(), color)


# =============================================================================
# QR TOKEN ADMIN
# =============================================================================


@admin.register(QrToken)
class QrTokenAdmin(basic.QrTokenAdmin, ModelAdmin):
    list_display = ["owner", "preset_name", "state_badge", "expires_at", "consumed_by", "created_at"]

    @display(description="State")
    def state_badge(self, obj):
        colors = {"active": "green", "consumed": "base", "expired": "red"}
        return _unfold_badge(obj.state, colors.get(obj.state, "base"))
