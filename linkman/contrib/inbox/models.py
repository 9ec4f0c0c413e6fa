"""Notification model - per-user inbox entries."""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class NotificationKind(models.TextChoices):
    FOLLOW = "follow", _("Follow request")
    FOLLOW_APPROVED = "follow_approved", _("Follow approved")
    UNFOLLOW = "unfollow", _("Unfollow")
    QR_SCAN = "qr_scan", _("QR scan")


class Notification(models.Model):
    """A contact event delivered to ``user``."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="linkman_notifications",
        verbose_name=_("user"),
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("actor"),
    )
    kind = models.CharField(
        _("kind"),
        max_length=20,
        choices=NotificationKind.choices,
        db_index=True,
    )
    title = models.CharField(_("title"), max_length=200)
    message = models.TextField(_("message"), blank=True)
    link = models.CharField(_("link"), max_length=200, blank=True)
    payload = models.JSONField(_("payload"), default=dict, blank=True)
    is_read = models.BooleanField(_("read"), default=False)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("notification")
        verbose_name_plural = _("notifications")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="linkman_inb_user_id_7d2e4a_idx"),
        ]

    def __str__(self):
        return f"[{self.kind}] {self.title}"
