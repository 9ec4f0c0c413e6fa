"""
QrToken model - single-use, time-limited bootstrap capability.

The token is a bearer credential: whoever redeems it first (and is not the
owner) becomes an approved contact of the owner. It carries the owner's
preset name, never the disclosed data itself.
"""

import secrets
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from linkman.presets import PresetName


def generate_token_value(nbytes: int | None = None) -> str:
    """High-entropy opaque token string (hex)."""
    if nbytes is None:
        from linkman.conf import linkman_settings

        nbytes = linkman_settings.QR_TOKEN_BYTES
    return secrets.token_hex(nbytes)


class QrToken(models.Model):
    """Bootstrap token created by ``owner`` and redeemable at most once."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="linkman_qr_tokens",
        verbose_name=_("owner"),
    )
    token = models.CharField(_("token"), max_length=128, unique=True)
    preset_name = models.CharField(
        _("preset"),
        max_length=20,
        choices=PresetName.choices,
    )
    consumed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="linkman_redeemed_qr_tokens",
        null=True,
        blank=True,
        verbose_name=_("consumed by"),
    )
    consumed_at = models.DateTimeField(_("consumed at"), null=True, blank=True)
    expires_at = models.DateTimeField(_("expires at"), db_index=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "linkman_qr_token"
        verbose_name = _("QR token")
        verbose_name_plural = _("QR tokens")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "-created_at"], name="linkman_qr__owner_i_3e7b21_idx"),
        ]

    def __str__(self):
        return f"{self.owner_id}:{self.token[:8]}… [{self.state}]"

    @property
    def is_consumed(self) -> bool:
        return self.consumed_by_id is not None or self.consumed_at is not None

    def is_expired(self, now=None) -> bool:
        now = now or timezone.now()
        return now >= self.expires_at

    def is_usable(self, now=None) -> bool:
        return not self.is_consumed and not self.is_expired(now)

    @property
    def state(self) -> str:
        if self.is_consumed:
            return "consumed"
        if self.is_expired():
            return "expired"
        return "active"

    @classmethod
    def cleanup(cls, now=None, retention_days: int | None = None):
        """
        Remove tokens that can never be redeemed again.

        Deletes expired unconsumed tokens, and consumed tokens older than the
        retention window.
        """
        if retention_days is None:
            from linkman.conf import linkman_settings

            retention_days = linkman_settings.QR_RETENTION_DAYS
        now = now or timezone.now()
        cutoff = now - timedelta(days=retention_days)
        return cls.objects.filter(
            Q(consumed_at__isnull=True, expires_at__lte=now)
            | Q(consumed_at__lt=cutoff)
        ).delete()
