"""
Contact model - one directional edge of the relationship graph.

An approved relationship between A and B is always stored as two edges,
A->B and B->A, with mirrored presets and facets:

    A->B: sender_preset = A's preset, shared_data.sender   = A's facet
                                      shared_data.receiver = B's facet
    B->A: sender_preset = B's preset, shared_data.sender   = B's facet
                                      shared_data.receiver = A's facet

Rules (enforced by constraints and Gates):
- One edge per ordered (sender, receiver)
- No self-edges
- Both directions approved, or neither (G3)
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from linkman.presets import PresetName
from linkman.projection import SharedData


class ContactQuerySet(models.QuerySet):
    def between(self, a, b):
        """Edges in either direction between two identities."""
        return self.filter(
            Q(sender=a, receiver=b) | Q(sender=b, receiver=a)
        )

    def touching(self, user):
        """Edges where ``user`` is either participant."""
        return self.filter(Q(sender=user) | Q(receiver=user))

    def approved(self):
        return self.filter(status=Contact.Status.APPROVED)

    def pending(self):
        return self.filter(status=Contact.Status.PENDING)


class Contact(models.Model):
    """Disclosure state from ``sender`` toward ``receiver``."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="linkman_sent_contacts",
        verbose_name=_("sender"),
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="linkman_received_contacts",
        verbose_name=_("receiver"),
    )

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    sender_preset = models.CharField(
        _("sender preset"),
        max_length=20,
        choices=PresetName.choices,
        null=True,
        blank=True,
    )
    receiver_preset = models.CharField(
        _("receiver preset"),
        max_length=20,
        choices=PresetName.choices,
        null=True,
        blank=True,
    )
    shared_data = models.JSONField(
        _("shared data"),
        default=dict,
        blank=True,
        help_text=_("Last computed facets: {sender: {...}, receiver: {...}}"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)
    approved_at = models.DateTimeField(_("approved at"), null=True, blank=True)

    objects = ContactQuerySet.as_manager()

    class Meta:
        db_table = "linkman_contact"
        verbose_name = _("contact")
        verbose_name_plural = _("contacts")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["sender", "receiver"],
                name="linkman_unique_contact_direction",
            ),
            models.CheckConstraint(
                condition=~Q(sender=models.F("receiver")),
                name="linkman_contact_not_self",
            ),
        ]
        indexes = [
            models.Index(fields=["sender", "status"], name="linkman_con_sender__8a1f3e_idx"),
            models.Index(fields=["receiver", "status"], name="linkman_con_receive_5c2d9b_idx"),
        ]

    def __str__(self):
        return f"{self.sender_id} -> {self.receiver_id} [{self.status}]"

    @property
    def is_approved(self) -> bool:
        return self.status == self.Status.APPROVED

    @property
    def facets(self) -> SharedData:
        return SharedData.from_raw(self.shared_data)

    def is_participant(self, user) -> bool:
        return user.pk in (self.sender_id, self.receiver_id)

    def other_id(self, user):
        """Primary key of the counterpart of ``user``."""
        if self.sender_id == user.pk:
            return self.receiver_id
        if self.receiver_id == user.pk:
            return self.sender_id
        raise ValueError(f"user {user.pk} is not a participant of {self.pk}")

    def other(self, user):
        return self.receiver if self.sender_id == user.pk else self.sender

    def preset_of(self, user) -> str | None:
        """Preset ``user`` chose on this edge."""
        if self.sender_id == user.pk:
            return self.sender_preset
        if self.receiver_id == user.pk:
            return self.receiver_preset
        return None
