"""Relationship graph primitives shared by the contact protocol and QR exchange.

Every multi-edge write runs inside transaction.atomic() while holding the
pair lock: both participants' Profile rows locked with select_for_update(),
always in ascending user id order so two requests on the same pair cannot
deadlock.
"""

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.utils import timezone

from linkman.exceptions import LinkmanError
from linkman.gates import GateError, Gates
from linkman.models import Contact, Profile
from linkman.projection import SharedData

logger = logging.getLogger(__name__)


def resolve_user(user_or_id):
    """
    Return an active user instance for a user or a primary key.

    Raises:
        LinkmanError: IDENTITY_NOT_FOUND
    """
    User = get_user_model()
    if isinstance(user_or_id, User):
        if not user_or_id.is_active:
            raise LinkmanError("IDENTITY_NOT_FOUND", user_id=str(user_or_id.pk))
        return user_or_id
    if user_or_id in (None, ""):
        raise LinkmanError("INVALID_REQUEST", message="User id is required")
    try:
        return User.objects.get(pk=user_or_id, is_active=True)
    except (User.DoesNotExist, ValueError, TypeError, ValidationError):
        raise LinkmanError("IDENTITY_NOT_FOUND", user_id=str(user_or_id))


def get_contact(contact_id) -> Contact:
    """
    Fetch an edge by id.

    Raises:
        LinkmanError: CONTACT_NOT_FOUND (also for malformed ids)
    """
    if not contact_id:
        raise LinkmanError("INVALID_REQUEST", message="Contact id is required")
    try:
        return Contact.objects.select_related("sender", "receiver").get(pk=contact_id)
    except (Contact.DoesNotExist, ValueError, ValidationError):
        raise LinkmanError("CONTACT_NOT_FOUND", contact_id=str(contact_id))


def lock_pair(a, b) -> dict:
    """
    Lock both participants of a relationship.

    MUST be called inside transaction.atomic().

    Returns:
        {user_id: Profile} for both users
    """
    Gates.distinct_participants(a.pk, b.pk)
    for user in (a, b):
        Profile.objects.get_or_create(user=user)
    profiles = (
        Profile.objects.select_for_update()
        .select_related("user")
        .filter(user_id__in=[a.pk, b.pk])
        .order_by("user_id")
    )
    return {p.user_id: p for p in profiles}


def edges_between(a, b) -> dict:
    """{sender_id: Contact} for the (at most two) edges between a and b."""
    return {
        edge.sender_id: edge
        for edge in Contact.objects.select_for_update().between(a, b)
    }


def _upsert_approved(sender, receiver, sender_preset, receiver_preset, facets, now) -> Contact:
    edge = Contact.objects.filter(sender=sender, receiver=receiver).first()
    if edge is None:
        edge = Contact(sender=sender, receiver=receiver)
    if not edge.is_approved or edge.approved_at is None:
        edge.approved_at = now
    edge.status = Contact.Status.APPROVED
    edge.sender_preset = sender_preset
    edge.receiver_preset = receiver_preset
    edge.shared_data = facets.as_dict()
    edge.save()
    return edge


def establish(
    sender,
    receiver,
    sender_preset: str | None,
    receiver_preset: str | None,
    sender_facet: dict | None,
    receiver_facet: dict | None,
) -> tuple[Contact, Contact]:
    """
    Make ``sender`` and ``receiver`` approved contacts in both directions.

    Upserts sender->receiver and receiver->sender with mirrored presets and
    facets, deletes any other edge between the pair, then checks G3/G4.
    Used by approve (forward edge = the request) and by QR redemption
    (forward edge = owner->redeemer), so both paths reconcile identically.

    MUST be called inside transaction.atomic() holding lock_pair().

    Returns:
        (forward, reverse) edges

    Raises:
        GateError: If the pair is still inconsistent afterwards (aborts the transaction)
    """
    now = timezone.now()
    facets = SharedData(sender=sender_facet, receiver=receiver_facet)

    forward = _upsert_approved(sender, receiver, sender_preset, receiver_preset, facets, now)
    reverse = _upsert_approved(
        receiver, sender, receiver_preset, sender_preset, facets.mirrored(), now
    )

    stray = Contact.objects.between(sender, receiver).exclude(pk__in=[forward.pk, reverse.pk])
    deleted, _ = stray.delete()
    if deleted:
        logger.warning(
            "Removed %d stray edges between %s and %s", deleted, sender.pk, receiver.pk
        )

    try:
        Gates.edge_uniqueness(sender.pk, receiver.pk)
        Gates.relationship_symmetry(sender.pk, receiver.pk)
    except GateError as e:
        logger.error("Integrity violation after reconciliation: %s %s", e, e.details)
        raise

    return forward, reverse
