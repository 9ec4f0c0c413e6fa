"""Contact service - follow / approve / unfollow protocol.

State machine per identity pair {A, B}:

    Absent --follow(A, B)--> Pending(A->B) --approve(B)--> Approved (A->B, B->A)
    Pending/Approved --unfollow--> Absent

All write operations run in transaction.atomic() under the pair lock.
Notifications are sent after commit and never fail the operation.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from django.db import transaction

from linkman.exceptions import LinkmanError
from linkman.models import Contact
from linkman.notifications import EventKind, emit, notify
from linkman.presets import validate_preset_name
from linkman.projection import SharedData, facet_for, project
from linkman.services.graph import (
    edges_between,
    establish,
    get_contact,
    lock_pair,
    resolve_user,
)
from linkman.signals import contact_removed, follow_approved, follow_requested

logger = logging.getLogger(__name__)


@dataclass
class ContactEntry:
    """One approved counterpart as seen by the viewer."""

    contact_id: str
    other: object
    shared_data: dict | None
    viewer_preset: str | None
    since: datetime | None


class Relationship:
    NONE = "none"
    PENDING_OUTGOING = "pending_outgoing"
    PENDING_INCOMING = "pending_incoming"
    APPROVED = "approved"


def _actor_payload(user) -> dict:
    full_name = user.get_full_name().strip()
    return {"user_id": str(user.pk), "name": full_name or user.get_username()}


# ======================================================================
# Protocol
# ======================================================================


def follow(requester, receiver, preset_name: str | None = None) -> Contact:
    """
    Send a follow request from ``requester`` to ``receiver``.

    Re-submitting an identical pending request updates it in place and
    returns it without error (no second edge, no second notification).

    Args:
        requester: Identity sending the request
        receiver: Identity (or its primary key) receiving it
        preset_name: Preset the requester discloses (optional)

    Returns:
        The pending requester->receiver edge

    Raises:
        LinkmanError: INVALID_PRESET, IDENTITY_NOT_FOUND, SELF_FOLLOW,
            ALREADY_FOLLOWING, REQUEST_PENDING
    """
    preset_name = validate_preset_name(preset_name)
    receiver = resolve_user(receiver)
    if requester.pk == receiver.pk:
        raise LinkmanError("SELF_FOLLOW")

    with transaction.atomic():
        profiles = lock_pair(requester, receiver)
        edges = edges_between(requester, receiver)
        outgoing = edges.get(requester.pk)
        incoming = edges.get(receiver.pk)

        if any(edge.is_approved for edge in edges.values()):
            raise LinkmanError("ALREADY_FOLLOWING", user_id=str(receiver.pk))
        if incoming is not None:
            raise LinkmanError("REQUEST_PENDING", contact_id=str(incoming.pk))

        resubmission = outgoing is not None
        if outgoing is None:
            outgoing = Contact(sender=requester, receiver=receiver)

        facets = SharedData.from_raw(outgoing.shared_data)
        if preset_name:
            outgoing.sender_preset = preset_name
            facets = SharedData(
                sender=project(profiles[requester.pk], preset_name),
                receiver=facets.receiver,
            )

        outgoing.status = Contact.Status.PENDING
        outgoing.shared_data = facets.as_dict()
        outgoing.save()

        if not resubmission:
            notify(
                receiver,
                EventKind.FOLLOW,
                {"contact_id": str(outgoing.pk), **_actor_payload(requester)},
                actor=requester,
                sender=Contact,
            )
            emit(follow_requested, Contact, contact=outgoing)

    logger.info(
        "Follow %s: %s -> %s (preset=%s)",
        "resubmitted" if resubmission else "requested",
        requester.pk,
        receiver.pk,
        preset_name,
    )
    return outgoing


def approve(approver, contact_id, preset_name: str | None = None) -> Contact:
    """
    Approve a pending follow request addressed to ``approver``.

    The approver's facet is projected from ``preset_name``; the requester's
    facet is re-projected from the preset stored on the request, since their
    profile may have changed. Both directions are then reconciled.

    Returns:
        The approved request edge (requester -> approver)

    Raises:
        LinkmanError: INVALID_PRESET, CONTACT_NOT_FOUND, NOT_RECEIVER, ALREADY_APPROVED
    """
    preset_name = validate_preset_name(preset_name)
    contact = get_contact(contact_id)

    if contact.receiver_id != approver.pk:
        raise LinkmanError("NOT_RECEIVER", contact_id=str(contact.pk))

    requester = contact.sender
    with transaction.atomic():
        profiles = lock_pair(requester, approver)
        try:
            contact = Contact.objects.select_for_update().get(pk=contact.pk)
        except Contact.DoesNotExist:
            raise LinkmanError("CONTACT_NOT_FOUND", contact_id=str(contact_id))
        if contact.is_approved:
            raise LinkmanError("ALREADY_APPROVED", contact_id=str(contact.pk))

        facets = SharedData.from_raw(contact.shared_data)

        approver_preset = preset_name or contact.receiver_preset
        approver_facet = facets.receiver
        if approver_preset:
            approver_facet = project(profiles[approver.pk], approver_preset)

        requester_facet = facets.sender
        if contact.sender_preset:
            requester_facet = project(profiles[requester.pk], contact.sender_preset)

        forward, reverse = establish(
            requester,
            approver,
            sender_preset=contact.sender_preset,
            receiver_preset=approver_preset,
            sender_facet=requester_facet,
            receiver_facet=approver_facet,
        )

        notify(
            requester,
            EventKind.FOLLOW_APPROVED,
            {"contact_id": str(forward.pk), **_actor_payload(approver)},
            actor=approver,
            sender=Contact,
        )
        emit(follow_approved, Contact, contact=forward, reverse=reverse)

    logger.info("Follow approved: %s -> %s (preset=%s)", requester.pk, approver.pk, approver_preset)
    return forward


def decline(receiver, contact_id) -> None:
    """
    Reject a pending request addressed to ``receiver``. The requester is not notified.

    Raises:
        LinkmanError: CONTACT_NOT_FOUND, NOT_RECEIVER, ALREADY_APPROVED
    """
    contact = get_contact(contact_id)
    if contact.receiver_id != receiver.pk:
        raise LinkmanError("NOT_RECEIVER", contact_id=str(contact.pk))

    with transaction.atomic():
        lock_pair(contact.sender, receiver)
        deleted, _ = (
            Contact.objects.filter(pk=contact.pk, status=Contact.Status.PENDING).delete()
        )
        if not deleted:
            if Contact.objects.filter(pk=contact.pk).exists():
                raise LinkmanError("ALREADY_APPROVED", contact_id=str(contact.pk))
            raise LinkmanError("CONTACT_NOT_FOUND", contact_id=str(contact.pk))

    logger.info("Follow declined: %s -> %s", contact.sender_id, receiver.pk)


def cancel(requester, receiver) -> None:
    """
    Withdraw ``requester``'s own pending request to ``receiver``.

    Raises:
        LinkmanError: IDENTITY_NOT_FOUND, CONTACT_NOT_FOUND
    """
    receiver = resolve_user(receiver)
    with transaction.atomic():
        lock_pair(requester, receiver)
        deleted, _ = Contact.objects.filter(
            sender=requester, receiver=receiver, status=Contact.Status.PENDING
        ).delete()
    if not deleted:
        raise LinkmanError("CONTACT_NOT_FOUND", user_id=str(receiver.pk))
    logger.info("Follow cancelled: %s -> %s", requester.pk, receiver.pk)


def unfollow(user, other=None, contact_id=None) -> int:
    """
    Remove the relationship between ``user`` and a counterpart.

    The counterpart is identified by exactly one of ``other`` (identity or
    primary key) or ``contact_id`` (either directional edge). Every edge
    between the pair is deleted in one statement.

    Returns:
        Number of edges deleted

    Raises:
        LinkmanError: INVALID_REQUEST, IDENTITY_NOT_FOUND, CONTACT_NOT_FOUND
    """
    if (other is None) == (contact_id is None):
        raise LinkmanError(
            "INVALID_REQUEST", message="Either contact_id or user_id is required"
        )

    if contact_id is not None:
        contact = get_contact(contact_id)
        if not contact.is_participant(user):
            raise LinkmanError("CONTACT_NOT_FOUND", contact_id=str(contact_id))
        other = contact.other(user)
    else:
        other = resolve_user(other)
        if other.pk == user.pk:
            raise LinkmanError("CONTACT_NOT_FOUND", user_id=str(other.pk))

    with transaction.atomic():
        lock_pair(user, other)
        deleted, _ = Contact.objects.between(user, other).delete()
        if not deleted:
            raise LinkmanError("CONTACT_NOT_FOUND", user_id=str(other.pk))

        notify(
            other,
            EventKind.UNFOLLOW,
            _actor_payload(user),
            actor=user,
            sender=Contact,
        )
        emit(contact_removed, Contact, user=user, other=other, deleted=deleted)

    logger.info("Contact removed: %s <-> %s (%d edges)", user.pk, other.pk, deleted)
    return deleted


# ======================================================================
# Queries
# ======================================================================


def list_contacts(viewer) -> list[ContactEntry]:
    """
    Approved contacts of ``viewer``, one entry per counterpart.

    ``shared_data`` is what the counterpart disclosed to the viewer.
    """
    edges = (
        Contact.objects.approved()
        .touching(viewer)
        .select_related("sender", "receiver")
        .order_by("-approved_at", "-created_at")
    )

    entries: dict = {}
    for edge in edges:
        other_id = edge.other_id(viewer)
        existing = entries.get(other_id)
        # Prefer the viewer's own outgoing edge; both carry the same facets
        if existing is not None and edge.sender_id != viewer.pk:
            continue
        entries[other_id] = ContactEntry(
            contact_id=str(edge.pk),
            other=edge.other(viewer),
            shared_data=facet_for(edge, viewer),
            viewer_preset=edge.preset_of(viewer),
            since=edge.approved_at,
        )
    return list(entries.values())


def list_pending(viewer) -> list[Contact]:
    """Pending requests received by ``viewer`` (newest first)."""
    return list(
        Contact.objects.pending()
        .filter(receiver=viewer)
        .select_related("sender")
        .order_by("-created_at")
    )


def list_outgoing(viewer) -> list[Contact]:
    """Pending requests sent by ``viewer`` (newest first)."""
    return list(
        Contact.objects.pending()
        .filter(sender=viewer)
        .select_related("receiver")
        .order_by("-created_at")
    )


def relationship(a, b) -> str:
    """State of the pair from ``a``'s perspective."""
    edges = {e.sender_id: e for e in Contact.objects.between(a, b)}
    if any(edge.is_approved for edge in edges.values()):
        return Relationship.APPROVED
    if a.pk in edges:
        return Relationship.PENDING_OUTGOING
    if b.pk in edges:
        return Relationship.PENDING_INCOMING
    return Relationship.NONE
