"""Store contact events as inbox notifications."""

import logging

from django.db import transaction
from django.dispatch import receiver

from linkman.contrib.inbox.models import Notification, NotificationKind
from linkman.signals import contact_event

logger = logging.getLogger(__name__)

CONTACTS_LINK = "/contacts"


def render(kind: str, payload: dict) -> tuple[str, str]:
    """Title and message for an event kind."""
    name = payload.get("name") or "Someone"
    if kind == NotificationKind.FOLLOW:
        return "New Follow Request", f"{name} wants to follow you"
    if kind == NotificationKind.FOLLOW_APPROVED:
        return "Follow Request Approved", f"{name} approved your follow request"
    if kind == NotificationKind.UNFOLLOW:
        return "Contact Removed", f"{name} unfollowed you"
    if kind == NotificationKind.QR_SCAN:
        if payload.get("role") == "redeemer":
            return "Contact Added", f"You successfully scanned {name}'s QR code"
        return "QR Code Scanned", f"{name} scanned your QR code and was added as a contact"
    return kind, ""


@receiver(contact_event, dispatch_uid="linkman_inbox_store")
def store_notification(sender, target, kind, payload=None, actor=None, **kwargs):
    payload = payload or {}
    title, message = render(kind, payload)
    with transaction.atomic():
        Notification.objects.create(
            user=target,
            actor=actor,
            kind=kind,
            title=title,
            message=message,
            link=CONTACTS_LINK,
            payload=payload,
        )
    logger.debug("Inbox notification stored for user %s (%s)", target.pk, kind)
