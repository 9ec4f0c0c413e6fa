"""
Notification fan-out.

Graph mutations call ``notify()`` / ``emit()``; delivery happens through Django
signals once the surrounding transaction commits. Delivery problems are
logged and never fail the graph mutation.
"""

import logging

from django.db import DatabaseError, transaction

from linkman.conf import linkman_settings
from linkman.signals import contact_event

logger = logging.getLogger(__name__)


class EventKind:
    FOLLOW = "follow"
    FOLLOW_APPROVED = "follow_approved"
    UNFOLLOW = "unfollow"
    QR_SCAN = "qr_scan"


def _deliver(signal, sender, **kwargs) -> bool:
    """Send robustly and log failing receivers. Returns True if a database error occurred."""
    try:
        responses = signal.send_robust(sender=sender, **kwargs)
    except Exception:
        logger.exception("Notification dispatch failed for %r", sender)
        return False
    database_error = False
    for receiver, response in responses:
        if isinstance(response, Exception):
            database_error = database_error or isinstance(response, DatabaseError)
            logger.warning(
                "Notification receiver %r failed: %s",
                receiver,
                response,
                exc_info=(type(response), response, response.__traceback__),
            )
    return database_error


def _deliver_in_savepoint(signal, sender, **kwargs) -> None:
    # A receiver's database error is rolled back to this savepoint so the
    # enclosing graph transaction stays usable.
    with transaction.atomic():
        if _deliver(signal, sender, **kwargs):
            transaction.set_rollback(True)


def emit(signal, sender, **kwargs) -> None:
    """
    Send ``signal`` robustly once the current transaction commits.

    With ``NOTIFY_ON_COMMIT`` disabled, receivers run immediately inside a
    savepoint of the current transaction.
    """
    if linkman_settings.NOTIFY_ON_COMMIT:
        transaction.on_commit(lambda: _deliver(signal, sender, **kwargs))
    else:
        _deliver_in_savepoint(signal, sender, **kwargs)


def notify(target, kind: str, payload: dict | None = None, actor=None, sender=None) -> None:
    """
    Fan out ``(target, kind, payload)`` to every ``contact_event`` receiver.

    Args:
        target: Identity to notify
        kind: One of EventKind
        payload: Event data (ids, names)
        actor: Identity that caused the event
        sender: Model class reported as the signal sender
    """
    emit(
        contact_event,
        sender,
        target=target,
        actor=actor,
        kind=kind,
        payload=payload or {},
    )
