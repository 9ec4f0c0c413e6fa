"""Inbox service - read and acknowledge notifications."""

from linkman.contrib.inbox.models import Notification


class InboxService:
    """
    Service for inbox operations.

    Uses @classmethod for extensibility (consistent with other contrib services).
    """

    @classmethod
    def list(cls, user, unread_only: bool = False, limit: int = 50) -> list[Notification]:
        """
        User's notifications (most recent first).

        Args:
            user: Inbox owner
            unread_only: Only unread notifications
            limit: Max notifications to return
        """
        qs = Notification.objects.filter(user=user).select_related("actor")
        if unread_only:
            qs = qs.filter(is_read=False)
        return list(qs.order_by("-created_at", "-pk")[:limit])

    @classmethod
    def unread_count(cls, user) -> int:
        return Notification.objects.filter(user=user, is_read=False).count()

    @classmethod
    def mark_read(cls, user, ids=None) -> int:
        """
        Mark notifications as read.

        Args:
            user: Inbox owner; other users' notifications are never touched
            ids: Notification ids, or None for all

        Returns:
            Number of notifications updated
        """
        qs = Notification.objects.filter(user=user, is_read=False)
        if ids is not None:
            qs = qs.filter(pk__in=ids)
        return qs.update(is_read=True)
