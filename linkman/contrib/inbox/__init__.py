"""
Linkman Inbox - stored notifications for contact events.

Subscribes to ``linkman.signals.contact_event`` and keeps one row per
delivered event, so clients can poll for unread items.

Usage:
    INSTALLED_APPS = [
        ...
        "linkman",
        "linkman.contrib.inbox",
    ]

    from linkman.contrib.inbox import InboxService

    InboxService.unread_count(user)
    InboxService.mark_read(user)
"""


def __getattr__(name):
    if name == "InboxService":
        from linkman.contrib.inbox.service import InboxService

        return InboxService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["InboxService"]
