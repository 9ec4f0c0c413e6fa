"""Linkman models (CORE only).

Contrib models are in their respective modules:
- linkman.contrib.feed: Post
- linkman.contrib.inbox: Notification
"""

from linkman.models.profile import Profile
from linkman.models.contact import Contact, ContactQuerySet
from linkman.models.qr_token import QrToken

__all__ = [
    # Identity-owned disclosure configuration
    "Profile",
    # Relationship graph
    "Contact",
    "ContactQuerySet",
    # Bootstrap tokens
    "QrToken",
]
