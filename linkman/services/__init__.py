"""Linkman services (CORE only).

CORE services are exported here. Contrib services are in their respective modules:
- linkman.contrib.feed: FeedService
- linkman.contrib.inbox: InboxService
"""

from linkman.services import presets
from linkman.services import graph
from linkman.services import contacts
from linkman.services import qr
from linkman.services import network

__all__ = ["presets", "graph", "contacts", "qr", "network"]
