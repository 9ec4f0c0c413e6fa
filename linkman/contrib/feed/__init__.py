"""
Linkman Feed - posts gated by the network classifier.

Each post targets one audience class (personal, professional or both) of its
author's network. A viewer only sees a post when the author's own
classification places the viewer in that class.

Usage:
    INSTALLED_APPS = [
        ...
        "linkman",
        "linkman.contrib.feed",
    ]

    from linkman.contrib.feed import FeedService

    FeedService.publish(author, "Shipping today", network_type="professional")
    posts = FeedService.timeline(viewer)
"""


def __getattr__(name):
    if name == "FeedService":
        from linkman.contrib.feed.service import FeedService

        return FeedService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["FeedService"]
