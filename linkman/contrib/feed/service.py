"""Feed service - publish and read network-scoped posts."""

import logging

from linkman.contrib.feed.models import Post, PostNetwork, PostVisibility
from linkman.exceptions import LinkmanError
from linkman.services.graph import resolve_user
from linkman.services.network import audiences, can_view, visible_q

logger = logging.getLogger(__name__)


class FeedService:
    """
    Service for feed operations.

    Uses @classmethod for extensibility (consistent with other contrib services).
    Every read computes the viewer's audience sets once, from one snapshot of
    the contact graph.
    """

    @classmethod
    def publish(
        cls,
        author,
        content: str,
        network_type: str = PostNetwork.BOTH,
        visibility: str = PostVisibility.PUBLIC,
        module: str = "",
    ) -> Post:
        """
        Create a post.

        Args:
            author: Posting identity
            content: Post body
            network_type: Audience class (personal, professional, both)
            visibility: public, followers or private
            module: Product area tag

        Returns:
            Created Post

        Raises:
            LinkmanError: INVALID_REQUEST for empty content or unknown choices
        """
        if not content or not content.strip():
            raise LinkmanError("INVALID_REQUEST", message="Content is required")
        if network_type not in PostNetwork.values:
            raise LinkmanError(
                "INVALID_REQUEST",
                message="Invalid network type",
                network_type=network_type,
            )
        if visibility not in PostVisibility.values:
            raise LinkmanError(
                "INVALID_REQUEST",
                message="Invalid visibility",
                visibility=visibility,
            )

        post = Post.objects.create(
            author=author,
            content=content,
            network_type=network_type,
            visibility=visibility,
            module=module,
        )
        logger.info("Post %s published by user %s (%s)", post.pk, author.pk, network_type)
        return post

    @classmethod
    def timeline(cls, viewer, module: str | None = None, limit: int = 20) -> list[Post]:
        """
        Posts the viewer may see: their own plus those addressed to them.

        Args:
            viewer: Reading identity
            module: Filter by module (optional)
            limit: Max posts to return

        Returns:
            List of Post, most recent first
        """
        qs = Post.objects.filter(visible_q(viewer)).select_related("author")
        if module:
            qs = qs.filter(module=module)
        return list(qs.order_by("-created_at", "-pk")[:limit])

    @classmethod
    def for_author(cls, viewer, author, limit: int = 20) -> list[Post]:
        """
        One author's posts, as visible to ``viewer``.

        Raises:
            LinkmanError: IDENTITY_NOT_FOUND
        """
        author = resolve_user(author)
        qs = Post.objects.filter(author=author).filter(visible_q(viewer))
        return list(qs.order_by("-created_at", "-pk")[:limit])

    @classmethod
    def is_visible(cls, viewer, post: Post) -> bool:
        """Single-post check, same rule as timeline()."""
        sets = audiences(viewer) if viewer is not None else None
        return can_view(
            viewer,
            post.author_id,
            post.network_type,
            visibility=post.visibility,
            sets=sets,
        )
