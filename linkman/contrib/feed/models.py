"""Post model - network-scoped content."""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class PostVisibility(models.TextChoices):
    PUBLIC = "public", _("Public")
    FOLLOWERS = "followers", _("Followers")
    PRIVATE = "private", _("Private")


class PostNetwork(models.TextChoices):
    PERSONAL = "personal", _("Personal")
    PROFESSIONAL = "professional", _("Professional")
    BOTH = "both", _("Both")


class Post(models.Model):
    """
    A piece of content addressed to part of the author's network.

    ``network_type`` picks the audience class; ``visibility`` narrows it
    further (private posts are visible to the author only).
    """

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="linkman_posts",
        verbose_name=_("author"),
    )
    content = models.TextField(_("content"))
    module = models.CharField(
        _("module"),
        max_length=50,
        blank=True,
        db_index=True,
        help_text=_("Product area the post belongs to (e.g. updates, jobs)"),
    )
    visibility = models.CharField(
        _("visibility"),
        max_length=20,
        choices=PostVisibility.choices,
        default=PostVisibility.PUBLIC,
    )
    network_type = models.CharField(
        _("network"),
        max_length=20,
        choices=PostNetwork.choices,
        default=PostNetwork.BOTH,
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("post")
        verbose_name_plural = _("posts")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["author", "-created_at"], name="linkman_fee_author__4b9c0d_idx"),
        ]

    def __str__(self):
        return f"[{self.network_type}] {self.content[:40]}"
