"""Profile model - per-identity profile and disclosure presets."""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from linkman.presets import default_presets


class Profile(models.Model):
    """
    Profile of an identity (the project's user model).

    Holds the free-text attributes that can be disclosed to contacts and the
    owner's preset configuration. An empty ``presets`` map means "use the
    implicit defaults".
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="linkman_profile",
        verbose_name=_("user"),
    )

    bio = models.TextField(_("bio"), blank=True)
    company = models.CharField(_("company"), max_length=200, blank=True)
    position = models.CharField(_("position"), max_length=200, blank=True)
    phone = models.CharField(_("phone"), max_length=32, blank=True)
    education = models.CharField(_("education"), max_length=200, blank=True)
    handles = models.JSONField(
        _("handles"),
        default=dict,
        blank=True,
        help_text=_('Social handles, e.g. {"github": "ada"}'),
    )
    avatar = models.CharField(
        _("avatar"),
        max_length=500,
        blank=True,
        help_text=_("Reference to the hosted avatar image"),
    )

    presets = models.JSONField(
        _("presets"),
        default=dict,
        blank=True,
        help_text=_("preset_name -> {field: bool}. Empty means defaults."),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "linkman_profile"
        verbose_name = _("profile")
        verbose_name_plural = _("profiles")

    def __str__(self):
        return f"Profile({self.handle})"

    @classmethod
    def for_user(cls, user) -> "Profile":
        """Get or lazily create the profile of ``user``."""
        profile, _ = cls.objects.select_related("user").get_or_create(user=user)
        return profile

    @property
    def display_name(self) -> str:
        """Full name, falling back to the username."""
        full_name = self.user.get_full_name().strip()
        return full_name or self.user.get_username()

    @property
    def handle(self) -> str:
        return self.user.get_username()

    @property
    def email(self) -> str:
        return getattr(self.user, "email", "") or ""

    @property
    def effective_presets(self) -> dict[str, dict[str, bool]]:
        """Configured presets, or the implicit defaults when none are configured."""
        if self.presets:
            return self.presets
        return default_presets()

    def flags_for(self, preset_name: str | None) -> dict[str, bool]:
        """Flag map of one preset. Unknown or absent presets disclose nothing."""
        if not preset_name:
            return {}
        return self.effective_presets.get(preset_name) or {}

    def field_value(self, field: str):
        """Profile value of a disclosable field."""
        if field == "email":
            return self.email
        return getattr(self, field)
