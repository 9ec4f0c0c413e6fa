"""Model signal receivers, connected in LinkmanConfig.ready()."""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from linkman.models import Profile

logger = logging.getLogger(__name__)

# Saves that cannot change anything a contact sees
_IGNORED_USER_FIELDS = frozenset({"last_login", "password"})


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="linkman_user_saved")
def user_saved(sender, instance, created, raw=False, update_fields=None, **kwargs):
    """Create the profile of new users; refresh facets when name/email change."""
    if raw:
        return
    if created:
        Profile.objects.get_or_create(user=instance)
        return
    if update_fields and set(update_fields) <= _IGNORED_USER_FIELDS:
        return
    if not Profile.objects.filter(user=instance).exists():
        return

    from linkman.services.presets import refresh_facets

    refresh_facets(instance)


@receiver(post_save, sender=Profile, dispatch_uid="linkman_profile_saved")
def profile_saved(sender, instance, created, raw=False, **kwargs):
    """Cached facets follow the profile and preset configuration."""
    if raw or created:
        return

    from linkman.services.presets import refresh_facets

    refresh_facets(instance.user)
