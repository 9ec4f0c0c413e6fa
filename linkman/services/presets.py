"""Preset service - preset configuration and facet cache refresh.

Facets cached on Contact.shared_data are derived data. Whenever a profile,
its presets or the identity's name/email change, refresh_facets() recomputes
every facet that identity discloses.
"""

import logging

from django.db import transaction

from linkman.models import Contact, Profile
from linkman.notifications import emit
from linkman.presets import validate_flags, validate_preset_name
from linkman.projection import SharedData, project
from linkman.signals import facets_refreshed

logger = logging.getLogger(__name__)


def get_presets(user) -> dict[str, dict[str, bool]]:
    """Effective presets of ``user`` (configured, or the implicit defaults)."""
    return Profile.for_user(user).effective_presets


def update_presets(user, changes: dict) -> dict[str, dict[str, bool]]:
    """
    Merge preset changes into the user's configuration.

    Merging is per field: ``{"custom": {"phone": True}}`` only flips ``phone``
    in the custom preset. Saving the profile refreshes every cached facet.

    Args:
        user: Preset owner
        changes: {preset_name: {field: bool}}

    Returns:
        The updated effective presets

    Raises:
        LinkmanError: INVALID_PRESET / INVALID_PRESET_FIELD (nothing is saved)
    """
    validated = {}
    for name, flags in (changes or {}).items():
        validate_preset_name(name, allow_none=False)
        validated[name] = validate_flags(name, flags)

    with transaction.atomic():
        profile = Profile.for_user(user)
        profile = Profile.objects.select_for_update().get(pk=profile.pk)

        merged = {name: dict(flags) for name, flags in profile.effective_presets.items()}
        for name, flags in validated.items():
            merged.setdefault(name, {}).update(flags)

        profile.presets = merged
        profile.save(update_fields=["presets", "updated_at"])

    logger.info("Presets updated for user %s: %s", user.pk, sorted(validated))
    return merged


def preview(user, preset_name: str) -> dict:
    """What ``user`` would disclose under ``preset_name``."""
    validate_preset_name(preset_name, allow_none=False)
    return project(Profile.for_user(user), preset_name)


def refresh_facets(user) -> int:
    """
    Recompute every facet ``user`` discloses on any edge.

    Edges without a preset for the user keep their facet untouched.

    Returns:
        Number of edges updated
    """
    profile = Profile.for_user(user)
    updated = 0

    with transaction.atomic():
        edges = Contact.objects.select_for_update().touching(user)
        for edge in edges:
            preset = edge.preset_of(user)
            if not preset:
                continue

            facets = SharedData.from_raw(edge.shared_data)
            facet = project(profile, preset)
            if edge.sender_id == user.pk:
                if facets.sender == facet:
                    continue
                facets = SharedData(sender=facet, receiver=facets.receiver)
            else:
                if facets.receiver == facet:
                    continue
                facets = SharedData(sender=facets.sender, receiver=facet)

            edge.shared_data = facets.as_dict()
            edge.save(update_fields=["shared_data", "updated_at"])
            updated += 1

    if updated:
        logger.info("Refreshed %d facets for user %s", updated, user.pk)
        emit(facets_refreshed, Profile, user=user, updated=updated)
    return updated
