"""
Disclosure presets.

A preset maps profile fields to "reveal" flags. Every identity owns the same
three named presets; the flags are theirs to configure.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from linkman.exceptions import LinkmanError


class PresetName(models.TextChoices):
    PERSONAL = "personal", _("Personal")
    PROFESSIONAL = "professional", _("Professional")
    CUSTOM = "custom", _("Custom")


PRESET_NAMES = frozenset(PresetName.values)

DISCLOSABLE_FIELDS = (
    "email",
    "phone",
    "company",
    "position",
    "education",
    "bio",
    "handles",
    "avatar",
)

# Fields whose disclosure under a custom preset marks the contact as personal
PERSONAL_FIELDS = frozenset({"email", "phone", "bio", "handles"})

# ... or as professional
PROFESSIONAL_FIELDS = frozenset({"company", "position", "education"})

DEFAULT_PRESETS = {
    PresetName.PERSONAL: {
        "email": True,
        "phone": True,
        "bio": True,
        "handles": True,
    },
    PresetName.PROFESSIONAL: {
        "email": True,
        "company": True,
        "position": True,
        "education": True,
        "bio": True,
        "handles": True,
    },
    PresetName.CUSTOM: {
        "email": False,
        "phone": False,
        "company": False,
        "position": False,
        "education": False,
        "bio": True,
        "handles": True,
    },
}


def default_presets() -> dict[str, dict[str, bool]]:
    """Fresh copy of the implicit presets (safe to mutate)."""
    return {str(name): dict(flags) for name, flags in DEFAULT_PRESETS.items()}


def validate_preset_name(name: str | None, allow_none: bool = True) -> str | None:
    """
    Return the preset name if it passes G1 (closed set).

    Raises:
        LinkmanError: INVALID_PRESET for unknown names (or None when not allowed)
    """
    from linkman.gates import GateError, Gates

    if name == "":
        name = None
    try:
        Gates.preset_name(name, allow_none=allow_none)
    except GateError as e:
        raise LinkmanError("INVALID_PRESET", preset_name=name) from e
    return None if name is None else str(name)


def validate_flags(preset_name: str, flags) -> dict[str, bool]:
    """
    Validate one preset's flag map.

    Raises:
        LinkmanError: INVALID_PRESET_FIELD for unknown fields or non-boolean values
    """
    if not isinstance(flags, dict):
        raise LinkmanError(
            "INVALID_PRESET_FIELD",
            message="Preset flags must be a mapping",
            preset_name=preset_name,
        )
    for field, value in flags.items():
        if field not in DISCLOSABLE_FIELDS:
            raise LinkmanError(
                "INVALID_PRESET_FIELD",
                message=f"Unknown field '{field}'",
                preset_name=preset_name,
                field=field,
            )
        if not isinstance(value, bool):
            raise LinkmanError(
                "INVALID_PRESET_FIELD",
                message=f"Flag '{field}' must be a boolean",
                preset_name=preset_name,
                field=field,
            )
    return dict(flags)
