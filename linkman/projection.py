"""
Shared-data projection.

``project()`` turns a profile plus a preset name into the minimal document an
identity discloses to one contact. ``SharedData`` is the two-facet structure
cached on every ``Contact``:

    {"sender": <what the sender discloses>, "receiver": <what the receiver discloses>}

Direction is always explicit. A malformed blob is read as two empty facets,
never as a facet itself.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from linkman.presets import DISCLOSABLE_FIELDS

if TYPE_CHECKING:
    from linkman.models import Contact, Profile


def project(profile: "Profile", preset_name: str | None) -> dict:
    """
    Disclosed-field document for ``profile`` under ``preset_name``.

    Name and handle are always included. Any other field is included only when
    its flag is true and the profile value is non-empty.
    """
    flags = profile.flags_for(preset_name)
    disclosed = {
        "display_name": profile.display_name,
        "handle": profile.handle,
    }
    for field in DISCLOSABLE_FIELDS:
        if flags.get(field) is not True:
            continue
        value = profile.field_value(field)
        if value:
            disclosed[field] = value
    return disclosed


@dataclass(frozen=True)
class SharedData:
    """Both disclosure facets of one directional edge."""

    sender: dict | None = None
    receiver: dict | None = None

    @classmethod
    def from_raw(cls, raw) -> "SharedData":
        if not isinstance(raw, dict):
            return cls()
        return cls(
            sender=_facet_or_none(raw.get("sender")),
            receiver=_facet_or_none(raw.get("receiver")),
        )

    def as_dict(self) -> dict:
        return {"sender": self.sender, "receiver": self.receiver}

    def mirrored(self) -> "SharedData":
        """The same facets seen from the reverse edge."""
        return SharedData(sender=self.receiver, receiver=self.sender)


def _facet_or_none(value) -> dict | None:
    if isinstance(value, dict):
        return value
    return None


def facet_of(edge: "Contact", user) -> dict | None:
    """What ``user`` disclosed on ``edge``."""
    facets = SharedData.from_raw(edge.shared_data)
    if edge.sender_id == user.pk:
        return facets.sender
    if edge.receiver_id == user.pk:
        return facets.receiver
    return None


def facet_for(edge: "Contact", viewer) -> dict | None:
    """What the counterpart disclosed to ``viewer`` on ``edge``."""
    facets = SharedData.from_raw(edge.shared_data)
    if edge.sender_id == viewer.pk:
        return facets.receiver
    if edge.receiver_id == viewer.pk:
        return facets.sender
    return None
