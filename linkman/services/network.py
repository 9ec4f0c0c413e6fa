"""Network service - visibility classes derived from the contact graph.

For a viewer, every approved counterpart falls into up to three classes:

    personal      - the viewer's preset on the edge is personal, or custom
                    disclosing any of email/phone/bio/handles
    professional  - professional, or custom disclosing company/position/education
    both          - every approved counterpart, whatever the preset

Classes are recomputed on every call (presets change between requests) from
a single query, so one feed request always sees one snapshot of the graph.
"""

from dataclasses import dataclass, field

from django.db.models import Q

from linkman.models import Contact
from linkman.presets import PERSONAL_FIELDS, PROFESSIONAL_FIELDS, PresetName
from linkman.projection import SharedData


class NetworkType:
    PERSONAL = "personal"
    PROFESSIONAL = "professional"
    BOTH = "both"

    ALL = (PERSONAL, PROFESSIONAL, BOTH)


class Visibility:
    PUBLIC = "public"
    FOLLOWERS = "followers"
    PRIVATE = "private"

    ALL = (PUBLIC, FOLLOWERS, PRIVATE)


@dataclass
class NetworkSets:
    """Identity ids per visibility class."""

    personal: set = field(default_factory=set)
    professional: set = field(default_factory=set)
    both: set = field(default_factory=set)

    def for_type(self, network_type: str) -> set:
        if network_type == NetworkType.PERSONAL:
            return self.personal
        if network_type == NetworkType.PROFESSIONAL:
            return self.professional
        if network_type == NetworkType.BOTH:
            return self.both
        return set()


def classes_for(preset: str | None, facet: dict | None) -> set[str]:
    """
    Classes a counterpart joins given the classifying identity's preset and
    the facet that identity disclosed on the edge. ``both`` is implied.
    """
    if preset == PresetName.PERSONAL:
        return {NetworkType.PERSONAL}
    if preset == PresetName.PROFESSIONAL:
        return {NetworkType.PROFESSIONAL}
    if preset == PresetName.CUSTOM:
        disclosed = {key for key, value in (facet or {}).items() if value}
        classes = set()
        if disclosed & PERSONAL_FIELDS:
            classes.add(NetworkType.PERSONAL)
        if disclosed & PROFESSIONAL_FIELDS:
            classes.add(NetworkType.PROFESSIONAL)
        return classes
    return set()


def _snapshot(user) -> list[Contact]:
    return list(Contact.objects.approved().touching(user).order_by())


def _add(sets: NetworkSets, other_id, classes: set[str]) -> None:
    sets.both.add(other_id)
    if NetworkType.PERSONAL in classes:
        sets.personal.add(other_id)
    if NetworkType.PROFESSIONAL in classes:
        sets.professional.add(other_id)


def classify(viewer, edges: list[Contact] | None = None) -> NetworkSets:
    """
    Partition the viewer's approved counterparts by the viewer's own presets.

    Args:
        viewer: Classifying identity
        edges: Approved edges touching the viewer (one snapshot); queried if omitted

    Returns:
        NetworkSets of counterpart ids
    """
    if edges is None:
        edges = _snapshot(viewer)

    sets = NetworkSets()
    for edge in edges:
        facets = SharedData.from_raw(edge.shared_data)
        if edge.sender_id == viewer.pk:
            other_id, preset, facet = edge.receiver_id, edge.sender_preset, facets.sender
        elif edge.receiver_id == viewer.pk:
            other_id, preset, facet = edge.sender_id, edge.receiver_preset, facets.receiver
        else:
            continue
        _add(sets, other_id, classes_for(preset, facet))
    return sets


def audiences(viewer, edges: list[Contact] | None = None) -> NetworkSets:
    """
    Owners whose own classification includes ``viewer``.

    ``owner in audiences(viewer).personal`` holds exactly when
    ``viewer in classify(owner).personal``; it is computed from the viewer's
    edges alone, using the counterpart's preset and facet on each edge.
    """
    if edges is None:
        edges = _snapshot(viewer)

    sets = NetworkSets()
    for edge in edges:
        facets = SharedData.from_raw(edge.shared_data)
        if edge.receiver_id == viewer.pk:
            owner_id, preset, facet = edge.sender_id, edge.sender_preset, facets.sender
        elif edge.sender_id == viewer.pk:
            owner_id, preset, facet = edge.receiver_id, edge.receiver_preset, facets.receiver
        else:
            continue
        _add(sets, owner_id, classes_for(preset, facet))
    return sets


def can_view(
    viewer,
    owner_id,
    network_type: str,
    visibility: str = Visibility.PUBLIC,
    sets: NetworkSets | None = None,
) -> bool:
    """
    Whether ``viewer`` may see an item owned by ``owner_id``.

    Rules:
        - the owner always sees their own items
        - private items are visible to the owner only
        - both-typed items: viewer in the owner's ``both`` set
        - personal/professional items: viewer in the owner's matching set

    Args:
        sets: audiences(viewer), to reuse one snapshot across many items
    """
    if viewer is not None and owner_id == viewer.pk:
        return True
    if viewer is None or visibility == Visibility.PRIVATE:
        return False
    if visibility not in (Visibility.PUBLIC, Visibility.FOLLOWERS):
        return False
    if sets is None:
        sets = audiences(viewer)
    return owner_id in sets.for_type(network_type)


def visible_q(viewer, owner_field: str = "author", sets: NetworkSets | None = None) -> Q:
    """
    The can_view() rule as a queryset filter.

    Expects the content model to have ``<owner_field>``, ``network_type`` and
    ``visibility`` fields. Anonymous viewers match nothing.
    """
    if viewer is None:
        return Q(pk__in=[])
    if sets is None:
        sets = audiences(viewer)

    owner_id = f"{owner_field}_id"
    shared = Q(visibility__in=[Visibility.PUBLIC, Visibility.FOLLOWERS])
    q = Q(**{owner_id: viewer.pk})
    for network_type in NetworkType.ALL:
        members = sets.for_type(network_type)
        if members:
            q |= shared & Q(network_type=network_type) & Q(**{f"{owner_id}__in": members})
    return q
