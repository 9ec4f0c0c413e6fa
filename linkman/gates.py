"""
Linkman Gates - Relationship invariants.

G1: PresetName - Preset name belongs to the closed set
G2: DistinctParticipants - An edge never connects an identity to itself
G3: RelationshipSymmetry - Approved relationships exist in both directions
G4: EdgeUniqueness - At most one edge per ordered (sender, receiver)

A GateError raised inside a graph mutation is an integrity failure: it is
logged and aborts the surrounding transaction.
"""

from dataclasses import dataclass

from linkman.presets import PRESET_NAMES


class GateError(Exception):
    """Gate validation error."""

    def __init__(self, gate_name: str, message: str, details: dict | None = None):
        self.gate_name = gate_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{gate_name}] {message}")


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Linkman validation gates."""

    # =========================================================================
    # G1: Preset Name
    # =========================================================================

    @classmethod
    def preset_name(cls, name: str | None, allow_none: bool = True) -> GateResult:
        """
        G1: Preset name is one of personal, professional, custom.

        Raises:
            GateError: If the name is outside the closed set
        """
        if name is None and allow_none:
            return GateResult(True, "G1_PresetName", "No preset")
        if name not in PRESET_NAMES:
            raise GateError(
                "G1_PresetName",
                f"Unknown preset: {name}",
                {"allowed": sorted(PRESET_NAMES)},
            )
        return GateResult(True, "G1_PresetName")

    @classmethod
    def check_preset_name(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.preset_name(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G2: Distinct Participants
    # =========================================================================

    @classmethod
    def distinct_participants(cls, a_id, b_id) -> GateResult:
        """
        G2: Both ends of an edge are different identities.

        Raises:
            GateError: If both ids are equal
        """
        if a_id == b_id:
            raise GateError(
                "G2_DistinctParticipants",
                "An identity cannot be its own contact.",
                {"identity_id": str(a_id)},
            )
        return GateResult(True, "G2_DistinctParticipants")

    @classmethod
    def check_distinct_participants(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.distinct_participants(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G3: Relationship Symmetry
    # =========================================================================

    @classmethod
    def relationship_symmetry(cls, a_id, b_id) -> GateResult:
        """
        G3: If either direction is approved, both directions exist and are approved.

        Args:
            a_id: One participant's primary key
            b_id: The other participant's primary key

        Raises:
            GateError: On a one-directional approval or a missing reverse edge
        """
        from linkman.models import Contact

        statuses = dict(
            Contact.objects.between(a_id, b_id).values_list("sender_id", "status")
        )
        approved = [s for s in statuses.values() if s == Contact.Status.APPROVED]
        if approved and (len(statuses) != 2 or len(approved) != 2):
            raise GateError(
                "G3_RelationshipSymmetry",
                "Approved relationship is not symmetric.",
                {
                    "a": str(a_id),
                    "b": str(b_id),
                    "statuses": {str(k): v for k, v in statuses.items()},
                },
            )
        return GateResult(True, "G3_RelationshipSymmetry")

    @classmethod
    def check_relationship_symmetry(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.relationship_symmetry(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G4: Edge Uniqueness
    # =========================================================================

    @classmethod
    def edge_uniqueness(cls, a_id, b_id) -> GateResult:
        """
        G4: At most one edge per ordered (sender, receiver).

        The database constraint makes this unreachable in steady state; the gate
        guards data loaded from older schemas.

        Raises:
            GateError: If a direction holds more than one edge
        """
        from django.db.models import Count

        from linkman.models import Contact

        duplicated = list(
            Contact.objects.between(a_id, b_id)
            .order_by()
            .values("sender_id", "receiver_id")
            .annotate(n=Count("id"))
            .filter(n__gt=1)
        )
        if duplicated:
            raise GateError(
                "G4_EdgeUniqueness",
                "Duplicate edges for the same direction.",
                {"duplicated": [
                    {"sender": str(d["sender_id"]), "receiver": str(d["receiver_id"]), "count": d["n"]}
                    for d in duplicated
                ]},
            )
        return GateResult(True, "G4_EdgeUniqueness")

    @classmethod
    def check_edge_uniqueness(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.edge_uniqueness(*args, **kwargs)
            return True
        except GateError:
            return False
