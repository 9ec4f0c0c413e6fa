"""
Django Linkman - Contact relationships and disclosure presets.

Usage:
    from linkman.services import contacts, qr, network
    from linkman.gates import Gates, GateError
    from linkman.exceptions import LinkmanError

    edge = contacts.follow(alice, bob, preset_name="professional")
    contacts.approve(bob, edge.id, preset_name="personal")

    grant = qr.generate(alice, "personal")
    qr.redeem(carol, grant.token, "professional")

    sets = network.classify(alice)
"""


def __getattr__(name):
    if name == "Gates":
        from linkman.gates import Gates

        return Gates
    if name == "GateError":
        from linkman.gates import GateError

        return GateError
    if name == "LinkmanError":
        from linkman.exceptions import LinkmanError

        return LinkmanError
    if name == "project":
        from linkman.projection import project

        return project
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Gates", "GateError", "LinkmanError", "project"]
__version__ = "0.1.0"
