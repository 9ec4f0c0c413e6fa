"""Pytest fixtures for Linkman tests."""

import pytest
from django.contrib.auth import get_user_model

from linkman.models import Profile
from linkman.services import qr


@pytest.fixture
def make_user(db):
    """Factory: create an active user with a filled-in profile."""
    User = get_user_model()

    def _make(username, first_name="", last_name="", email="", **profile_fields):
        user = User.objects.create_user(
            username=username,
            email=email,
            password="secret",
            first_name=first_name,
            last_name=last_name,
        )
        if profile_fields:
            profile = Profile.for_user(user)
            for name, value in profile_fields.items():
                setattr(profile, name, value)
            profile.save()
        return user

    return _make


@pytest.fixture
def alice(make_user):
    """Fully filled-in profile."""
    return make_user(
        "alice",
        first_name="Alice",
        last_name="Liddell",
        email="alice@example.com",
        bio="Curious explorer",
        phone="+1 555 0100",
        company="Wonderland Ltd",
        position="Explorer",
        education="Oxford",
        handles={"github": "alice"},
        avatar="avatars/alice.png",
    )


@pytest.fixture
def bob(make_user):
    """No handles, no education."""
    return make_user(
        "bob",
        first_name="Bob",
        last_name="Builder",
        email="bob@example.com",
        bio="Can we fix it?",
        phone="+1 555 0101",
        company="Acme",
        position="Engineer",
    )


@pytest.fixture
def carol(make_user):
    """Username only."""
    return make_user("carol")


@pytest.fixture
def dave(make_user):
    return make_user("dave", first_name="Dave", email="dave@example.com", company="Initech")


@pytest.fixture
def connect():
    """Make two users approved contacts through a QR exchange."""

    def _connect(owner, redeemer, owner_preset="personal", redeemer_preset="personal"):
        grant = qr.generate(owner, owner_preset)
        return qr.redeem(redeemer, grant.token, redeemer_preset)

    return _connect
