"""Tests for Linkman models."""

from datetime import timedelta

import pytest
from django.contrib import admin
from django.utils import timezone

from linkman.models import Contact, Profile, QrToken
from linkman.models.qr_token import generate_token_value


pytestmark = pytest.mark.django_db


class TestProfile:
    """Tests for Profile."""

    def test_created_with_user(self, carol):
        assert Profile.objects.filter(user=carol).exists()

    def test_for_user_is_lazy(self, carol):
        Profile.objects.filter(user=carol).delete()

        profile = Profile.for_user(carol)

        assert profile.user == carol
        assert Profile.objects.filter(user=carol).count() == 1

    def test_identity_fields(self, alice, carol):
        profile = Profile.for_user(alice)

        assert profile.display_name == "Alice Liddell"
        assert profile.handle == "alice"
        assert profile.field_value("email") == "alice@example.com"
        assert profile.field_value("company") == "Wonderland Ltd"
        assert Profile.for_user(carol).display_name == "carol"

    def test_flags_for(self, alice):
        profile = Profile.for_user(alice)

        assert profile.flags_for("personal")["email"] is True
        assert profile.flags_for(None) == {}
        assert profile.flags_for("family") == {}


class TestContact:
    """Tests for Contact."""

    def test_helpers(self, alice, bob, carol):
        edge = Contact.objects.create(
            sender=alice,
            receiver=bob,
            sender_preset="personal",
            receiver_preset="professional",
        )

        assert edge.is_participant(alice)
        assert not edge.is_participant(carol)
        assert edge.other(alice) == bob
        assert edge.other(bob) == alice
        assert edge.other_id(bob) == alice.pk
        assert edge.preset_of(alice) == "personal"
        assert edge.preset_of(bob) == "professional"
        assert not edge.is_approved

        with pytest.raises(ValueError):
            edge.other_id(carol)

    def test_queryset(self, alice, bob, carol):
        Contact.objects.create(sender=alice, receiver=bob, status=Contact.Status.APPROVED)
        Contact.objects.create(sender=bob, receiver=alice, status=Contact.Status.APPROVED)
        Contact.objects.create(sender=carol, receiver=alice)

        assert Contact.objects.between(alice, bob).count() == 2
        assert Contact.objects.between(bob, carol).count() == 0
        assert Contact.objects.touching(alice).count() == 3
        assert Contact.objects.touching(alice).approved().count() == 2
        assert Contact.objects.touching(alice).pending().count() == 1

    def test_facets_tolerate_bad_data(self, alice, bob):
        edge = Contact.objects.create(sender=alice, receiver=bob, shared_data={"email": "x"})

        assert edge.facets.sender is None
        assert edge.facets.receiver is None


class TestQrToken:
    """Tests for QrToken."""

    def test_token_value(self):
        assert len(generate_token_value()) == 64
        assert len(generate_token_value(16)) == 32

    def test_states(self, alice, bob):
        now = timezone.now()
        token = QrToken.objects.create(
            owner=alice,
            token=generate_token_value(),
            preset_name="personal",
            expires_at=now + timedelta(hours=1),
        )

        assert token.state == "active"
        assert token.is_usable(now)
        assert token.is_expired(now + timedelta(hours=1))

        token.consumed_by = bob
        token.consumed_at = now
        assert token.state == "consumed"
        assert not token.is_usable(now)


class TestAdmin:
    """Admin registrations."""

    def test_registered(self):
        from linkman.contrib.feed.models import Post
        from linkman.contrib.inbox.models import Notification

        for model in (Profile, Contact, QrToken, Post, Notification):
            assert admin.site.is_registered(model)

    def test_shared_data_display(self, alice, bob):
        edge = Contact.objects.create(
            sender=alice, receiver=bob, shared_data={"sender": {"handle": "alice"}, "receiver": None}
        )

        html = admin.site._registry[Contact].shared_data_display(edge)

        assert "&quot;handle&quot;: &quot;alice&quot;" in html

    def test_unfold_admins_replace_basic(self, alice, bob):
        from unfold.admin import ModelAdmin as UnfoldModelAdmin

        for model in (Profile, Contact, QrToken):
            assert isinstance(admin.site._registry[model], UnfoldModelAdmin)

        edge = Contact.objects.create(sender=alice, receiver=bob)
        badge = admin.site._registry[Contact].status_badge(edge)
        assert "bg-yellow-100" in badge
        assert "Pending" in badge
