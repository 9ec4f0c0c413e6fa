"""Tests for QR bootstrap tokens."""

from datetime import timedelta
from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command
from django.utils import timezone

from linkman.contrib.inbox.models import Notification
from linkman.exceptions import LinkmanError
from linkman.gates import GateError, Gates
from linkman.models import Contact, Profile, QrToken
from linkman.projection import project
from linkman.services import contacts, qr


pytestmark = pytest.mark.django_db


class TestGenerate:
    """Tests for generate()."""

    def test_generate(self, alice):
        before = timezone.now()
        grant = qr.generate(alice, "professional")

        assert len(grant.token) == 64
        assert before + timedelta(hours=24) <= grant.expires_at
        assert grant.expires_at <= timezone.now() + timedelta(hours=24)

        token = QrToken.objects.get(token=grant.token)
        assert token.owner == alice
        assert token.preset_name == "professional"
        assert token.state == "active"

    def test_tokens_are_unique(self, alice):
        tokens = {qr.generate(alice, "personal").token for _ in range(5)}
        assert len(tokens) == 5

    def test_invalid_preset(self, alice):
        for preset in ("family", None):
            with pytest.raises(LinkmanError) as exc:
                qr.generate(alice, preset)
            assert exc.value.code == "INVALID_PRESET"
        assert QrToken.objects.count() == 0

    def test_ttl_setting(self, alice, settings):
        settings.LINKMAN = {"NOTIFY_ON_COMMIT": False, "QR_TOKEN_TTL_HOURS": 1}

        grant = qr.generate(alice, "personal")

        assert grant.expires_at <= timezone.now() + timedelta(hours=1)


class TestInspect:
    """Tests for inspect()."""

    def test_valid(self, alice):
        grant = qr.generate(alice, "personal")

        preview = qr.inspect(grant.token)

        assert preview.valid is True
        assert preview.owner_display_name == "Alice Liddell"
        assert preview.owner_handle == "alice"
        assert preview.requires_signup is True

    def test_does_not_consume(self, alice, bob):
        grant = qr.generate(alice, "personal")
        qr.inspect(grant.token)

        assert qr.redeem(bob, grant.token, "personal").status == Contact.Status.APPROVED

    def test_unknown(self, db):
        preview = qr.inspect("deadbeef")

        assert preview.valid is False
        assert preview.error_code == "TOKEN_NOT_FOUND"
        assert preview.owner_display_name is None

    def test_empty(self, db):
        assert qr.inspect("").error_code == "INVALID_REQUEST"

    def test_consumed_and_expired(self, alice, bob):
        used = qr.generate(alice, "personal")
        qr.redeem(bob, used.token, "personal")
        stale = qr.generate(alice, "personal")
        QrToken.objects.filter(token=stale.token).update(
            expires_at=timezone.now() - timedelta(minutes=1)
        )

        assert qr.inspect(used.token).error_code == "TOKEN_CONSUMED"
        assert qr.inspect(stale.token).error_code == "TOKEN_EXPIRED"


class TestRedeem:
    """Tests for redeem()."""

    def test_scenario_qr_exchange(self, alice, bob):
        """Alice shows a professional code, Bob scans it as personal."""
        grant = qr.generate(alice, "professional")
        forward = qr.redeem(bob, grant.token, "personal")

        alice_facet = project(Profile.for_user(alice), "professional")
        bob_facet = project(Profile.for_user(bob), "personal")

        assert forward.sender == alice
        assert forward.receiver == bob
        assert forward.status == Contact.Status.APPROVED
        assert forward.sender_preset == "professional"
        assert forward.receiver_preset == "personal"
        assert forward.shared_data == {"sender": alice_facet, "receiver": bob_facet}

        reverse = Contact.objects.get(sender=bob, receiver=alice)
        assert reverse.status == Contact.Status.APPROVED
        assert reverse.shared_data == {"sender": bob_facet, "receiver": alice_facet}

        token = QrToken.objects.get(token=grant.token)
        assert token.consumed_by == bob
        assert token.consumed_at is not None

        (entry,) = contacts.list_contacts(bob)
        assert entry.shared_data["company"] == "Wonderland Ltd"
        assert Gates.check_relationship_symmetry(alice.pk, bob.pk)

    def test_single_use(self, alice, bob, carol):
        grant = qr.generate(alice, "personal")
        qr.redeem(bob, grant.token, "personal")

        for redeemer in (carol, bob):
            with pytest.raises(LinkmanError) as exc:
                qr.redeem(redeemer, grant.token, "personal")
            assert exc.value.code == "TOKEN_CONSUMED"

        assert contacts.list_contacts(carol) == []
        assert QrToken.objects.get(token=grant.token).consumed_by == bob

    def test_expired(self, alice, bob):
        grant = qr.generate(alice, "personal")
        QrToken.objects.filter(token=grant.token).update(expires_at=timezone.now())

        with pytest.raises(LinkmanError) as exc:
            qr.redeem(bob, grant.token, "personal")

        assert exc.value.code == "TOKEN_EXPIRED"
        assert Contact.objects.count() == 0

    def test_unknown_token(self, bob):
        with pytest.raises(LinkmanError) as exc:
            qr.redeem(bob, "deadbeef", "personal")
        assert exc.value.code == "TOKEN_NOT_FOUND"

    def test_self_redeem(self, alice):
        grant = qr.generate(alice, "personal")

        with pytest.raises(LinkmanError) as exc:
            qr.redeem(alice, grant.token, "personal")

        assert exc.value.code == "SELF_REDEEM"
        assert QrToken.objects.get(token=grant.token).is_usable()

    def test_invalid_preset_keeps_token(self, alice, bob):
        grant = qr.generate(alice, "personal")

        with pytest.raises(LinkmanError) as exc:
            qr.redeem(bob, grant.token, "family")

        assert exc.value.code == "INVALID_PRESET"
        assert QrToken.objects.get(token=grant.token).is_usable()

    def test_upgrades_pending_request(self, alice, bob):
        """Bob already asked to follow Alice, then scans her code."""
        request = contacts.follow(bob, alice, preset_name="professional")
        grant = qr.generate(alice, "personal")

        qr.redeem(bob, grant.token, "personal")

        edges = Contact.objects.between(alice, bob)
        assert edges.count() == 2
        assert all(edge.status == Contact.Status.APPROVED for edge in edges)

        upgraded = Contact.objects.get(pk=request.pk)
        assert upgraded.status == Contact.Status.APPROVED
        assert upgraded.sender_preset == "personal"
        assert upgraded.shared_data["sender"] == project(Profile.for_user(bob), "personal")
        assert len(contacts.list_contacts(alice)) == 1

    def test_overwrites_existing_relationship(self, alice, bob):
        request = contacts.follow(alice, bob, preset_name="personal")
        contacts.approve(bob, request.id, preset_name="personal")

        grant = qr.generate(alice, "professional")
        qr.redeem(bob, grant.token, "professional")

        forward = Contact.objects.get(sender=alice, receiver=bob)
        assert forward.pk == request.pk
        assert forward.sender_preset == "professional"
        assert forward.shared_data["sender"]["company"] == "Wonderland Ltd"
        assert Contact.objects.between(alice, bob).count() == 2

    def test_both_parties_notified(self, alice, bob):
        grant = qr.generate(alice, "personal")
        qr.redeem(bob, grant.token, "personal")

        owner_note = Notification.objects.get(user=alice, kind="qr_scan")
        redeemer_note = Notification.objects.get(user=bob, kind="qr_scan")
        assert owner_note.title == "QR Code Scanned"
        assert owner_note.actor == bob
        assert redeemer_note.title == "Contact Added"
        assert redeemer_note.message == "You successfully scanned Alice Liddell's QR code"

    def test_redeem_after_signup(self, alice, make_user, settings):
        settings.LINKMAN = {"NOTIFY_ON_COMMIT": False, "SIGNUP_PRESET": "custom"}
        newcomer = make_user("newcomer", bio="Just arrived")
        grant = qr.generate(alice, "personal")

        forward = qr.redeem_after_signup(newcomer, grant.token)

        assert forward.receiver_preset == "custom"
        assert forward.shared_data["receiver"] == {
            "display_name": "newcomer",
            "handle": "newcomer",
            "bio": "Just arrived",
        }

    def test_failed_reconciliation_keeps_token(self, alice, bob):
        grant = qr.generate(alice, "personal")

        with patch(
            "linkman.services.graph.Gates.relationship_symmetry",
            side_effect=GateError("G3_RelationshipSymmetry", "forced"),
        ):
            with pytest.raises(GateError):
                qr.redeem(bob, grant.token, "personal")

        assert QrToken.objects.get(token=grant.token).is_usable()
        assert Contact.objects.count() == 0


class TestConcurrentRedemption:
    """Exactly one of two racing redemptions wins."""

    def test_consume_is_compare_and_swap(self, alice, bob, carol):
        grant = qr.generate(alice, "personal")
        first = QrToken.objects.get(token=grant.token)
        second = QrToken.objects.get(token=grant.token)
        now = timezone.now()

        qr._consume(first, bob, now)
        with pytest.raises(LinkmanError) as exc:
            qr._consume(second, carol, now)

        assert exc.value.code == "TOKEN_CONSUMED"
        assert QrToken.objects.get(token=grant.token).consumed_by == bob

    def test_loser_sees_token_consumed(self, alice, bob, carol):
        """Carol passes the early checks, then Bob's redemption lands first."""
        grant = qr.generate(alice, "personal")
        original = qr._usable_token
        raced = []

        def race(token, now):
            checked = original(token, now)
            if not raced:
                raced.append(True)
                qr.redeem(bob, token, "professional")
            return checked

        with patch("linkman.services.qr._usable_token", side_effect=race):
            with pytest.raises(LinkmanError) as exc:
                qr.redeem(carol, grant.token, "personal")

        assert exc.value.code == "TOKEN_CONSUMED"
        assert contacts.list_contacts(carol) == []
        assert [e.other for e in contacts.list_contacts(alice)] == [bob]

    def test_swept_between_check_and_consume(self, alice, bob):
        """The expiry sweep deletes the row after the early checks passed."""
        grant = qr.generate(alice, "personal")
        original = qr._usable_token

        def sweep(token, now):
            checked = original(token, now)
            QrToken.objects.filter(token=token).delete()
            return checked

        with patch("linkman.services.qr._usable_token", side_effect=sweep):
            with pytest.raises(LinkmanError) as exc:
                qr.redeem(bob, grant.token, "personal")

        assert exc.value.code == "TOKEN_EXPIRED"
        assert Contact.objects.count() == 0
        assert not Notification.objects.filter(kind="qr_scan").exists()


class TestRevokeAndCleanup:
    """Tests for revoke() and the expiry sweep."""

    def test_revoke(self, alice, bob):
        grant = qr.generate(alice, "personal")

        assert qr.revoke(bob, grant.token) is False
        assert qr.revoke(alice, grant.token) is True
        assert qr.revoke(alice, grant.token) is False

        with pytest.raises(LinkmanError) as exc:
            qr.redeem(bob, grant.token, "personal")
        assert exc.value.code == "TOKEN_EXPIRED"

    def test_cleanup(self, alice, bob):
        now = timezone.now()
        active = qr.generate(alice, "personal")
        expired = qr.generate(alice, "personal")
        recent = qr.generate(alice, "personal")
        old = qr.generate(alice, "personal")

        QrToken.objects.filter(token=expired.token).update(expires_at=now - timedelta(hours=1))
        QrToken.objects.filter(token=recent.token).update(
            consumed_by=bob, consumed_at=now - timedelta(days=1)
        )
        QrToken.objects.filter(token=old.token).update(
            consumed_by=bob, consumed_at=now - timedelta(days=31)
        )

        assert qr.cleanup(now=now) == 2
        remaining = set(QrToken.objects.values_list("token", flat=True))
        assert remaining == {active.token, recent.token}

    def test_cleanup_retention_override(self, alice, bob):
        now = timezone.now()
        grant = qr.generate(alice, "personal")
        QrToken.objects.filter(token=grant.token).update(
            consumed_by=bob, consumed_at=now - timedelta(days=2)
        )

        assert qr.cleanup(now=now, retention_days=7) == 0
        assert qr.cleanup(now=now, retention_days=1) == 1

    def test_cleanup_command(self, alice):
        grant = qr.generate(alice, "personal")
        QrToken.objects.filter(token=grant.token).update(
            expires_at=timezone.now() - timedelta(hours=1)
        )
        out = StringIO()

        call_command("linkman_cleanup", stdout=out)

        assert "Deleted 1 QR tokens." in out.getvalue()
        assert QrToken.objects.count() == 0
