"""QR service - single-use bootstrap tokens.

A redeemed token makes owner and redeemer approved contacts in both
directions at once, skipping the pending/approve round trip.

Consumption is a compare-and-swap: a conditional UPDATE that only matches an
unconsumed, unexpired row. Of two concurrent redemptions exactly one sees a
row count of 1; the other fails with TOKEN_CONSUMED.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from django.db import transaction
from django.utils import timezone

from linkman.conf import linkman_settings
from linkman.exceptions import LinkmanError
from linkman.models import Contact, QrToken
from linkman.models.qr_token import generate_token_value
from linkman.notifications import EventKind, emit, notify
from linkman.presets import validate_preset_name
from linkman.projection import project
from linkman.services.graph import establish, lock_pair, resolve_user
from linkman.signals import qr_redeemed

logger = logging.getLogger(__name__)


@dataclass
class QrGrant:
    """A freshly generated token. Carries no disclosed data."""

    token: str
    expires_at: datetime


@dataclass
class QrPreview:
    """Result of inspecting a scanned token (safe to show to non-users)."""

    valid: bool
    owner_display_name: str | None = None
    owner_handle: str | None = None
    requires_signup: bool = True
    error_code: str | None = None
    message: str | None = None


def generate(owner, preset_name: str) -> QrGrant:
    """
    Create a bootstrap token bound to ``owner`` and ``preset_name``.

    Raises:
        LinkmanError: INVALID_PRESET
    """
    preset_name = validate_preset_name(preset_name, allow_none=False)
    expires_at = timezone.now() + timedelta(hours=linkman_settings.QR_TOKEN_TTL_HOURS)

    qr_token = QrToken.objects.create(
        owner=owner,
        token=generate_token_value(),
        preset_name=preset_name,
        expires_at=expires_at,
    )
    logger.info("QR token generated for user %s (preset=%s)", owner.pk, preset_name)
    return QrGrant(token=qr_token.token, expires_at=qr_token.expires_at)


def inspect(token: str) -> QrPreview:
    """
    Validate a scanned token without consuming it.

    Never raises; reveals only the owner's name and handle.
    """
    if not token:
        return QrPreview(valid=False, error_code="INVALID_REQUEST", message="Token is required")

    qr_token = QrToken.objects.select_related("owner").filter(token=token).first()
    if qr_token is None:
        return _invalid("TOKEN_NOT_FOUND")
    if qr_token.is_consumed:
        return _invalid("TOKEN_CONSUMED")
    if qr_token.is_expired():
        return _invalid("TOKEN_EXPIRED")
    if not qr_token.owner.is_active:
        return _invalid("IDENTITY_NOT_FOUND")

    owner = qr_token.owner
    return QrPreview(
        valid=True,
        owner_display_name=owner.get_full_name().strip() or owner.get_username(),
        owner_handle=owner.get_username(),
    )


def _invalid(code: str) -> QrPreview:
    error = LinkmanError(code)
    return QrPreview(valid=False, error_code=error.code, message=error.message)


def _usable_token(token: str, now) -> QrToken:
    """Fetch a token and reject it early with the precise reason."""
    if not token:
        raise LinkmanError("INVALID_REQUEST", message="Token is required")
    qr_token = QrToken.objects.select_related("owner").filter(token=token).first()
    if qr_token is None:
        raise LinkmanError("TOKEN_NOT_FOUND")
    if qr_token.is_consumed:
        raise LinkmanError("TOKEN_CONSUMED")
    if qr_token.is_expired(now):
        raise LinkmanError("TOKEN_EXPIRED", expires_at=qr_token.expires_at.isoformat())
    return qr_token


def _consume(qr_token: QrToken, redeemer, now) -> None:
    """
    Atomically claim the token for ``redeemer``.

    Raises:
        LinkmanError: TOKEN_CONSUMED if another request won the race,
            TOKEN_EXPIRED if the token expired or was swept meanwhile
    """
    claimed = QrToken.objects.filter(
        pk=qr_token.pk,
        consumed_by__isnull=True,
        consumed_at__isnull=True,
        expires_at__gt=now,
    ).update(consumed_by=redeemer, consumed_at=now)

    if claimed != 1:
        current = QrToken.objects.filter(pk=qr_token.pk).first()
        if current is not None and current.is_consumed:
            raise LinkmanError("TOKEN_CONSUMED")
        # Swept by cleanup() after the early checks: it can only have expired
        raise LinkmanError("TOKEN_EXPIRED")

    qr_token.consumed_by = redeemer
    qr_token.consumed_at = now


def redeem(redeemer, token: str, preset_name: str) -> Contact:
    """
    Redeem a token: owner and redeemer become approved contacts.

    Any prior relationship between the two (pending or approved) is upgraded
    and both facets are overwritten, through the same reconciliation approve
    uses.

    Args:
        redeemer: Identity scanning the code
        token: Bearer token string
        preset_name: Preset the redeemer discloses to the owner

    Returns:
        The owner -> redeemer edge

    Raises:
        LinkmanError: INVALID_PRESET, TOKEN_NOT_FOUND, TOKEN_EXPIRED,
            TOKEN_CONSUMED, SELF_REDEEM, IDENTITY_NOT_FOUND
    """
    preset_name = validate_preset_name(preset_name, allow_none=False)
    now = timezone.now()

    qr_token = _usable_token(token, now)
    if qr_token.owner_id == redeemer.pk:
        raise LinkmanError("SELF_REDEEM")
    owner = resolve_user(qr_token.owner)

    with transaction.atomic():
        profiles = lock_pair(owner, redeemer)
        _consume(qr_token, redeemer, now)

        forward, _reverse = establish(
            owner,
            redeemer,
            sender_preset=qr_token.preset_name,
            receiver_preset=preset_name,
            sender_facet=project(profiles[owner.pk], qr_token.preset_name),
            receiver_facet=project(profiles[redeemer.pk], preset_name),
        )

        redeemer_name = redeemer.get_full_name().strip() or redeemer.get_username()
        owner_name = owner.get_full_name().strip() or owner.get_username()
        notify(
            owner,
            EventKind.QR_SCAN,
            {
                "contact_id": str(forward.pk),
                "user_id": str(redeemer.pk),
                "name": redeemer_name,
                "role": "owner",
            },
            actor=redeemer,
            sender=QrToken,
        )
        notify(
            redeemer,
            EventKind.QR_SCAN,
            {
                "contact_id": str(forward.pk),
                "user_id": str(owner.pk),
                "name": owner_name,
                "role": "redeemer",
            },
            actor=owner,
            sender=QrToken,
        )
        emit(qr_redeemed, QrToken, qr_token=qr_token, contact=forward)

    logger.info(
        "QR token redeemed: owner=%s redeemer=%s (presets %s/%s)",
        owner.pk,
        redeemer.pk,
        qr_token.preset_name,
        preset_name,
    )
    return forward


def redeem_after_signup(redeemer, token: str) -> Contact:
    """Redeem for a user who just signed up and has not chosen a preset yet."""
    return redeem(redeemer, token, linkman_settings.SIGNUP_PRESET)


def revoke(owner, token: str) -> bool:
    """
    Invalidate one of ``owner``'s unused tokens.

    Returns:
        True if a usable token was revoked
    """
    now = timezone.now()
    revoked = QrToken.objects.filter(
        owner=owner,
        token=token,
        consumed_at__isnull=True,
        expires_at__gt=now,
    ).update(expires_at=now)
    if revoked:
        logger.info("QR token revoked by user %s", owner.pk)
    return bool(revoked)


def cleanup(now=None, retention_days: int | None = None) -> int:
    """
    Expiry sweep: delete tokens that can never be redeemed again.

    Returns:
        Number of tokens deleted
    """
    deleted, _ = QrToken.cleanup(now=now, retention_days=retention_days)
    if deleted:
        logger.info("QR cleanup removed %d tokens", deleted)
    return deleted
