"""
Linkman signals - public event API.

Emitted signals:
- contact_event: Every notification fan-out (target, actor, kind, payload)
- follow_requested: Emitted by services.contacts.follow()
- follow_approved: Emitted by services.contacts.approve()
- contact_removed: Emitted by services.contacts.unfollow()
- qr_redeemed: Emitted by services.qr.redeem()
- facets_refreshed: Emitted by services.presets.refresh_facets()

All are dispatched with send_robust() after the transaction commits: a failing
receiver is logged and never undoes the graph mutation.
"""

from django.dispatch import Signal

# Generic fan-out sink (sender=Contact or QrToken)
contact_event = Signal()  # target, actor, kind, payload

# Graph signals (sender=Contact)
follow_requested = Signal()  # contact
follow_approved = Signal()  # contact, reverse
contact_removed = Signal()  # user, other, deleted

# QR signals (sender=QrToken)
qr_redeemed = Signal()  # qr_token, contact

# Facet cache (sender=Profile)
facets_refreshed = Signal()  # user, updated
