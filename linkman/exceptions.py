"""Linkman exceptions."""


class LinkmanError(Exception):
    """
    Structured exception for contact and disclosure operations.

    Every rejection a caller can branch on carries a stable ``code``.
    Extra keyword arguments are kept in ``data``.

    Usage:
        try:
            contacts.follow(alice, bob)
        except LinkmanError as e:
            if e.code == "REQUEST_PENDING":
                show_pending_badge()
    """

    _default_messages = {
        "INVALID_REQUEST": "Invalid request",
        "IDENTITY_NOT_FOUND": "User not found",
        "INVALID_PRESET": "Invalid preset name. Must be personal, professional, or custom",
        "INVALID_PRESET_FIELD": "Invalid preset field",
        "SELF_FOLLOW": "Cannot follow yourself",
        "ALREADY_FOLLOWING": "Already following this user",
        "REQUEST_PENDING": "Follow request already pending",
        "CONTACT_NOT_FOUND": "Contact not found",
        "NOT_RECEIVER": "Not authorized to approve this request",
        "ALREADY_APPROVED": "Contact already approved",
        "TOKEN_NOT_FOUND": "Invalid QR code",
        "TOKEN_EXPIRED": "QR code has expired",
        "TOKEN_CONSUMED": "QR code already used",
        "SELF_REDEEM": "Cannot scan your own QR code",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        """Serializable form for API responses."""
        return {"code": self.code, "message": self.message, "data": self.data}
