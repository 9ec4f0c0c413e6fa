"""Inbox app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class InboxConfig(AppConfig):
    name = "linkman.contrib.inbox"
    label = "linkman_inbox"
    verbose_name = _("Inbox")

    def ready(self):
        from linkman.contrib.inbox import handlers  # noqa: F401
