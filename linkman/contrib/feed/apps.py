"""Feed app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class FeedConfig(AppConfig):
    name = "linkman.contrib.feed"
    label = "linkman_feed"
    verbose_name = _("Feed")
