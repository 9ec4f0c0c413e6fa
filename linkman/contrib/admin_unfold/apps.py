from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class LinkmanAdminUnfoldConfig(AppConfig):
    name = "linkman.contrib.admin_unfold"
    label = "linkman_admin_unfold"
    verbose_name = _("Admin (Unfold)")
