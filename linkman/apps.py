from django.apps import AppConfig


class LinkmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "linkman"
    verbose_name = "Linkman - Contacts & Disclosure"

    def ready(self):
        from linkman.signals import handlers  # noqa: F401
