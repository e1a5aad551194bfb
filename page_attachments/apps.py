from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class PageAttachmentsConfig(AppConfig):
    name = "page_attachments"
    verbose_name = _("Page attachments")
    default_auto_field = "django.db.models.AutoField"
