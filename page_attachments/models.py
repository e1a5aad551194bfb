# ------------------------------------------------------------------------
# ------------------------------------------------------------------------

import logging
import mimetypes
import os
import re

from django.conf import settings as django_settings
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import F, Max
from django.db.models.signals import post_delete
from django.dispatch.dispatcher import receiver
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from PIL import Image

from page_attachments import settings, thumbnail
from page_attachments.utils import get_object, truncate


logger = logging.getLogger(__name__)

IMAGE_CONTENT_TYPE_RE = re.compile(r"^image/")


def _default_storage():
    if settings.PAGE_ATTACHMENTS_STORAGE is None:
        return None
    storage = get_object(settings.PAGE_ATTACHMENTS_STORAGE)
    return storage() if isinstance(storage, type) else storage


def _ancestors(page):
    if hasattr(page, "get_ancestors"):
        return page.get_ancestors(ascending=True)

    ancestors = []
    parent = getattr(page, "parent", None)
    while parent is not None:
        ancestors.append(parent)
        parent = getattr(parent, "parent", None)
    return ancestors


# ------------------------------------------------------------------------
class PageAttachmentQuerySet(models.QuerySet):
    def for_page(self, page):
        return self.filter(page=page)

    def lookup(self, page, filename):
        """
        Returns the attachment called ``filename`` on ``page``, the first by
        position if several share the name. Attachments are inherited, so the
        page's ancestors are searched as well, nearest first.
        """

        for candidate in [page, *_ancestors(page)]:
            found = (
                self.for_page(candidate)
                .filter(filename=filename)
                .order_by("position", "pk")
                .first()
            )
            if found is not None:
                return found
        raise self.model.DoesNotExist(
            "No attachment %r on page %r or its ancestors" % (filename, page)
        )


# ------------------------------------------------------------------------
class PageAttachment(models.Model):
    """
    A file uploaded to a page. The file itself lives in the configured
    storage, size variants of images are derived on request.
    """

    file = models.FileField(
        _("file"),
        max_length=255,
        upload_to=settings.PAGE_ATTACHMENTS_UPLOAD_TO,
        storage=_default_storage(),
    )
    filename = models.CharField(_("filename"), max_length=255, editable=False)
    title = models.CharField(_("title"), max_length=200, blank=True)
    description = models.TextField(_("description"), blank=True)
    content_type = models.CharField(_("content type"), max_length=100, blank=True)
    size = models.PositiveIntegerField(_("size"), default=0, editable=False)
    width = models.PositiveIntegerField(
        _("width"), blank=True, null=True, editable=False
    )
    height = models.PositiveIntegerField(
        _("height"), blank=True, null=True, editable=False
    )
    position = models.PositiveIntegerField(_("position"), blank=True, null=True)

    page = models.ForeignKey(
        settings.PAGE_ATTACHMENTS_PAGE_MODEL,
        on_delete=models.CASCADE,
        related_name="attachments",
        verbose_name=_("page"),
    )
    created_by = models.ForeignKey(
        django_settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="+",
        verbose_name=_("created by"),
    )
    updated_by = models.ForeignKey(
        django_settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="+",
        verbose_name=_("updated by"),
    )
    created_at = models.DateTimeField(
        _("created at"), editable=False, default=timezone.now
    )
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    objects = PageAttachmentQuerySet.as_manager()

    class Meta:
        ordering = ["page", "position"]
        verbose_name = _("page attachment")
        verbose_name_plural = _("page attachments")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._original_file_name = self.file.name if self.file else None

    def __str__(self):
        return self.title or self.filename

    @classmethod
    def reconfigure(cls, upload_to=None, storage=None):
        f = cls._meta.get_field("file")
        if storage:
            f.storage = storage
        if upload_to:
            f.upload_to = upload_to

    def get_absolute_url(self):
        return self.public_filename()

    # --------------------------------------------------------------------
    def short_title(self, length=15, suffix=" ..."):
        return truncate(self.title, length, suffix)

    def short_description(self, length=15, suffix=" ..."):
        return truncate(self.description, length, suffix)

    def short_filename(self, length=15, suffix=" ..."):
        return truncate(self.filename, length, suffix)

    def is_image(self):
        return bool(IMAGE_CONTENT_TYPE_RE.match((self.content_type or "").strip()))

    @property
    def extension(self):
        match = re.search(r"\.(\w+)$", self.filename or "")
        return match.group(1) if match else None

    def public_filename(self, size=None):
        return thumbnail.public_filename(self, size)

    def author_name(self):
        author = self.created_by
        if author is None:
            return ""
        return author.get_full_name() or author.get_username()

    # --------------------------------------------------------------------
    def clean(self):
        filename = os.path.basename(self.file.name) if self.file else ""
        if not filename:
            raise ValidationError({"file": _("A file is required.")})
        if "." not in filename.strip("."):
            raise ValidationError({"file": _("The filename needs an extension.")})

        try:
            size = self.file.size
        except (OSError, ValueError):
            size = 0
        if size <= 0:
            raise ValidationError({"file": _("The file is empty.")})
        if size > settings.PAGE_ATTACHMENTS_MAX_SIZE:
            raise ValidationError(
                {
                    "file": _("The file may not be larger than %(max)s bytes.")
                    % {"max": settings.PAGE_ATTACHMENTS_MAX_SIZE}
                }
            )

    def save(self, *args, **kwargs):
        file_changed = self.file.name != self._original_file_name
        if file_changed:
            self.content_type = ""
        if self.file and (file_changed or not self.filename):
            self.filename = os.path.basename(self.file.name)
            if not self.content_type:
                self.content_type = (
                    mimetypes.guess_type(self.filename)[0]
                    or "application/octet-stream"
                )
            try:
                self.size = self.file.size
            except (OSError, ValueError) as e:
                logger.error("Unable to read file size for %s: %s", self, e)
            self.read_dimensions()

        with transaction.atomic():
            if self.position is None:
                last = PageAttachment.objects.for_page(self.page_id).aggregate(
                    last=Max("position")
                )["last"]
                self.position = (last or 0) + 1
            super().save(*args, **kwargs)

        # A new file replaced the old one, get rid of the orphan in storage.
        if file_changed and self._original_file_name:
            self.delete_file(self._original_file_name)
        self._original_file_name = self.file.name

        logger.info(
            "Saved attachment %d (%s, %s, %d bytes) on page %s",
            self.pk,
            self.filename,
            self.content_type,
            self.size or 0,
            self.page_id,
        )

    save.alters_data = True

    def read_dimensions(self):
        if not self.is_image():
            self.width = self.height = None
            return

        try:
            self.file.open("rb")
            self.file.seek(0)
            with Image.open(self.file) as image:
                self.width, self.height = image.size
            self.file.seek(0)
        except (OSError, ValueError) as e:
            logger.error("Unable to read image dimensions for %s: %s", self, e)
            self.width = self.height = None

    def move_to(self, position):
        """
        Moves the attachment to ``position`` within its page, shifting the
        attachments in between.
        """

        siblings = PageAttachment.objects.for_page(self.page_id).exclude(pk=self.pk)
        position = max(1, min(int(position), siblings.count() + 1))

        with transaction.atomic():
            if position < self.position:
                siblings.filter(
                    position__gte=position, position__lt=self.position
                ).update(position=F("position") + 1)
            elif position > self.position:
                siblings.filter(
                    position__gt=self.position, position__lte=position
                ).update(position=F("position") - 1)
            self.position = position
            PageAttachment.objects.filter(pk=self.pk).update(position=position)

    move_to.alters_data = True

    def delete_file(self, name=None):
        if name is None:
            name = self.file.name
        thumbnail.delete_variants(self, name)
        try:
            self.file.storage.delete(name)
        except Exception as e:
            logger.warning("Cannot delete attachment file %s: %s", name, e)


# ------------------------------------------------------------------------
@receiver(post_delete, sender=PageAttachment)
def _attachment_post_delete(sender, instance, **kwargs):
    if instance.position is not None:
        PageAttachment.objects.for_page(instance.page_id).filter(
            position__gt=instance.position
        ).update(position=F("position") - 1)
    instance.delete_file()
    logger.info("Deleted attachment %d (%s)", instance.pk, instance.filename)
