# ------------------------------------------------------------------------
# ------------------------------------------------------------------------

import logging
import re
from io import BytesIO

from django.core.files.base import ContentFile
from PIL import Image

from page_attachments import settings


logger = logging.getLogger(__name__)


class Thumbnailer:
    """
    Derives named size variants of an attachment. The geometry strings
    follow ImageMagick's syntax::

        144x144     fit inside the box, never enlarge
        144x144>    same
        144x144<    enlarge to fit the box, never shrink
        144x144!    exact size, aspect ratio ignored
        144x144^    cover the box, aspect ratio preserved
    """

    GEOMETRY_RE = re.compile(r"^(?P<w>\d*)x(?P<h>\d*)(?P<flag>[<>!^]?)$")

    def __init__(self, attachment, variant):
        self.attachment = attachment
        self.variant = variant
        self.geometry = settings.PAGE_ATTACHMENTS_SIZES[variant]

    @property
    def storage(self):
        return self.attachment.file.storage

    @property
    def name(self):
        return variant_name(self.attachment.file.name, self.variant)

    @property
    def url(self):
        original = self.attachment.file.name
        if not self.attachment.is_image():
            return self.storage.url(original)

        miniature = self.name
        if not self.storage.exists(miniature):
            generate = True
        else:
            try:
                generate = self.storage.get_modified_time(
                    miniature
                ) < self.storage.get_modified_time(original)
            except (NotImplementedError, AttributeError):
                # storage does NOT support modified_time
                generate = False

        if generate:
            return self.generate(original, miniature)

        return self.storage.url(miniature)

    def parse_geometry(self):
        match = self.GEOMETRY_RE.match(self.geometry)
        if not match or not (match.group("w") or match.group("h")):
            raise ValueError(
                "Invalid geometry %r for size %r" % (self.geometry, self.variant)
            )
        return (
            int(match.group("w") or 0),
            int(match.group("h") or 0),
            match.group("flag"),
        )

    def target_size(self, src_width, src_height):
        w, h, flag = self.parse_geometry()
        if flag == "!":
            return (w or src_width, h or src_height)

        ratios = []
        if w:
            ratios.append(float(w) / src_width)
        if h:
            ratios.append(float(h) / src_height)
        ratio = max(ratios) if flag == "^" else min(ratios)

        if flag == "<" and ratio < 1:
            ratio = 1
        elif flag in ("", ">") and ratio > 1:
            ratio = 1

        return (
            max(int(round(src_width * ratio)), 1),
            max(int(round(src_height * ratio)), 1),
        )

    def generate(self, original, miniature):
        try:
            with self.storage.open(original) as handle:
                image = Image.open(BytesIO(handle.read()))
                image.load()
        except (OSError, ValueError) as e:
            logger.error("Cannot read image %s: %s", original, e)
            return self.storage.url(original)

        format = image.format  # Save format for the save() call later
        image = image.resize(
            self.target_size(*image.size), Image.Resampling.LANCZOS
        )

        buf = BytesIO()
        if image.mode not in ("RGBA", "RGB", "L"):
            image = image.convert("RGBA")
        if format.lower() not in ("jpg", "jpeg", "png"):
            format = "png" if image.mode == "RGBA" else "jpeg"
        elif format.lower() in ("jpg", "jpeg") and image.mode == "RGBA":
            image = image.convert("RGB")
        image.save(buf, format, quality=90)
        raw_data = buf.getvalue()
        buf.close()

        self.storage.delete(miniature)
        self.storage.save(miniature, ContentFile(raw_data))
        logger.info("Generated %s variant %s", self.variant, miniature)

        return self.storage.url(miniature)


def variant_name(filename, variant):
    """
    Storage name of a size variant::

        >>> variant_name("page_attachments/2024/01/cover.png", "thumb")
        '_thumbs/page_attachments/2024/01/cover_thumb.png'
    """

    try:
        basename, format = filename.rsplit(".", 1)
    except ValueError:
        basename, format = filename, "jpg"

    return "".join(
        [settings.PAGE_ATTACHMENTS_THUMBNAIL_DIR, basename, "_", variant, ".", format]
    )


def public_filename(attachment, size=None):
    """
    URL of the attachment, or of its ``size`` variant. Unknown variants
    raise ``KeyError``.
    """

    if not size:
        return attachment.file.storage.url(attachment.file.name)
    return Thumbnailer(attachment, size).url


def delete_variants(attachment, filename=None):
    storage = attachment.file.storage
    for variant in settings.PAGE_ATTACHMENTS_SIZES:
        name = variant_name(filename or attachment.file.name, variant)
        try:
            if storage.exists(name):
                storage.delete(name)
        except Exception as e:
            logger.warning("Cannot delete size variant %s: %s", name, e)
