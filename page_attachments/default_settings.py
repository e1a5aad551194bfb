# ------------------------------------------------------------------------
"""
Default settings for page attachments

All of these can be overridden by specifying them in the standard
``settings.py`` file.
"""

from django.conf import settings

# ------------------------------------------------------------------------
# Models

#: app_label.model_name of the model attachments belong to.
PAGE_ATTACHMENTS_PAGE_MODEL = getattr(
    settings, "PAGE_ATTACHMENTS_PAGE_MODEL", "page.Page"
)

#: Local path to newly uploaded attachments
PAGE_ATTACHMENTS_UPLOAD_TO = getattr(
    settings, "PAGE_ATTACHMENTS_UPLOAD_TO", "page_attachments/%Y/%m/"
)

#: Dotted path to a storage instance or class. ``None`` uses Django's
#: default storage, which is where an S3 backend is usually plugged in.
PAGE_ATTACHMENTS_STORAGE = getattr(settings, "PAGE_ATTACHMENTS_STORAGE", None)

#: Largest accepted upload, in bytes.
PAGE_ATTACHMENTS_MAX_SIZE = getattr(
    settings, "PAGE_ATTACHMENTS_MAX_SIZE", 10 * 1024 * 1024
)

# ------------------------------------------------------------------------
# Size variants

#: Size variant name -> geometry. Keep the ``icon`` size, the ``thumb`` and
#: ``normal`` sizes are used by the lightbox tag, e.g.
#: ``{"icon": "50x50>", "thumb": "120x120>", "normal": "640x480>"}``
PAGE_ATTACHMENTS_SIZES = getattr(
    settings, "PAGE_ATTACHMENTS_SIZES", {"icon": "144x144>"}
)

#: Prefix for derived size variants. The value should end with a slash, but
#: this is not enforced.
PAGE_ATTACHMENTS_THUMBNAIL_DIR = getattr(
    settings, "PAGE_ATTACHMENTS_THUMBNAIL_DIR", "_thumbs/"
)

# ------------------------------------------------------------------------
# Templates

#: Context variable holding the page being rendered.
PAGE_ATTACHMENTS_PAGE_VARIABLE = getattr(
    settings, "PAGE_ATTACHMENTS_PAGE_VARIABLE", "page"
)

#: Context variable holding the attachment set by an enclosing tag.
PAGE_ATTACHMENTS_ATTACHMENT_VARIABLE = getattr(
    settings, "PAGE_ATTACHMENTS_ATTACHMENT_VARIABLE", "page_attachment"
)
