# ------------------------------------------------------------------------
# ------------------------------------------------------------------------
"""
Attachment tags

Every tag is a plain function receiving a :class:`Tag`, registered under
its name on :data:`library`. The template tag library
``page_attachment_tags`` exposes all of them to Django templates, with the
colons replaced by underscores::

    {% load page_attachment_tags %}

    {% attachment name="report.pdf" %}
        {% attachment_link %} ({% attachment_size units="kilobytes" %} KB)
    {% endattachment %}
"""

import inspect
import logging

from django.utils import timezone
from django.utils.html import escape

from page_attachments import settings
from page_attachments.exceptions import TagError
from page_attachments.filters import AttachmentFilter
from page_attachments.models import PageAttachment
from page_attachments.utils import format_size


logger = logging.getLogger(__name__)

#: Container modes
SINGLE = "single"
CONTAINER = "container"
OPTIONAL = "optional"

_unchanged = object()


class Library:
    def __init__(self):
        self.tags = {}

    def tag(self, name, container=SINGLE):
        def dec(func):
            func.tag_name = name
            func.container = container
            self.tags[name] = func
            return func

        return dec

    def render(self, name, attrs, context, block=None):
        try:
            handler = self.tags[name]
        except KeyError:
            raise TagError("unknown attachment tag %r" % name)
        return handler(Tag(self, name, attrs, context, block))

    def describe(self):
        """
        Returns ``(name, description)`` pairs for documentation purposes.
        """
        return [
            (name, inspect.cleandoc(handler.__doc__ or ""))
            for name, handler in sorted(self.tags.items())
        ]


library = Library()


# ------------------------------------------------------------------------
class Tag:
    """
    One invocation of an attachment tag: its attributes, the rendering
    context and, for containers, a callable rendering the nested content.
    """

    def __init__(self, library, name, attrs, context, block=None):
        self.library = library
        self.name = name
        self.attr = dict(attrs)
        self.context = context
        self.block = block

    @property
    def double(self):
        return self.block is not None

    @property
    def page(self):
        return self.context.get(settings.PAGE_ATTACHMENTS_PAGE_VARIABLE)

    @property
    def attachment(self):
        return self.context.get(settings.PAGE_ATTACHMENTS_ATTACHMENT_VARIABLE)

    def require_page(self):
        page = self.page
        if page is None:
            raise TagError("%s needs a page in the template context" % self.name)
        return page

    def resolve(self):
        """
        The attachment named by the ``name`` attribute, or the one set by an
        enclosing tag.
        """
        name = self.attr.pop("name", None)
        if name:
            try:
                return PageAttachment.objects.lookup(self.require_page(), name)
            except PageAttachment.DoesNotExist:
                raise TagError("attachment %r not found" % name)
        if self.attachment is None:
            raise TagError("'name' attribute required")
        return self.attachment

    def scope(self, attachment):
        return self.context.push(
            **{settings.PAGE_ATTACHMENTS_ATTACHMENT_VARIABLE: attachment}
        )

    def expand(self, attachment=_unchanged):
        if self.block is None:
            return ""
        if attachment is _unchanged:
            with self.context.push():
                return self.block(self.context)
        with self.scope(attachment):
            return self.block(self.context)

    def render(self, name, attrs, block=None):
        return self.library.render(name, attrs, self.context, block)

    def integer(self, key, default):
        value = self.attr.get(key)
        if value in (None, ""):
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            raise TagError("'%s' must be a number, not %r" % (key, value))


def _public_filename(attachment, size=None):
    try:
        return attachment.public_filename(size)
    except Exception as e:
        logger.warning(
            "Cannot derive %s URL of %s: %r", size or "original", attachment, e
        )
        return None


def _attributes(attrs):
    return " ".join('%s="%s"' % (key, value) for key, value in attrs.items())


def _require_image(attachment):
    if not attachment.is_image():
        raise TagError("attachment is not an image.")


# ------------------------------------------------------------------------
@library.tag("attachment", container=CONTAINER)
def attachment(tag):
    """
    The namespace for referencing page attachments. Specify the ``name``
    attribute (the filename) for all contained tags to refer to that
    attachment. Attachments are inherited from parent pages.

    {% attachment name="file.txt" %}...{% endattachment %}
    """
    name = tag.attr.get("name")
    if not name:
        return tag.expand()

    found = None
    if tag.page is not None:
        try:
            found = PageAttachment.objects.lookup(tag.page, name)
        except PageAttachment.DoesNotExist:
            logger.debug("No attachment %r on %r", name, tag.page)
    return tag.expand(attachment=found)


@library.tag("attachment:url")
def attachment_url(tag):
    """
    Renders the URL of the attachment, for use in links, stylesheets etc.
    The ``name`` attribute is required on this tag or the parent tag. The
    optional ``size`` attribute applies only to images.

    {% attachment_url name="file.jpg" size="icon" %}
    """
    attachment = tag.resolve()
    return _public_filename(attachment, tag.attr.get("size") or None) or ""


def _truncating_tag(key):
    def handler(tag):
        attachment = tag.resolve()
        length = tag.integer("length", 15)
        suffix = tag.attr.get("suffix")
        if suffix is None:
            suffix = " ..."
        return getattr(attachment, key)(length, suffix)

    handler.__name__ = "attachment_%s" % key
    handler.__doc__ = """
    Renders the %(field)s of the attachment, cut down to ``length``
    characters (default 15, ``suffix`` included). ``suffix`` marks the
    truncation and defaults to " ...".

    {%% attachment_%(key)s name="file.jpg" length="20" suffix="..." %%}
    """ % {"key": key, "field": key.split("_", 1)[1]}
    return library.tag("attachment:%s" % key)(handler)


for _key in ("short_title", "short_description", "short_filename"):
    _truncating_tag(_key)


@library.tag("attachment:size")
def attachment_size(tag):
    """
    Renders the size of the attachment, in bytes by default. ``units`` may be
    one of bytes, kilobytes, megabytes or gigabytes.

    {% attachment_size name="file.jpg" units="megabytes" %}
    """
    attachment = tag.resolve()
    return format_size(attachment.size, tag.attr.get("units") or "bytes")


def _field_tag(key):
    def handler(tag):
        return getattr(tag.resolve(), key)

    handler.__name__ = "attachment_%s" % key
    handler.__doc__ = """
    Renders the %(key)s of the attachment. The ``name`` attribute is
    required on this tag or the parent tag.

    {%% attachment_%(key)s name="file.jpg" %%}
    """ % {"key": key}
    return library.tag("attachment:%s" % key)(handler)


for _key in (
    "content_type",
    "width",
    "height",
    "title",
    "description",
    "position",
    "filename",
):
    _field_tag(_key)


@library.tag("attachment:date")
def attachment_date(tag):
    """
    Renders the upload date using the strftime ``format`` (default ``%F``).

    {% attachment_date name="file.jpg" format="%d.%m.%Y" %}
    """
    attachment = tag.resolve()
    format = (tag.attr.get("format") or "%F").replace("%F", "%Y-%m-%d")
    created_at = attachment.created_at
    if timezone.is_aware(created_at):
        created_at = timezone.localtime(created_at)
    return created_at.strftime(format)


@library.tag("attachment:image")
def attachment_image(tag):
    """
    Renders an image tag for the attachment, which has to be an image. Any
    other attributes are added to the rendered tag. The optional ``size``
    attribute selects a size variant.

    {% attachment_image name="file.jpg" size="icon" alt="Cover" %}
    """
    attachment = tag.resolve()
    size = tag.attr.pop("size", None)
    _require_image(attachment)
    filename = _public_filename(attachment, size) or ""
    attributes = _attributes(tag.attr)
    return '<img src="%s" %s/>' % (filename, attributes + " " if attributes else "")


@library.tag("attachment:link", container=OPTIONAL)
def attachment_link(tag):
    """
    Renders a link to the attachment. ``label`` sets the link text and
    defaults to the filename; any other attributes are added to the
    rendered tag. Works as a single tag and as a container, the contained
    content then becomes the link text.

    {% attachment_link name="file.jpg" size="thumb" %}
    {% attachment_link name="file.jpg" %} Some text {% endattachment_link %}
    """
    attachment = tag.resolve()
    label = tag.attr.pop("label", None)
    if label is None:
        label = attachment.filename
    size = tag.attr.pop("size", None)
    filename = _public_filename(attachment, size) or ""
    attributes = _attributes(tag.attr)

    output = '<a href="%s"%s>' % (filename, " " + attributes if attributes else "")
    output += tag.expand() if tag.double else label
    return output + "</a>"


@library.tag("attachment:author")
def attachment_author(tag):
    """
    Renders the name of whoever uploaded the attachment.

    {% attachment_author name="file.jpg" %}
    """
    return tag.resolve().author_name()


def _conditions(tag):
    return AttachmentFilter.from_attrs(
        {key: tag.attr.get(key) for key in ("extensions", "name_prefix")}
    )


@library.tag("attachment:each", container=CONTAINER)
def attachment_each(tag):
    """
    Iterates through the attachments of the current page. The ``name``
    attribute is not required on nested attachment tags.

    {% attachment_each order="asc|desc" by="filename|size|created_at|..."
        limit="10" offset="0" extensions="png|pdf|doc" name_prefix="prefix_" %}
        {% attachment_link %} - {% attachment_date %}
    {% endattachment_each %}
    """
    page = tag.require_page()
    options = AttachmentFilter.from_attrs(tag.attr)
    return "".join(
        tag.expand(attachment=attachment)
        for attachment in options.apply(PageAttachment.objects.for_page(page))
    )


@library.tag("if_attachments", container=CONTAINER)
def if_attachments(tag):
    """
    Renders the contained elements only if the current page has at least
    ``min_count`` attachments (default 0), optionally filtered by
    ``extensions`` and ``name_prefix``.

    {% if_attachments min_count="2" extensions="doc|pdf" %}...{% endif_attachments %}
    """
    min_count = tag.integer("min_count", 0)
    count = _conditions(tag).count(
        PageAttachment.objects.for_page(tag.require_page())
    )
    return tag.expand() if count >= min_count else ""


@library.tag("unless_attachments", container=CONTAINER)
def unless_attachments(tag):
    """
    Renders the contained elements only if the current page has no
    attachments, optionally filtered by ``extensions`` and ``name_prefix``.

    {% unless_attachments extensions="pdf" %}...{% endunless_attachments %}
    """
    count = _conditions(tag).count(
        PageAttachment.objects.for_page(tag.require_page())
    )
    return tag.expand() if count == 0 else ""


@library.tag("attachment:extension")
def attachment_extension(tag):
    """
    Renders the extension of the attachment's filename.

    <ul>
    {% attachment_each extensions="doc|pdf" %}
        <li class="{% attachment_extension %}">{% attachment_link %}</li>
    {% endattachment_each %}
    </ul>
    """
    if tag.attachment is None:
        raise TagError(
            "must be nested inside an attachment or attachment:each tag"
        )
    return tag.attachment.extension or ""


@library.tag("attachment:lightboxthumb")
def attachment_lightboxthumb(tag):
    """
    Renders the ``thumb`` size of an image, wrapped in a link to its
    ``normal`` size with ``rel="lightbox"`` for lightbox support. Configure
    both sizes in ``PAGE_ATTACHMENTS_SIZES``, e.g.::

        PAGE_ATTACHMENTS_SIZES = {
            "icon": "50x50>", "thumb": "120x120>", "normal": "640x480>"}

    ``rel`` defaults to "lightbox", the link ``class`` to "lightbox-link"
    and the link ``title`` to the attachment title. Any other attributes
    are added to the rendered link.

    {% attachment_lightboxthumb name="file.jpg" rel="lightbox[gallery]" %}
    """
    attachment = tag.resolve()
    _require_image(attachment)

    attributes = dict(tag.attr)
    attributes["size"] = "normal"
    if "title" not in attributes:
        attributes["title"] = escape(attachment.title or "")
    attributes.setdefault("rel", "lightbox")
    attributes.setdefault("class", "lightbox-link")

    def image(context):
        return tag.render(
            "attachment:image", {"size": "thumb", "alt": attributes["title"]}
        )

    with tag.scope(attachment):
        return tag.render("attachment:link", attributes, block=image)
