# ------------------------------------------------------------------------
# ------------------------------------------------------------------------

from django.db.models import Q

from page_attachments.exceptions import TagError


#: Limit applied when only an offset is given, so that offset-only
#: pagination returns every remaining attachment.
UNBOUNDED_LIMIT = 9999

SORTABLE_FIELDS = (
    "filename",
    "title",
    "description",
    "content_type",
    "size",
    "width",
    "height",
    "created_at",
    "updated_at",
    "position",
)


class AttachmentFilter:
    """
    Filter, sort order and pagination of an attachment listing, built from
    the attributes of ``attachment:each``, ``if_attachments`` and
    ``unless_attachments``::

        <r:attachment:each extensions="png|pdf" name_prefix="img_"
            by="filename" order="desc" limit="10" offset="5">
    """

    def __init__(
        self,
        extensions=(),
        name_prefix="",
        by="position",
        order="asc",
        limit=None,
        offset=None,
    ):
        if by not in SORTABLE_FIELDS:
            raise TagError("cannot sort attachments by %r" % by)
        if order not in ("asc", "desc"):
            raise TagError("'order' must be 'asc' or 'desc', not %r" % order)

        self.extensions = [ext for ext in extensions if ext]
        self.name_prefix = name_prefix or ""
        self.by = by
        self.order = order
        self.offset = offset
        if limit is None and offset is not None:
            limit = UNBOUNDED_LIMIT
        self.limit = limit

    @classmethod
    def from_attrs(cls, attrs):
        extensions = attrs.get("extensions") or ""
        return cls(
            extensions=extensions.split("|"),
            name_prefix=attrs.get("name_prefix"),
            by=attrs.get("by") or "position",
            order=attrs.get("order") or "asc",
            limit=_integer(attrs, "limit"),
            offset=_integer(attrs, "offset"),
        )

    def __repr__(self):
        return "<%s %s order_by=%s limit=%s offset=%s>" % (
            self.__class__.__name__,
            self.q,
            self.order_by,
            self.limit,
            self.offset,
        )

    @property
    def q(self):
        q = Q()
        if self.extensions:
            any_extension = Q()
            for ext in self.extensions:
                any_extension |= Q(filename__iendswith=".%s" % ext)
            q &= any_extension
        if self.name_prefix:
            q &= Q(filename__istartswith=self.name_prefix)
        return q

    def matches(self, filename):
        # Case-insensitive, like LIKE on SQLite and MySQL
        filename = filename.lower()
        if self.extensions and not any(
            filename.endswith(".%s" % ext.lower()) for ext in self.extensions
        ):
            return False
        return filename.startswith(self.name_prefix.lower())

    @property
    def order_by(self):
        return ("-%s" if self.order == "desc" else "%s") % self.by

    def filter(self, queryset):
        return queryset.filter(self.q)

    def count(self, queryset):
        return self.filter(queryset).count()

    def apply(self, queryset):
        queryset = self.filter(queryset).order_by(self.order_by, "pk")
        offset = self.offset or 0
        if self.limit is not None:
            return queryset[offset : offset + self.limit]
        return queryset[offset:]


def _integer(attrs, key):
    value = attrs.get(key)
    if value in (None, ""):
        return None
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise TagError("'%s' must be a number, not %r" % (key, value))
    if value < 0:
        raise TagError("'%s' may not be negative" % key)
    return value
