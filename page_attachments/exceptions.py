from django.template import TemplateSyntaxError


class TagError(TemplateSyntaxError):
    """
    Wrong usage of an attachment tag, e.g. a missing ``name`` attribute or
    an image tag pointing to a PDF.
    """
