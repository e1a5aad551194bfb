# ------------------------------------------------------------------------
# ------------------------------------------------------------------------

from django import template
from django.template.base import TokenType, token_kwargs
from django.utils.encoding import force_str

from page_attachments.tags import CONTAINER, OPTIONAL, library


register = template.Library()


class AttachmentTagNode(template.Node):
    def __init__(self, tag_name, kwargs, nodelist=None):
        self.tag_name = tag_name
        self.kwargs = kwargs
        self.nodelist = nodelist

    def __repr__(self):
        return "<%s: %s>" % (self.__class__.__name__, self.tag_name)

    def render(self, context):
        attrs = {
            key: force_str(value.resolve(context))
            for key, value in self.kwargs.items()
        }
        block = self.nodelist.render if self.nodelist is not None else None
        output = library.render(self.tag_name, attrs, context, block)
        return "" if output is None else force_str(output)


def _has_end_tag(parser, tag_name, end_tag):
    """
    Looks ahead for ``end_tag`` closing the tag currently being parsed,
    skipping nested ``tag_name``/``end_tag`` pairs. Consumed tokens are
    put back before returning.
    """

    consumed = []
    depth = 0
    found = False
    while parser.tokens:
        token = parser.next_token()
        consumed.append(token)
        if token.token_type != TokenType.BLOCK or not token.contents:
            continue
        command = token.contents.split()[0]
        if command == tag_name:
            depth += 1
        elif command == end_tag:
            if depth == 0:
                found = True
                break
            depth -= 1

    for token in reversed(consumed):
        parser.prepend_token(token)
    return found


def _compile_function(tag_name, container):
    django_name = tag_name.replace(":", "_")
    end_tag = "end%s" % django_name

    def compile_tag(parser, token):
        bits = token.split_contents()[1:]
        kwargs = token_kwargs(bits, parser)
        if bits:
            raise template.TemplateSyntaxError(
                '%r only accepts key="value" attributes, got %r'
                % (django_name, " ".join(bits))
            )

        nodelist = None
        if container == CONTAINER or (
            container == OPTIONAL and _has_end_tag(parser, django_name, end_tag)
        ):
            nodelist = parser.parse((end_tag,))
            parser.delete_first_token()

        return AttachmentTagNode(tag_name, kwargs, nodelist)

    compile_tag.__doc__ = library.tags[tag_name].__doc__
    return django_name, compile_tag


for _name, _handler in library.tags.items():
    register.tag(*_compile_function(_name, _handler.container))
