from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from django.template import Context, Template
from PIL import Image

from page_attachments.models import PageAttachment


def image_file(name="cover.png", size=(300, 200), format="PNG"):
    buf = BytesIO()
    Image.new("RGB", size, "red").save(buf, format)
    return SimpleUploadedFile(name, buf.getvalue())


def text_file(name="notes.txt", content=b"Lorem ipsum dolor sit amet"):
    return SimpleUploadedFile(name, content)


def create_attachment(page, file, **kwargs):
    return PageAttachment.objects.create(page=page, file=file, **kwargs)


def render(source, **context):
    return Template("{% load page_attachment_tags %}" + source).render(
        Context(context)
    )
