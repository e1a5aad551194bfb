from io import StringIO

from django.core.management import call_command
from django.test import SimpleTestCase


class PageAttachmentTagsCommandTest(SimpleTestCase):
    def test_reference(self):
        out = StringIO()
        call_command("page_attachment_tags", stdout=out, no_color=True)
        output = out.getvalue()

        self.assertIn("attachment:lightboxthumb", output)
        self.assertIn("{% attachment_lightboxthumb %}", output)
        self.assertIn("if_attachments", output)
        self.assertIn("    Renders the title of the attachment", output)

    def test_selected_tags(self):
        out = StringIO()
        call_command("page_attachment_tags", "attachment:size", stdout=out, no_color=True)
        output = out.getvalue()

        self.assertIn("{% attachment_size %}", output)
        self.assertNotIn("attachment:lightboxthumb", output)
