"""
``page_attachment_tags``
------------------------

Prints a reference of all attachment template tags, generated from their
descriptions.
"""

import textwrap

from django.core.management.base import BaseCommand

from page_attachments.tags import library


class Command(BaseCommand):
    help = "Prints the reference of all attachment template tags."

    def add_arguments(self, parser):
        parser.add_argument(
            "tags",
            nargs="*",
            help="Only describe these tags, e.g. attachment:link",
        )

    def handle(self, **options):
        wanted = set(options["tags"])

        for name, description in library.describe():
            if wanted and name not in wanted:
                continue
            self.stdout.write(self.style.MIGRATE_HEADING(name))
            self.stdout.write("    {%% %s %%}" % name.replace(":", "_"))
            self.stdout.write(textwrap.indent(description, "    "))
            self.stdout.write("")
