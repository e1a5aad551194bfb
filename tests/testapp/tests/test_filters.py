# ------------------------------------------------------------------------
# ------------------------------------------------------------------------

from django.test import SimpleTestCase, TestCase

from page_attachments.exceptions import TagError
from page_attachments.filters import UNBOUNDED_LIMIT, AttachmentFilter
from page_attachments.models import PageAttachment
from testapp.models import Page

from .utils import create_attachment, text_file


class AttachmentFilterTest(SimpleTestCase):
    def test_defaults(self):
        options = AttachmentFilter.from_attrs({})
        self.assertEqual(options.order_by, "position")
        self.assertIsNone(options.limit)
        self.assertIsNone(options.offset)
        self.assertTrue(options.matches("anything.at.all"))

    def test_extensions_and_prefix(self):
        options = AttachmentFilter.from_attrs(
            {"extensions": "png|pdf", "name_prefix": "img_"}
        )

        self.assertTrue(options.matches("img_cover.png"))
        self.assertTrue(options.matches("img_doc.pdf"))
        self.assertFalse(options.matches("cover.png"))
        self.assertFalse(options.matches("img_notes.txt"))
        self.assertFalse(options.matches("img_png"))

    def test_matching_ignores_case(self):
        options = AttachmentFilter.from_attrs(
            {"extensions": "PNG", "name_prefix": "IMG_"}
        )
        self.assertTrue(options.matches("img_cover.png"))
        self.assertTrue(options.matches("Img_Cover.Png"))
        self.assertFalse(options.matches("cover.png"))

    def test_sort_order(self):
        self.assertEqual(
            AttachmentFilter.from_attrs({"by": "filename", "order": "desc"}).order_by,
            "-filename",
        )
        self.assertEqual(
            AttachmentFilter.from_attrs({"by": "size"}).order_by, "size"
        )

    def test_pagination(self):
        options = AttachmentFilter.from_attrs({"offset": "5"})
        self.assertEqual(options.offset, 5)
        self.assertEqual(options.limit, UNBOUNDED_LIMIT)

        options = AttachmentFilter.from_attrs({"offset": "5", "limit": "2"})
        self.assertEqual((options.offset, options.limit), (5, 2))

        options = AttachmentFilter.from_attrs({"limit": "3"})
        self.assertEqual((options.offset, options.limit), (None, 3))

    def test_invalid_attributes(self):
        for attrs in (
            {"by": "id; DROP TABLE"},
            {"order": "sideways"},
            {"limit": "many"},
            {"offset": "-1"},
        ):
            with self.subTest(attrs=attrs):
                self.assertRaises(TagError, AttachmentFilter.from_attrs, attrs)


class AttachmentFilterQueryTest(TestCase):
    def setUp(self):
        self.page = Page.objects.create(title="Home")
        for name in (
            "img_cover.png",
            "cover.png",
            "img_doc.pdf",
            "img_notes.txt",
            "summary.pdf",
        ):
            create_attachment(self.page, text_file(name))
        self.attachments = PageAttachment.objects.for_page(self.page)

    def filenames(self, attrs):
        return [
            attachment.filename
            for attachment in AttachmentFilter.from_attrs(attrs).apply(
                self.attachments
            )
        ]

    def test_filter(self):
        self.assertEqual(
            self.filenames({"extensions": "png|pdf", "name_prefix": "img_"}),
            ["img_cover.png", "img_doc.pdf"],
        )
        self.assertEqual(
            self.filenames({"extensions": "pdf"}), ["img_doc.pdf", "summary.pdf"]
        )
        self.assertEqual(
            AttachmentFilter.from_attrs({"name_prefix": "img_"}).count(
                self.attachments
            ),
            3,
        )

    def test_predicate_agrees_with_query(self):
        options = AttachmentFilter.from_attrs(
            {"extensions": "png|txt", "name_prefix": "img_"}
        )
        self.assertEqual(
            [a.filename for a in options.apply(self.attachments)],
            [a.filename for a in self.attachments.order_by("position") if options.matches(a.filename)],
        )

    def test_query_ignores_case(self):
        create_attachment(self.page, text_file("IMG_SCAN.PNG"))
        options = AttachmentFilter.from_attrs({"extensions": "png", "name_prefix": "img_"})

        self.assertEqual(
            [a.filename for a in options.apply(self.attachments)],
            ["img_cover.png", "IMG_SCAN.PNG"],
        )
        self.assertTrue(options.matches("IMG_SCAN.PNG"))

    def test_order_and_pagination(self):
        self.assertEqual(
            self.filenames({"by": "filename", "order": "desc", "limit": "2"}),
            ["summary.pdf", "img_notes.txt"],
        )
        self.assertEqual(
            self.filenames({"offset": "3"}), ["img_notes.txt", "summary.pdf"]
        )
        self.assertEqual(
            self.filenames({"offset": "1", "limit": "2"}),
            ["cover.png", "img_doc.pdf"],
        )
