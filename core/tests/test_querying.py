from django.test import SimpleTestCase, override_settings
from rest_framework.exceptions import ValidationError

from core.exceptions import _first_message
from core.querying import paginate, parse_bool, parse_csv


class ParamParsingTestCase(SimpleTestCase):
    def test_parse_csv(self):
        self.assertEqual(parse_csv(" a, b,,c "), ["a", "b", "c"])
        self.assertEqual(parse_csv(["a,b", "c"]), ["a", "b", "c"])
        self.assertEqual(parse_csv(None), [])

    def test_parse_bool(self):
        for value in ("1", "true", "YES", "on"):
            self.assertTrue(parse_bool(value))
        for value in ("", "0", "false", None):
            self.assertFalse(parse_bool(value))


class FirstMessageTestCase(SimpleTestCase):
    def test_field_errors_are_prefixed(self):
        self.assertEqual(_first_message({"title": ["This field is required."]}), "title: This field is required.")

    def test_detail_and_non_field_errors(self):
        self.assertEqual(_first_message({"detail": "Project not found"}), "Project not found")
        self.assertEqual(_first_message({"non_field_errors": ["Invalid credentials"]}), "Invalid credentials")


@override_settings(DEFAULT_PAGE_LIMIT=5, MAX_PAGE_LIMIT=20)
class PaginationParamsTestCase(SimpleTestCase):
    def test_non_integer_limit_is_validation_error(self):
        with self.assertRaises(ValidationError):
            paginate([], {"limit": "ten"})

    def test_defaults_and_cap(self):
        class FakeQuerySet(list):
            def count(self):
                return len(self)

        rows = FakeQuerySet(range(30))
        page, meta = paginate(rows, {})
        self.assertEqual(meta, {"total": 30, "page": 1, "limit": 5, "pages": 6})
        self.assertEqual(list(page), [0, 1, 2, 3, 4])

        page, meta = paginate(rows, {"page": "2", "limit": "50"})
        self.assertEqual(meta["limit"], 20)
        self.assertEqual(list(page), list(range(20, 30)))
