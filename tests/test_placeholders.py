"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import datetime
import unittest

from tabapi.environment import ArgumentError, TemplateIncompleteError
from tabapi.placeholders import (
    EndpointTemplate,
    Placeholder,
    ensure_resolved,
    find_unresolved,
    format_timestamp,
    resolve,
    to_placeholder_value,
    view_filter,
)
from tabapi.types import PageOrientation
from tests.utility import TypedTestCase

TEMPLATE = "https://host/api/2.0/sites/%%siteId%%/users/%%userId%%/workbooks?pageSize=%%pageSize%%&pageNumber=%%pageNumber%%"


class TestEndpointTemplate(TypedTestCase):
    def test_placeholders(self) -> None:
        template = EndpointTemplate(TEMPLATE)
        self.assertEqual(
            template.placeholders,
            frozenset([Placeholder.SITE_ID, Placeholder.USER_ID, Placeholder.PAGE_SIZE, Placeholder.PAGE_NUMBER]),
        )
        self.assertEqual(str(template), TEMPLATE)

    def test_no_placeholders(self) -> None:
        template = EndpointTemplate("https://host/api/2.0/auth/signin")
        self.assertEqual(template.placeholders, frozenset())

    def test_unknown_placeholder(self) -> None:
        with self.assertRaises(ArgumentError):
            EndpointTemplate("https://host/api/2.0/sites/%%siteLuid%%")

    def test_repeated_placeholder(self) -> None:
        with self.assertRaises(ArgumentError):
            EndpointTemplate("https://host/api/2.0/sites/%%siteId%%/sites/%%siteId%%")

    def test_token(self) -> None:
        self.assertEqual(Placeholder.SITE_ID.token, "%%siteId%%")
        self.assertEqual(Placeholder.FILTER_VALUE.token, "%%filterValue%%")


class TestResolve(TypedTestCase):
    def test_resolve(self) -> None:
        url = resolve(
            TEMPLATE,
            [
                (Placeholder.SITE_ID, "S1"),
                (Placeholder.USER_ID, "U1"),
                (Placeholder.PAGE_SIZE, 100),
                (Placeholder.PAGE_NUMBER, 2),
            ],
        )
        self.assertEqual(url, "https://host/api/2.0/sites/S1/users/U1/workbooks?pageSize=100&pageNumber=2")
        self.assertResolved(url)

    def test_mapping(self) -> None:
        url = resolve(
            EndpointTemplate("https://host/api/2.0/sites/%%siteId%%/views/%%viewId%%"),
            {Placeholder.SITE_ID: "S1", Placeholder.VIEW_ID: "V1"},
        )
        self.assertEqual(url, "https://host/api/2.0/sites/S1/views/V1")

    def test_missing(self) -> None:
        with self.assertRaises(TemplateIncompleteError) as context:
            resolve(TEMPLATE, [(Placeholder.SITE_ID, "S1"), (Placeholder.PAGE_SIZE, 100), (Placeholder.PAGE_NUMBER, 1)])
        self.assertEqual(context.exception.missing, ("userId",))
        self.assertIn("userId", str(context.exception))
        self.assertEqual(context.exception.url, TEMPLATE)

    def test_extra_bindings_ignored(self) -> None:
        url = resolve(
            "https://host/api/2.0/sites/%%siteId%%",
            [(Placeholder.SITE_ID, "S1"), (Placeholder.WORKBOOK_ID, "W1"), (Placeholder.TAG_TEXT, "%%userId%%")],
        )
        self.assertEqual(url, "https://host/api/2.0/sites/S1")

    def test_duplicate_binding(self) -> None:
        with self.assertRaises(ArgumentError):
            resolve("https://host/api/2.0/sites/%%siteId%%", [(Placeholder.SITE_ID, "S1"), (Placeholder.SITE_ID, "S2")])

    def test_value_with_token(self) -> None:
        with self.assertRaises(TemplateIncompleteError):
            resolve("https://host/api/2.0/sites/%%siteId%%", [(Placeholder.SITE_ID, "%%userId%%")])

    def test_value_with_later_token(self) -> None:
        with self.assertRaises(TemplateIncompleteError) as context:
            resolve(
                "https://host/api/2.0/sites/%%siteId%%/workbooks/%%workbookId%%",
                [(Placeholder.SITE_ID, "%%workbookId%%"), (Placeholder.WORKBOOK_ID, "W1")],
            )
        self.assertEqual(context.exception.missing, ("workbookId",))

    def test_value_with_earlier_token(self) -> None:
        with self.assertRaises(TemplateIncompleteError):
            resolve(
                "https://host/api/2.0/sites/%%siteId%%/workbooks/%%workbookId%%",
                [(Placeholder.SITE_ID, "S1"), (Placeholder.WORKBOOK_ID, "%%siteId%%")],
            )

    def test_value_with_delimiter(self) -> None:
        url = resolve("https://host/api/2.0/sites/%%siteId%%/views/%%viewId%%", [(Placeholder.SITE_ID, "100%%"), (Placeholder.VIEW_ID, "V1")])
        self.assertEqual(url, "https://host/api/2.0/sites/100%%/views/V1")

    def test_idempotent(self) -> None:
        bindings = [(Placeholder.SITE_ID, "S1"), (Placeholder.USER_ID, "U1"), (Placeholder.PAGE_SIZE, 10), (Placeholder.PAGE_NUMBER, 1)]
        self.assertEqual(resolve(TEMPLATE, bindings), resolve(TEMPLATE, bindings))

    def test_enum_value(self) -> None:
        url = resolve("https://host/pdf?orientation=%%pageOrientation%%", [(Placeholder.PAGE_ORIENTATION, PageOrientation.LANDSCAPE)])
        self.assertEqual(url, "https://host/pdf?orientation=Landscape")

    def test_invalid_value(self) -> None:
        with self.assertRaises(ArgumentError):
            to_placeholder_value(True)
        with self.assertRaises(ArgumentError):
            to_placeholder_value(None)  # type: ignore[arg-type]
        with self.assertRaises(ArgumentError):
            to_placeholder_value(1.5)  # type: ignore[arg-type]


class TestUnresolved(TypedTestCase):
    def test_find_unresolved(self) -> None:
        self.assertListEqual(find_unresolved("https://host/sites/%%siteId%%/users/%%userId%%"), ["siteId", "userId"])
        self.assertListEqual(find_unresolved("https://host/sites/S1"), [])

    def test_ensure_resolved(self) -> None:
        self.assertEqual(ensure_resolved("https://host/sites/S1"), "https://host/sites/S1")
        with self.assertRaises(TemplateIncompleteError):
            ensure_resolved("https://host/sites/%%siteId%%")


class TestTimestamp(TypedTestCase):
    def test_utc(self) -> None:
        value = datetime.datetime(2024, 3, 1, 12, 30, 0, tzinfo=datetime.timezone.utc)
        self.assertEqual(format_timestamp(value), "2024-03-01T12:30:00Z")

    def test_naive(self) -> None:
        self.assertEqual(format_timestamp(datetime.datetime(2024, 3, 1, 12, 30, 0)), "2024-03-01T12:30:00Z")

    def test_offset(self) -> None:
        value = datetime.datetime(2024, 3, 1, 14, 30, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=2)))
        self.assertEqual(format_timestamp(value), "2024-03-01T12:30:00Z")

    def test_fraction(self) -> None:
        value = datetime.datetime(2024, 3, 1, 12, 30, 0, 250000, tzinfo=datetime.timezone.utc)
        self.assertEqual(format_timestamp(value), "2024-03-01T12:30:00.250000Z")

    def test_sortable(self) -> None:
        earlier = format_timestamp(datetime.datetime(2023, 12, 31, 23, 59, 59))
        later = format_timestamp(datetime.datetime(2024, 1, 1, 0, 0, 0))
        self.assertLess(earlier, later)


class TestViewFilter(TypedTestCase):
    def test_filter(self) -> None:
        self.assertEqual(view_filter("Region", "West"), "vf_Region=West")

    def test_quoting(self) -> None:
        self.assertEqual(view_filter("Sub Category", "A&B"), "vf_Sub%20Category=A%26B")

    def test_empty_value(self) -> None:
        self.assertEqual(view_filter("Region", ""), "vf_Region=")

    def test_empty_name(self) -> None:
        with self.assertRaises(ArgumentError):
            view_filter("", "West")


if __name__ == "__main__":
    unittest.main()
