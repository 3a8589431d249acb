"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import os
import unittest
from unittest.mock import patch

from tabapi.environment import (
    ArgumentError,
    ConnectionProperties,
    ContentUrlError,
    InvalidContext,
    MissingProtocol,
    TemplateIncompleteError,
    UnknownServerVersion,
    UnrecognizedUrlShape,
)
from tests.utility import TypedTestCase


class TestConnectionProperties(TypedTestCase):
    @patch.dict(os.environ, {}, clear=True)
    def test_arguments(self) -> None:
        properties = ConnectionProperties(
            content_url=" https://tableau.example.com/#/site/finance ",
            site_id="S1",
            auth_token="token",
            user_id="U1",
            page_size=50,
            server_version="server10",
            headers={"User-Agent": "tabapi"},
        )
        self.assertEqual(properties.content_url, "https://tableau.example.com/#/site/finance")
        self.assertEqual(properties.site_id, "S1")
        self.assertEqual(properties.auth_token, "token")
        self.assertEqual(properties.user_id, "U1")
        self.assertEqual(properties.page_size, 50)
        self.assertEqual(properties.server_version, "server10")
        self.assertEqual(properties.headers, {"User-Agent": "tabapi"})

    @patch.dict(
        os.environ,
        {
            "TABLEAU_CONTENT_URL": "https://tableau.example.com/#/",
            "TABLEAU_SITE_ID": "S2",
            "TABLEAU_USER_ID": "U2",
            "TABLEAU_AUTH_TOKEN": "env-token",
            "TABLEAU_PAGE_SIZE": "250",
            "TABLEAU_SERVER_VERSION": "server2018.1",
        },
        clear=True,
    )
    def test_environment(self) -> None:
        properties = ConnectionProperties()
        self.assertEqual(properties.content_url, "https://tableau.example.com/#/")
        self.assertEqual(properties.site_id, "S2")
        self.assertEqual(properties.user_id, "U2")
        self.assertEqual(properties.auth_token, "env-token")
        self.assertEqual(properties.page_size, 250)
        self.assertEqual(properties.server_version, "server2018.1")

        # explicit arguments take precedence
        self.assertEqual(ConnectionProperties(site_id="S3", page_size=10).site_id, "S3")
        self.assertEqual(ConnectionProperties(site_id="S3", page_size=10).page_size, 10)

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self) -> None:
        properties = ConnectionProperties(content_url="https://tableau.example.com/#/")
        self.assertEqual(properties.page_size, 1000)
        self.assertIsNone(properties.site_id)
        self.assertIsNone(properties.server_version)

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_content_url(self) -> None:
        with self.assertRaises(ArgumentError):
            ConnectionProperties()

    @patch.dict(os.environ, {"TABLEAU_CONTENT_URL": "https://tableau.example.com/#/", "TABLEAU_PAGE_SIZE": "many"}, clear=True)
    def test_invalid_environment_page_size(self) -> None:
        with self.assertRaises(ArgumentError):
            ConnectionProperties()

    @patch.dict(os.environ, {}, clear=True)
    def test_invalid_page_size(self) -> None:
        with self.assertRaises(ArgumentError):
            ConnectionProperties(content_url="https://tableau.example.com/#/", page_size=0)


class TestErrors(TypedTestCase):
    def test_hierarchy(self) -> None:
        self.assertTrue(issubclass(InvalidContext, ArgumentError))
        self.assertTrue(issubclass(UnknownServerVersion, InvalidContext))
        self.assertTrue(issubclass(MissingProtocol, ContentUrlError))
        self.assertTrue(issubclass(UnrecognizedUrlShape, ContentUrlError))
        self.assertTrue(issubclass(ContentUrlError, ValueError))
        self.assertFalse(issubclass(TemplateIncompleteError, ValueError))

    def test_content_url_error(self) -> None:
        error = UnrecognizedUrlShape("could not infer version", "http://host/path")
        self.assertEqual(error.url, "http://host/path")
        self.assertEqual(str(error), "could not infer version: http://host/path")

    def test_template_incomplete(self) -> None:
        error = TemplateIncompleteError("https://host/sites/%%siteId%%", ("siteId",))
        self.assertEqual(str(error), "template replacement was incomplete, missing siteId: https://host/sites/%%siteId%%")
        self.assertEqual(str(TemplateIncompleteError("u")), "template replacement was incomplete: u")


if __name__ == "__main__":
    unittest.main()
