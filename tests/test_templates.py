"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import unittest

from tabapi.context import ServerConnectionContext
from tabapi.environment import InvalidContext
from tabapi.placeholders import Placeholder
from tabapi.templates import Operation, TemplateRegistry
from tabapi.versions import ServerProtocol, ServerVersion
from tests.utility import TypedTestCase


class TestTemplateRegistry(TypedTestCase):
    def test_every_operation(self) -> None:
        registry = TemplateRegistry(ServerConnectionContext(ServerProtocol.HTTPS, "tableau.example.com"))
        self.assertEqual(len(registry), len(Operation))
        for operation in Operation:
            with self.subTest(operation=operation):
                self.assertIn(operation, registry)
                self.assertStartsWith(registry.get_template(operation).text, "https://tableau.example.com/api/")

    def test_api_version_prefix(self) -> None:
        for version in ServerVersion:
            with self.subTest(version=version):
                context = ServerConnectionContext(ServerProtocol.HTTPS, "tableau.example.com", server_version=version)
                registry = TemplateRegistry(context)
                for operation in Operation:
                    if operation is Operation.GRAPHQL_METADATA:
                        continue
                    self.assertStartsWith(registry[operation].text, f"https://tableau.example.com/api/{context.api_version}/")

    def test_metadata_unversioned(self) -> None:
        registry = TemplateRegistry(ServerConnectionContext(ServerProtocol.HTTP, "tableau.example.com"))
        self.assertEqual(registry[Operation.GRAPHQL_METADATA].text, "http://tableau.example.com/api/metadata/graphql")

    def test_site_scoped(self) -> None:
        registry = TemplateRegistry(ServerConnectionContext(ServerProtocol.HTTPS, "tableau.example.com"))
        unscoped = {Operation.SIGN_IN, Operation.SCHEDULE, Operation.SCHEDULES, Operation.GRAPHQL_METADATA}
        for operation, template in registry.items():
            with self.subTest(operation=operation):
                if operation in unscoped:
                    self.assertNotIn(Placeholder.SITE_ID, template.placeholders)
                else:
                    self.assertIn(Placeholder.SITE_ID, template.placeholders)

    def test_declared_placeholders(self) -> None:
        registry = TemplateRegistry(ServerConnectionContext(ServerProtocol.HTTPS, "tableau.example.com"))
        self.assertEqual(
            registry[Operation.FINALIZE_DATASOURCE_PUBLISH].placeholders,
            frozenset([Placeholder.SITE_ID, Placeholder.UPLOAD_SESSION, Placeholder.DATASOURCE_TYPE]),
        )
        self.assertEqual(
            registry[Operation.UPDATE_USER].placeholders,
            frozenset([Placeholder.SITE_ID, Placeholder.USER_ID]),
        )
        self.assertEqual(registry[Operation.SIGN_IN].placeholders, frozenset())

    def test_invalid_context(self) -> None:
        with self.assertRaises(InvalidContext):
            TemplateRegistry("https://tableau.example.com")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
