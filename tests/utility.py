"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import sys
import unittest
from collections.abc import Container, Iterable
from typing import TypeVar
from unittest.util import safe_repr

from tabapi.placeholders import find_unresolved
from tabapi.types import SignInInfo

T = TypeVar("T")

SITE_ID = "9a8b7c6d-5e4f-3a2b-1c0d-112233445566"
USER_ID = "1a2b3c4d-5e6f-7a8b-9c0d-aabbccddeeff"


def sign_in_info(site_id: str = SITE_ID, user_id: str | None = USER_ID, token: str | None = None) -> SignInInfo:
    return SignInInfo(site_id=site_id, user_id=user_id, token=token)


class TypedTestCase(unittest.TestCase):
    def assertEqual(self, first: T, second: T, msg: str | None = None) -> None:
        super().assertEqual(first, second, msg)

    def assertNotEqual(self, first: T, second: T, msg: str | None = None) -> None:
        super().assertNotEqual(first, second, msg)

    def assertIn(self, member: T, container: Iterable[T] | Container[T], msg: str | None = None) -> None:
        super().assertIn(member, container, msg)

    def assertNotIn(self, member: T, container: Iterable[T] | Container[T], msg: str | None = None) -> None:
        super().assertNotIn(member, container, msg)

    def assertListEqual(self, list1: list[T], list2: list[T], msg: str | None = None) -> None:
        super().assertListEqual(list1, list2, msg=msg)

    def assertResolved(self, url: str, msg: str | None = None) -> None:
        """Checks that no placeholder token is left in a URL."""

        unresolved = find_unresolved(url)
        if unresolved or "%%" in url:
            standardMsg = "%s has unresolved placeholders: %s" % (safe_repr(url), ", ".join(unresolved))
            self.fail(self._formatMessage(msg, standardMsg))

    if sys.version_info < (3, 14):

        def assertStartsWith(self, text: str, prefix: str, msg: str | None = None) -> None:
            """Just like self.assertTrue(text.startswith(prefix)), but with a nicer default message."""

            if not text.startswith(prefix):
                standardMsg = "%s does not start with %s" % (
                    safe_repr(text),
                    safe_repr(prefix),
                )
                self.fail(self._formatMessage(msg, standardMsg))
