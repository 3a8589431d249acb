"""
Common type definitions and protocols.

Copyright 2022-2026, Levente Hunyadi
"""

import enum
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class SiteIdentity(Protocol):
    """
    A protocol for sign-in information that identifies the site a request is addressed to.
    """

    @property
    def site_id(self) -> str:
        """
        The site identifier (LUID) obtained when signing in.
        """
        ...


@dataclass(frozen=True)
class SignInInfo:
    """
    Information obtained when signing in to Tableau Server.

    :param site_id: Site identifier (LUID).
    :param user_id: Identifier (LUID) of the signed-in user.
    :param token: Credentials token to pass in the `X-Tableau-Auth` header.
    """

    site_id: str
    user_id: str | None = None
    token: str | None = None


@enum.unique
class PageType(enum.Enum):
    "Paper size for PDF export."

    A3 = "A3"
    A4 = "A4"
    A5 = "A5"
    B4 = "B4"
    B5 = "B5"
    EXECUTIVE = "Executive"
    FOLIO = "Folio"
    LEDGER = "Ledger"
    LEGAL = "Legal"
    LETTER = "Letter"
    NOTE = "Note"
    QUARTO = "Quarto"
    TABLOID = "Tabloid"


@enum.unique
class PageOrientation(enum.Enum):
    "Page orientation for PDF export."

    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"
