"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import datetime
import enum
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from urllib.parse import quote

from .environment import ArgumentError, TemplateIncompleteError

TOKEN_DELIMITER = "%%"
"Marks the start and end of a placeholder token in an endpoint template."

_TOKEN_PATTERN = re.compile(r"%%(\w+)%%")


@enum.unique
class Placeholder(enum.Enum):
    "Named substitution points in endpoint templates."

    SITE_ID = "siteId"
    USER_ID = "userId"
    WORKBOOK_ID = "workbookId"
    VIEW_ID = "viewId"
    GROUP_ID = "groupId"
    REPOSITORY_ID = "repositoryId"
    DATASOURCE_ID = "datasourceId"
    PAGE_SIZE = "pageSize"
    PAGE_NUMBER = "pageNumber"
    UPLOAD_SESSION = "uploadSession"
    DATASOURCE_TYPE = "datasourceType"
    WORKBOOK_TYPE = "workbookType"
    TAG_TEXT = "tagText"
    MAX_AGE = "maxAge"
    FILTER_VALUE = "filterValue"
    FIELD_NAME = "fieldName"
    FIELD_VALUE = "fieldValue"
    SCHEDULE_ID = "scheduleId"
    STARTED_AT = "startedAt"
    PAGE_TYPE = "pageType"
    PAGE_ORIENTATION = "pageOrientation"

    @property
    def token(self) -> str:
        "Token text that stands for this placeholder in a template, e.g. `%%siteId%%`."

        return f"{TOKEN_DELIMITER}{self.value}{TOKEN_DELIMITER}"


_PLACEHOLDERS_BY_NAME = {p.value: p for p in Placeholder}


@dataclass(frozen=True)
class EndpointTemplate:
    """
    A URL pattern with unresolved placeholder tokens.

    :param text: Template text, e.g. `https://host/api/2.3/sites/%%siteId%%/workbooks/%%workbookId%%`.
    :param placeholders: Placeholders the template declares, discovered when the template is created.
    """

    text: str
    placeholders: frozenset[Placeholder] = field(init=False)

    def __post_init__(self) -> None:
        found: list[Placeholder] = []
        for name in _TOKEN_PATTERN.findall(self.text):
            placeholder = _PLACEHOLDERS_BY_NAME.get(name)
            if placeholder is None:
                raise ArgumentError(f"unknown placeholder {name!r} in template: {self.text}")
            if placeholder in found:
                raise ArgumentError(f"placeholder {name!r} appears more than once in template: {self.text}")
            found.append(placeholder)
        object.__setattr__(self, "placeholders", frozenset(found))

    def __str__(self) -> str:
        return self.text


PlaceholderValue = str | int | enum.Enum | datetime.datetime
Bindings = Sequence[tuple[Placeholder, PlaceholderValue]] | Mapping[Placeholder, PlaceholderValue]


def format_timestamp(value: datetime.datetime) -> str:
    """
    Serializes a timestamp into a sortable, round-trippable ISO 8601 string in UTC, e.g. `2024-03-01T12:30:00Z`.

    Naive timestamps are taken to be in UTC.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    utc = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return f"{utc.isoformat()}Z"


def to_placeholder_value(value: PlaceholderValue) -> str:
    "Converts a binding value to the canonical string form substituted into a template."

    if value is None or isinstance(value, bool):
        raise ArgumentError(f"expected: string, integer, enumeration or timestamp; got: {value!r}")
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, datetime.datetime):
        return format_timestamp(value)

    raise ArgumentError(f"expected: string, integer, enumeration or timestamp; got: {value!r}")


def find_unresolved(url: str) -> list[str]:
    "Lists the names of placeholder tokens left in a URL."

    return _TOKEN_PATTERN.findall(url)


def ensure_resolved(url: str) -> str:
    """
    Checks that no placeholder token remains in a URL.

    :raises TemplateIncompleteError: Raised if any placeholder token is left unresolved.
    """

    unresolved = find_unresolved(url)
    if unresolved:
        raise TemplateIncompleteError(url, tuple(unresolved))
    return url


def _binding_pairs(bindings: Bindings) -> list[tuple[Placeholder, PlaceholderValue]]:
    if isinstance(bindings, Mapping):
        return list(bindings.items())
    else:
        return list(bindings)


def resolve(template: EndpointTemplate | str, bindings: Bindings = ()) -> str:
    """
    Substitutes placeholder values into an endpoint template.

    Every placeholder the template declares must be bound. Bindings for placeholders that the template does not
    declare are ignored. Each token is replaced exactly once; substituted text is never scanned for further tokens.

    :param template: Endpoint template with placeholder tokens.
    :param bindings: Ordered pairs of placeholder and value, or a mapping of placeholder to value.
    :returns: A URL with all placeholders resolved.
    :raises TemplateIncompleteError: Raised if a placeholder remains unresolved, or a value contains a placeholder token.
    """

    if isinstance(template, str):
        template = EndpointTemplate(template)

    pairs = _binding_pairs(bindings)
    bound: set[Placeholder] = set()
    for placeholder, _ in pairs:
        if not isinstance(placeholder, Placeholder):
            raise ArgumentError(f"expected: placeholder; got: {placeholder!r}")
        if placeholder in bound:
            raise ArgumentError(f"placeholder bound more than once: {placeholder.value}")
        bound.add(placeholder)

    missing = template.placeholders - bound
    if missing:
        raise TemplateIncompleteError(template.text, tuple(sorted(p.value for p in missing)))

    values: dict[str, str] = {}
    for placeholder, value in pairs:
        if placeholder in template.placeholders:
            text = to_placeholder_value(value)
            tokens = find_unresolved(text)
            if tokens:
                raise TemplateIncompleteError(template.text, tuple(tokens))
            values[placeholder.value] = text

    url = _TOKEN_PATTERN.sub(lambda m: values[m.group(1)], template.text)

    # values are substituted verbatim, check that none re-introduced a token
    return ensure_resolved(url)


VIEW_FILTER_TEMPLATE = EndpointTemplate(f"vf_{Placeholder.FIELD_NAME.token}={Placeholder.FIELD_VALUE.token}")
"Query string fragment that filters view data or images on the value of a field."


def view_filter(field_name: str, field_value: str) -> str:
    """
    Builds a view filter query string fragment such as `vf_Region=West`.

    The fragment is bound to the `filterValue` placeholder of the view data and view image endpoints.

    :param field_name: Name of the field to filter on.
    :param field_value: Value to match.
    """

    if not field_name:
        raise ArgumentError("filter field name not specified")

    return resolve(
        VIEW_FILTER_TEMPLATE,
        [
            (Placeholder.FIELD_NAME, quote(field_name, safe="")),
            (Placeholder.FIELD_VALUE, quote(field_value, safe="")),
        ],
    )
