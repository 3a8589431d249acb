"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass

import lxml.etree as ET

from .environment import TableauError
from .upload import UploadSession


def _local_name(element: ET._Element) -> str:
    return ET.QName(element).localname


def _child(element: ET._Element, name: str) -> ET._Element | None:
    "Finds the first child element with the given local name, irrespective of XML namespace."

    for child in element:
        if isinstance(child.tag, str) and _local_name(child) == name:
            return child
    return None


def _children(element: ET._Element, name: str) -> list[ET._Element]:
    return [child for child in element if isinstance(child.tag, str) and _local_name(child) == name]


def _descendant(element: ET._Element, name: str) -> ET._Element | None:
    for child in element.iter():
        if isinstance(child.tag, str) and _local_name(child) == name:
            return child
    return None


def _required_attribute(element: ET._Element, name: str) -> str:
    value = element.get(name)
    if value is None:
        raise TableauError(f"expected: attribute `{name}` on element `{_local_name(element)}`")
    return value


def parse_xml(data: bytes | str) -> ET._Element:
    "Parses an XML response body returned by Tableau Server."

    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        return ET.fromstring(data, parser=ET.XMLParser(resolve_entities=False, no_network=True))
    except ET.XMLSyntaxError as e:
        raise TableauError(f"malformed XML response: {e}") from e


@dataclass(frozen=True)
class SiteConnection:
    """
    A data connection of a workbook or data source.

    :param id: Connection ID.
    :param type: Connection type, e.g. `sqlserver` or `excel-direct`.
    :param server_address: Address of the database server, if any.
    :param server_port: Port of the database server, if any.
    :param user_name: User name used for the connection, if any.
    """

    id: str
    type: str
    server_address: str | None = None
    server_port: str | None = None
    user_name: str | None = None

    @classmethod
    def from_element(cls, element: ET._Element) -> "SiteConnection":
        if _local_name(element) != "connection":
            raise TableauError(f"unexpected content; expected: connection, got: {_local_name(element)}")

        return cls(
            id=_required_attribute(element, "id"),
            type=element.get("type", ""),
            server_address=element.get("serverAddress"),
            server_port=element.get("serverPort"),
            user_name=element.get("userName"),
        )


def parse_connections(data: bytes | str) -> list[SiteConnection]:
    "Parses the list of data connections returned for a workbook or data source."

    root = parse_xml(data)
    connections = _descendant(root, "connections")
    if connections is None:
        return []
    return [SiteConnection.from_element(e) for e in _children(connections, "connection")]


@dataclass(frozen=True)
class SiteDocument:
    """
    Information about a document (workbook or data source) in a site.

    :param id: Document ID.
    :param name: Display name.
    :param content_url: Name of the document as it appears in URLs.
    :param project_id: ID of the project that contains the document.
    :param project_name: Name of the project that contains the document.
    :param owner_id: ID of the user who owns the document.
    :param tags: Tags assigned to the document.
    """

    id: str
    name: str
    content_url: str | None
    project_id: str | None
    project_name: str | None
    owner_id: str | None
    tags: tuple[str, ...]

    @staticmethod
    def _document_fields(element: ET._Element) -> dict[str, object]:
        project = _child(element, "project")
        owner = _child(element, "owner")
        tags = _child(element, "tags")
        return {
            "id": _required_attribute(element, "id"),
            "name": element.get("name", ""),
            "content_url": element.get("contentUrl"),
            "project_id": project.get("id") if project is not None else None,
            "project_name": project.get("name") if project is not None else None,
            "owner_id": owner.get("id") if owner is not None else None,
            "tags": tuple(tag.get("label", "") for tag in _children(tags, "tag")) if tags is not None else (),
        }


@dataclass(frozen=True)
class SiteDatasource(SiteDocument):
    """
    Information about a data source in a site.

    :param type: The underlying source of the data, e.g. SQL Server, MySQL, Excel or CSV.
    :param data_connections: Data connections, if they have been downloaded.
    """

    type: str | None = None
    data_connections: tuple[SiteConnection, ...] | None = None

    @classmethod
    def from_element(cls, element: ET._Element) -> "SiteDatasource":
        "Creates a data source from XML returned by Tableau Server."

        if _local_name(element).lower() != "datasource":
            raise TableauError(f"unexpected content; expected: datasource, got: {_local_name(element)}")

        return cls(type=element.get("type"), **cls._document_fields(element))  # type: ignore[arg-type]

    def with_data_connections(self, connections: Iterable[SiteConnection] | None) -> "SiteDatasource":
        "Returns a copy of the data source with the set of data connections attached."

        return dataclasses.replace(self, data_connections=tuple(connections) if connections is not None else None)

    def __str__(self) -> str:
        return f"Datasource: {self.name}/{self.type}/{self.id}"


@dataclass(frozen=True)
class SiteWorkbook(SiteDocument):
    """
    Information about a workbook in a site.

    :param show_tabs: Whether views are shown as tabs.
    """

    show_tabs: bool = False

    @classmethod
    def from_element(cls, element: ET._Element) -> "SiteWorkbook":
        "Creates a workbook from XML returned by Tableau Server."

        if _local_name(element).lower() != "workbook":
            raise TableauError(f"unexpected content; expected: workbook, got: {_local_name(element)}")

        return cls(show_tabs=element.get("showTabs", "false").lower() == "true", **cls._document_fields(element))  # type: ignore[arg-type]

    def __str__(self) -> str:
        return f"Workbook: {self.name}/{self.id}"


def parse_datasource(data: bytes | str) -> SiteDatasource:
    "Parses the data source in a response to a query or publish request."

    element = _descendant(parse_xml(data), "datasource")
    if element is None:
        raise TableauError("expected: datasource in response")
    return SiteDatasource.from_element(element)


def parse_datasources(data: bytes | str) -> list[SiteDatasource]:
    "Parses a page of the list of data sources in a site."

    datasources = _descendant(parse_xml(data), "datasources")
    if datasources is None:
        return []
    return [SiteDatasource.from_element(e) for e in _children(datasources, "datasource")]


def parse_workbook(data: bytes | str) -> SiteWorkbook:
    "Parses the workbook in a response to a query or publish request."

    element = _descendant(parse_xml(data), "workbook")
    if element is None:
        raise TableauError("expected: workbook in response")
    return SiteWorkbook.from_element(element)


def parse_upload_session(data: bytes | str) -> UploadSession:
    "Parses the upload session identifier in a response to a request that initiates a file upload."

    element = _descendant(parse_xml(data), "fileUpload")
    if element is None:
        raise TableauError("expected: fileUpload in response")
    return UploadSession(_required_attribute(element, "uploadSessionId"))
