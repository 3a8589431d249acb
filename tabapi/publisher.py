"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

import lxml.etree as ET
import requests
from urllib3.fields import RequestField
from urllib3.filepost import encode_multipart_formdata

from .content_url import parse_content_url
from .entities import SiteDatasource, SiteWorkbook, parse_datasource, parse_upload_session, parse_workbook
from .environment import ArgumentError, ConnectionProperties, TableauError
from .serializer import JsonType, json_payload_to_object, object_to_json_payload
from .types import SignInInfo
from .upload import UploadCoordinator, UploadSequence, iter_chunks
from .urls import ServerUrls
from .versions import server_version_from_tag

LOGGER = logging.getLogger(__name__)

DATASOURCE_TYPES = ("tds", "tdsx", "tde", "hyper")
WORKBOOK_TYPES = ("twb", "twbx")


def _infer_type(path: Path, known: tuple[str, ...], kind: str) -> str:
    suffix = path.suffix.lower().removeprefix(".")
    if suffix not in known:
        raise ArgumentError(f"cannot infer {kind} type from file name: {path.name}; expected one of: {', '.join(known)}")
    return suffix


def multipart_mixed(request_payload: bytes, *, file_name: str | None = None, file_data: bytes | None = None) -> tuple[bytes, str]:
    """
    Encodes a request body as `multipart/mixed`, as expected by file upload endpoints.

    :param request_payload: XML request payload, sent as part `request_payload`.
    :param file_name: File name to report for the file part.
    :param file_data: File content, sent as part `tableau_file`.
    :returns: Encoded body and the value for the `Content-Type` header.
    """

    payload_field = RequestField(name="request_payload", data=request_payload)
    payload_field.make_multipart(content_type="text/xml")
    fields = [payload_field]

    if file_data is not None:
        file_field = RequestField(name="tableau_file", data=file_data, filename=file_name or "file")
        file_field.make_multipart(content_type="application/octet-stream")
        fields.append(file_field)

    body, content_type = encode_multipart_formdata(fields)
    return body, content_type.replace("multipart/form-data", "multipart/mixed", 1)


def _publish_request(kind: str, name: str, project_id: str, attributes: dict[str, str] | None = None) -> bytes:
    request = ET.Element("tsRequest")
    content = ET.SubElement(request, kind, name=name, **(attributes or {}))
    ET.SubElement(content, "project", id=project_id)
    return ET.tostring(request, encoding="utf-8")


@dataclass(frozen=True)
class GraphQLRequest:
    query: str
    variables: dict[str, JsonType] | None = None


@dataclass(frozen=True)
class GraphQLResponse:
    data: JsonType = None
    errors: list[JsonType] | None = None


class TableauPublisher:
    """
    Publishes content to a Tableau Server site with chunked uploads.

    HTTP errors propagate as `requests.HTTPError`; no retries are attempted.
    """

    urls: ServerUrls
    sign_in: SignInInfo
    coordinator: UploadCoordinator

    _session: requests.Session

    def __init__(self, session: requests.Session, urls: ServerUrls, sign_in: SignInInfo) -> None:
        self._session = session
        self.urls = urls
        self.sign_in = sign_in
        self.coordinator = UploadCoordinator(urls)

        if sign_in.token:
            self._session.headers.update({"X-Tableau-Auth": sign_in.token})

    def close(self) -> None:
        self._session.close()

    def _send(self, method: str, url: str, *, data: bytes, content_type: str) -> bytes:
        response = self._session.request(method, url, data=data, headers={"Content-Type": content_type}, verify=True)
        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        response.raise_for_status()
        return response.content

    def upload_file(self, path: Path) -> UploadSequence:
        """
        Uploads a file in chunks, without publishing it.

        :param path: Path to the file to upload.
        :returns: The upload sequence in initiated state, ready to be finalized.
        """

        if not path.is_file():
            raise ArgumentError(f"file not found: {path}")

        sequence = UploadSequence(self.coordinator, self.sign_in)

        LOGGER.info("Initiating upload: %s", path.name)
        payload = self._send("POST", sequence.initiate_url(), data=b"", content_type="application/xml")
        session = sequence.start(parse_upload_session(payload))

        with open(path, "rb") as file:
            for chunk in iter_chunks(file, self.coordinator.chunk_size):
                body, content_type = multipart_mixed(b"", file_name=path.name, file_data=chunk)
                LOGGER.debug("Appending %d bytes to upload session %s", len(chunk), session.session_id)
                self._send("PUT", sequence.append_url(), data=body, content_type=content_type)

        LOGGER.info("Uploaded %s in %d chunk(s)", path.name, sequence.chunk_count)
        return sequence

    def publish_datasource(self, path: Path, *, project_id: str, name: str | None = None, datasource_type: str | None = None) -> SiteDatasource:
        """
        Publishes a data source, overwriting an existing data source with the same name in the project.

        :param path: Path to a `.tds`, `.tdsx`, `.tde` or `.hyper` file.
        :param project_id: Project to publish the data source into.
        :param name: Data source name, defaults to the file name without extension.
        :param datasource_type: Data source type, inferred from the file extension if omitted.
        :returns: The published data source.
        """

        if datasource_type is None:
            datasource_type = _infer_type(path, DATASOURCE_TYPES, "data source")

        sequence = self.upload_file(path)
        url = sequence.finalize_datasource_url(datasource_type)
        body, content_type = multipart_mixed(_publish_request("datasource", name or path.stem, project_id))

        LOGGER.info("Publishing data source: %s", name or path.stem)
        return parse_datasource(self._send("POST", url, data=body, content_type=content_type))

    def publish_workbook(
        self, path: Path, *, project_id: str, name: str | None = None, workbook_type: str | None = None, show_tabs: bool = False
    ) -> SiteWorkbook:
        """
        Publishes a workbook, overwriting an existing workbook with the same name in the project.

        :param path: Path to a `.twb` or `.twbx` file.
        :param project_id: Project to publish the workbook into.
        :param name: Workbook name, defaults to the file name without extension.
        :param workbook_type: Workbook type, inferred from the file extension if omitted.
        :param show_tabs: Whether to show views as tabs.
        :returns: The published workbook.
        """

        if workbook_type is None:
            workbook_type = _infer_type(path, WORKBOOK_TYPES, "workbook")

        sequence = self.upload_file(path)
        url = sequence.finalize_workbook_url(workbook_type)
        request = _publish_request("workbook", name or path.stem, project_id, {"showTabs": "true" if show_tabs else "false"})
        body, content_type = multipart_mixed(request)

        LOGGER.info("Publishing workbook: %s", name or path.stem)
        return parse_workbook(self._send("POST", url, data=body, content_type=content_type))

    def publish(self, path: Path, *, project_id: str, name: str | None = None) -> SiteDatasource | SiteWorkbook:
        "Publishes a workbook or a data source, depending on the file extension."

        suffix = path.suffix.lower().removeprefix(".")
        if suffix in WORKBOOK_TYPES:
            return self.publish_workbook(path, project_id=project_id, name=name)
        elif suffix in DATASOURCE_TYPES:
            return self.publish_datasource(path, project_id=project_id, name=name)
        else:
            raise ArgumentError(f"not a workbook or data source: {path.name}")

    def query_metadata(self, query: str, variables: dict[str, JsonType] | None = None) -> JsonType:
        """
        Runs a GraphQL query against the metadata API.

        :param query: GraphQL query text.
        :param variables: Values for variables referenced in the query.
        :returns: The `data` member of the response.
        """

        payload = object_to_json_payload(GraphQLRequest(query=query, variables=variables))
        response = self._session.post(
            self.urls.graphql_metadata(),
            data=payload,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            verify=True,
        )
        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        response.raise_for_status()

        result = json_payload_to_object(GraphQLResponse, response.content)
        if result.errors:
            raise TableauError(f"metadata query failed: {result.errors}")
        return result.data


class TableauAPI:
    """
    Represents an active connection to a Tableau Server site.
    """

    properties: ConnectionProperties
    publisher: TableauPublisher | None = None

    def __init__(self, properties: ConnectionProperties | None = None) -> None:
        self.properties = properties or ConnectionProperties()

    def server_urls(self) -> ServerUrls:
        "Creates the set of URLs for the configured content URL and server version."

        context = parse_content_url(self.properties.content_url, self.properties.page_size)
        if self.properties.server_version:
            context = dataclasses.replace(context, server_version=server_version_from_tag(self.properties.server_version))
        return ServerUrls(context)

    def __enter__(self) -> TableauPublisher:
        if not self.properties.site_id:
            raise ArgumentError("Tableau site ID not specified")

        urls = self.server_urls()

        session = requests.Session()
        if self.properties.headers:
            session.headers.update(self.properties.headers)

        sign_in = SignInInfo(site_id=self.properties.site_id, user_id=self.properties.user_id, token=self.properties.auth_token)
        self.publisher = TableauPublisher(session, urls, sign_in)
        return self.publisher

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.publisher is not None:
            self.publisher.close()
            self.publisher = None
