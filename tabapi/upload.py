"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import enum
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from .context import UPLOAD_CHUNK_SIZE
from .environment import ArgumentError, InvalidSessionState
from .types import SiteIdentity
from .urls import ServerUrls

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadSession:
    """
    Correlates the phases of a chunked upload.

    :param session_id: Opaque identifier issued by the server when the upload is initiated.
    """

    session_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.session_id, str) or not self.session_id.strip():
            raise InvalidSessionState("upload session identifier is empty")


def _session_id(session: UploadSession | str | None) -> str:
    if session is None:
        raise InvalidSessionState("upload session not initiated")
    if isinstance(session, UploadSession):
        return session.session_id
    return UploadSession(session).session_id


@enum.unique
class UploadState(enum.Enum):
    "Phases of a chunked upload, which advance strictly in order."

    NOT_STARTED = "not_started"
    INITIATED = "initiated"
    FINALIZED = "finalized"


class UploadCoordinator:
    """
    Supplies the endpoints of the three-phase upload protocol.

    An upload is initiated with an empty request, which returns an upload session identifier. Content is then appended in
    chunks of at most `chunk_size` bytes, and the upload is finalized by publishing the uploaded file as a data source or
    a workbook. The coordinator does not slice payloads, track live sessions or enforce exclusive use of a session.
    """

    urls: ServerUrls

    def __init__(self, urls: ServerUrls) -> None:
        self.urls = urls

    @property
    def chunk_size(self) -> int:
        "Maximum number of bytes to append in a single request."

        return UPLOAD_CHUNK_SIZE

    def initiate(self, sign_in: SiteIdentity) -> str:
        "Returns the URL to post the request that starts an upload session."

        return self.urls.initiate_file_upload(sign_in)

    def append_chunk(self, sign_in: SiteIdentity, session: UploadSession | str | None) -> str:
        "Returns the URL to put the next chunk of content to."

        return self.urls.append_file_upload_chunk(sign_in, _session_id(session))

    def finalize_datasource_publish(self, sign_in: SiteIdentity, session: UploadSession | str | None, datasource_type: str) -> str:
        "Returns the URL that publishes the uploaded file as a data source, overwriting any existing one."

        return self.urls.finalize_datasource_publish(sign_in, _session_id(session), datasource_type)

    def finalize_workbook_publish(self, sign_in: SiteIdentity, session: UploadSession | str | None, workbook_type: str) -> str:
        "Returns the URL that publishes the uploaded file as a workbook, overwriting any existing one."

        return self.urls.finalize_workbook_publish(sign_in, _session_id(session), workbook_type)


class UploadSequence:
    """
    Tracks a single chunked upload from initiation to finalization.

    Use one sequence per publish operation. Endpoints are only handed out in protocol order: the initiate endpoint before
    a session is started, append and finalize endpoints while the session is active, and nothing once it is finalized.
    """

    coordinator: UploadCoordinator
    sign_in: SiteIdentity
    state: UploadState
    session: UploadSession | None
    chunk_count: int

    def __init__(self, coordinator: UploadCoordinator, sign_in: SiteIdentity) -> None:
        self.coordinator = coordinator
        self.sign_in = sign_in
        self.state = UploadState.NOT_STARTED
        self.session = None
        self.chunk_count = 0

    def _expect(self, state: UploadState, action: str) -> None:
        if self.state is not state:
            raise InvalidSessionState(f"cannot {action} an upload in state {self.state.value}; expected: {state.value}")

    def initiate_url(self) -> str:
        self._expect(UploadState.NOT_STARTED, "initiate")
        return self.coordinator.initiate(self.sign_in)

    def start(self, session: UploadSession | str) -> UploadSession:
        """
        Records the upload session returned by the server, moving the upload to the initiated state.

        :param session: Upload session, or its identifier.
        """

        self._expect(UploadState.NOT_STARTED, "start")
        if not isinstance(session, UploadSession):
            session = UploadSession(session)
        self.session = session
        self.state = UploadState.INITIATED
        LOGGER.debug("Upload session started: %s", session.session_id)
        return session

    def append_url(self) -> str:
        "Returns the URL to append the next chunk to. May be called any number of times while the upload is active."

        self._expect(UploadState.INITIATED, "append to")
        url = self.coordinator.append_chunk(self.sign_in, self.session)
        self.chunk_count += 1
        return url

    def finalize_datasource_url(self, datasource_type: str) -> str:
        self._expect(UploadState.INITIATED, "finalize")
        url = self.coordinator.finalize_datasource_publish(self.sign_in, self.session, datasource_type)
        self.state = UploadState.FINALIZED
        return url

    def finalize_workbook_url(self, workbook_type: str) -> str:
        self._expect(UploadState.INITIATED, "finalize")
        url = self.coordinator.finalize_workbook_publish(self.sign_in, self.session, workbook_type)
        self.state = UploadState.FINALIZED
        return url


def iter_chunks(stream: BinaryIO, chunk_size: int = UPLOAD_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Reads a binary stream in chunks suitable for appending to an upload.

    :param stream: A file opened in binary mode, or any object with a compatible `read` method.
    :param chunk_size: Maximum size of each chunk, capped at the upload chunk size.
    """

    if chunk_size < 1 or chunk_size > UPLOAD_CHUNK_SIZE:
        raise ArgumentError(f"chunk size must be between 1 and {UPLOAD_CHUNK_SIZE}; got: {chunk_size}")

    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk
