"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

from dataclasses import dataclass
from typing import ClassVar

from .environment import DEFAULT_PAGE_SIZE, InvalidContext
from .versions import ServerProtocol, ServerVersion, api_version_for, server_version_from_tag

UPLOAD_CHUNK_SIZE = 8_000_000
"Size of chunks uploaded to Tableau Server (8 MB)."


def _validate_server_host(server_host: str) -> str:
    if not server_host:
        raise InvalidContext("Tableau Server host name not specified")
    if "://" in server_host or "/" in server_host:
        raise InvalidContext(f"Tableau Server host looks like a URL; only host name required: {server_host}")
    if server_host != server_host.strip():
        raise InvalidContext(f"Tableau Server host has leading or trailing whitespace: {server_host!r}")
    return server_host


@dataclass(frozen=True)
class ServerConnectionContext:
    """
    Data associated with a connection to a Tableau Server site, fixed for the lifetime of a signed-in client.

    :param protocol: Transport scheme.
    :param server_host: Server IP address, host name or fully-qualified domain name, without scheme.
    :param site_segment: Part of the content URL that designates the site. Empty for the default site.
    :param server_version: Server release, determines the REST API version.
    :param page_size: Number of items to request in a single page of a paginated result-set.
    """

    UPLOAD_CHUNK_SIZE: ClassVar[int] = UPLOAD_CHUNK_SIZE

    protocol: ServerProtocol
    server_host: str
    site_segment: str = ""
    server_version: ServerVersion = ServerVersion.SERVER_9
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if not isinstance(self.protocol, ServerProtocol):
            raise InvalidContext(f"expected: server protocol; got: {self.protocol!r}")
        _validate_server_host(self.server_host)
        if "/" in self.site_segment:
            raise InvalidContext(f"site segment must not contain '/': {self.site_segment}")
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int) or self.page_size < 1:
            raise InvalidContext(f"page size must be a positive integer; got: {self.page_size!r}")
        if not isinstance(self.server_version, (ServerVersion, str)):
            raise InvalidContext(f"expected: server version; got: {self.server_version!r}")

        # accept external string tags but always store the enumeration member
        object.__setattr__(self, "server_version", server_version_from_tag(self.server_version))

    @property
    def api_version(self) -> str:
        "REST API version embedded in every endpoint path."

        return api_version_for(self.server_version)

    @property
    def server_url(self) -> str:
        "Server URL with scheme, e.g. `https://tableau.example.com`."

        return f"{self.protocol.value}://{self.server_host}"
