"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import enum

from .environment import UnknownServerVersion


@enum.unique
class ServerProtocol(enum.Enum):
    "Transport scheme used to reach Tableau Server."

    HTTP = "http"
    HTTPS = "https"


@enum.unique
class ServerVersion(enum.Enum):
    """
    Tableau Server release an HTTP request targets.

    REST API paths embed an API version number (e.g. `/api/2.3/...`), which depends on the server release. The API
    version is determined once, when a connection context is created, and is shared by all endpoints of that context.
    """

    SERVER_9 = "server9"
    SERVER_10 = "server10"
    SERVER_10_5 = "server10.5"
    SERVER_2018_1 = "server2018.1"
    SERVER_2019_1 = "server2019.1"
    SERVER_2020_1 = "server2020.1"
    SERVER_2021_1 = "server2021.1"


_API_VERSIONS: dict[ServerVersion, str] = {
    ServerVersion.SERVER_9: "2.0",
    ServerVersion.SERVER_10: "2.3",
    ServerVersion.SERVER_10_5: "2.8",
    ServerVersion.SERVER_2018_1: "3.0",
    ServerVersion.SERVER_2019_1: "3.3",
    ServerVersion.SERVER_2020_1: "3.7",
    ServerVersion.SERVER_2021_1: "3.11",
}


def server_version_from_tag(tag: ServerVersion | str) -> ServerVersion:
    """
    Maps an externally supplied server version tag to a supported server version.

    :param tag: A server version, or its string tag (e.g. `server10`), matched case-insensitively.
    :returns: The matching server version.
    """

    if isinstance(tag, ServerVersion):
        return tag

    normalized = tag.strip().lower()
    for version in ServerVersion:
        if version.value == normalized:
            return version

    raise UnknownServerVersion(f"unsupported server version: {tag!r}")


def api_version_for(tag: ServerVersion | str) -> str:
    """
    Returns the REST API version string that corresponds to a server version.

    :param tag: A server version, or its string tag.
    :returns: A dotted API version number such as `2.3`.
    """

    return _API_VERSIONS[server_version_from_tag(tag)]
