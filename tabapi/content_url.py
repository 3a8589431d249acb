"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import logging

from .context import ServerConnectionContext
from .environment import DEFAULT_PAGE_SIZE, MissingProtocol, UnrecognizedUrlShape
from .versions import ServerProtocol, ServerVersion

LOGGER = logging.getLogger(__name__)

PROTOCOL_DELIMITER = "://"
SITE_MARKER = "#"
SITE_KEYWORD = "site"

HASH_ROUTED_SERVER_VERSION = ServerVersion.SERVER_9
"Server generation whose browser URLs route content with a `#` path segment."


def protocol_from_url(url: str) -> ServerProtocol:
    """
    Determines the transport scheme of a URL.

    Only an exact case-insensitive match to `https` is classified as HTTPS; any other scheme is taken to be HTTP.

    :raises MissingProtocol: Raised if the URL has no scheme delimiter, or nothing precedes it.
    """

    index = url.find(PROTOCOL_DELIMITER)
    if index < 1:
        raise MissingProtocol("no protocol found in URL", url)

    scheme = url[:index].lower()
    if scheme == ServerProtocol.HTTPS.value:
        return ServerProtocol.HTTPS

    if scheme != ServerProtocol.HTTP.value:
        LOGGER.warning("Unrecognized scheme %r in URL, assuming HTTP: %s", scheme, url)
    return ServerProtocol.HTTP


def parse_content_url(content_url: str, page_size: int = DEFAULT_PAGE_SIZE) -> ServerConnectionContext:
    """
    Infers server host, site and server version from a URL to content as shown in the browser.

    Recognized shapes are `https://host/#/site/{site}/...` for a named site, and `https://host/#/...` for the default
    site. The server version is inferred from the shape; any other shape is rejected rather than guessed at.

    :param content_url: E.g. `https://online.tableau.com/#/site/tableausupport/workbooks`.
    :param page_size: Size of page to use when retrieving paginated result-sets.
    :returns: A server connection context.
    :raises MissingProtocol: Raised if the URL has no scheme.
    :raises UnrecognizedUrlShape: Raised if the server version cannot be inferred from the URL.
    """

    content_url = content_url.strip()
    protocol = protocol_from_url(content_url)

    # find where the server name ends
    url_after_protocol = content_url[content_url.index(PROTOCOL_DELIMITER) + len(PROTOCOL_DELIMITER) :]
    url_parts = url_after_protocol.split("/")
    server_host = url_parts[0]
    if not server_host:
        raise UnrecognizedUrlShape("no server name found in URL", content_url)

    # check for the site specifier, and infer the server version from it
    marker = url_parts[1] if len(url_parts) > 1 else None
    keyword = url_parts[2] if len(url_parts) > 2 else None
    if marker == SITE_MARKER and keyword == SITE_KEYWORD:
        site_segment = url_parts[3] if len(url_parts) > 3 else ""
        if not site_segment:
            raise UnrecognizedUrlShape("site marker not followed by site name in URL", content_url)
        server_version = HASH_ROUTED_SERVER_VERSION
    elif marker == SITE_MARKER:
        site_segment = ""  # default site
        server_version = HASH_ROUTED_SERVER_VERSION
    else:
        raise UnrecognizedUrlShape("could not infer version of Tableau Server from URL", content_url)

    LOGGER.debug("Parsed content URL %s: host %s, site %r, version %s", content_url, server_host, site_segment, server_version.value)

    return ServerConnectionContext(
        protocol=protocol,
        server_host=server_host,
        site_segment=site_segment,
        server_version=server_version,
        page_size=page_size,
    )
