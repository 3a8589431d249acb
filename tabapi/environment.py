"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import os


class ArgumentError(ValueError):
    "Raised when wrong arguments are passed to a function call."


class InvalidContext(ArgumentError):
    "Raised when a server connection context cannot be constructed from the input given."


class UnknownServerVersion(InvalidContext):
    "Raised when a server version tag is not one of the supported versions."


class ContentUrlError(ArgumentError):
    """
    Raised when a content URL cannot be parsed into a server connection context.

    :param url: The offending content URL.
    """

    url: str

    def __init__(self, message: str, url: str) -> None:
        super().__init__(f"{message}: {url}")
        self.url = url


class MissingProtocol(ContentUrlError):
    "Raised when a content URL has no scheme, or no host name before the scheme delimiter."


class UnrecognizedUrlShape(ContentUrlError):
    "Raised when the server version cannot be inferred from the path of a content URL."


class TemplateIncompleteError(RuntimeError):
    """
    Raised when an endpoint URL would be returned with an unresolved placeholder.

    :param url: The partially resolved URL.
    :param missing: Names of placeholders that have not been bound.
    """

    url: str
    missing: tuple[str, ...]

    def __init__(self, url: str, missing: tuple[str, ...] = ()) -> None:
        if missing:
            message = f"template replacement was incomplete, missing {', '.join(missing)}: {url}"
        else:
            message = f"template replacement was incomplete: {url}"
        super().__init__(message)
        self.url = url
        self.missing = missing


class InvalidSessionState(RuntimeError):
    "Raised when upload phases are invoked out of order, or with an empty upload session identifier."


class TableauError(RuntimeError):
    "Raised when a Tableau Server response cannot be interpreted."


DEFAULT_PAGE_SIZE = 1000
"Number of items requested in a single page of a paginated result-set."

DEFAULT_PAGE_NUMBER = 1
"Page number requested when the caller does not ask for a specific page."


def _validate_page_size(page_size: int) -> int:
    if page_size < 1:
        raise ArgumentError(f"page size must be a positive integer; got: {page_size}")
    return page_size


class ConnectionProperties:
    """
    Properties related to connecting to Tableau Server.

    :param content_url: URL to server content as shown in the browser, e.g. `https://tableau.example.com/#/site/finance/workbooks`.
    :param site_id: Site identifier (LUID) obtained when signing in.
    :param auth_token: Credentials token obtained when signing in.
    :param user_id: User identifier (LUID) of the signed-in user.
    :param page_size: Number of items to retrieve in a single page of a result-set.
    :param server_version: Server version tag, overrides the version inferred from the content URL.
    :param headers: Additional HTTP headers to pass to Tableau REST API calls.
    """

    content_url: str
    site_id: str | None
    auth_token: str | None
    user_id: str | None
    page_size: int
    server_version: str | None
    headers: dict[str, str] | None

    def __init__(
        self,
        *,
        content_url: str | None = None,
        site_id: str | None = None,
        auth_token: str | None = None,
        user_id: str | None = None,
        page_size: int | None = None,
        server_version: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        opt_content_url = content_url or os.getenv("TABLEAU_CONTENT_URL")
        opt_site_id = site_id or os.getenv("TABLEAU_SITE_ID")
        opt_auth_token = auth_token or os.getenv("TABLEAU_AUTH_TOKEN")
        opt_user_id = user_id or os.getenv("TABLEAU_USER_ID")
        opt_server_version = server_version or os.getenv("TABLEAU_SERVER_VERSION")

        if page_size is not None:
            opt_page_size = page_size
        else:
            env_page_size = os.getenv("TABLEAU_PAGE_SIZE")
            if env_page_size:
                try:
                    opt_page_size = int(env_page_size)
                except ValueError:
                    raise ArgumentError(f"expected: integer page size; got: {env_page_size}") from None
            else:
                opt_page_size = DEFAULT_PAGE_SIZE

        if not opt_content_url:
            raise ArgumentError("Tableau content URL not specified")

        self.content_url = opt_content_url.strip()
        self.site_id = opt_site_id
        self.auth_token = opt_auth_token
        self.user_id = opt_user_id
        self.page_size = _validate_page_size(opt_page_size)
        self.server_version = opt_server_version
        self.headers = headers
