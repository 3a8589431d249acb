"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import datetime
import logging
from urllib.parse import quote

from .content_url import parse_content_url
from .context import UPLOAD_CHUNK_SIZE, ServerConnectionContext
from .environment import DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE, ArgumentError, InvalidSessionState
from .placeholders import Bindings, Placeholder, PlaceholderValue, resolve, view_filter
from .templates import Operation, TemplateRegistry
from .types import PageOrientation, PageType, SiteIdentity

LOGGER = logging.getLogger(__name__)


def _require_id(name: str, value: str) -> str:
    if not isinstance(value, str) or not value:
        raise ArgumentError(f"{name} not specified")
    return value


def _require_session_id(upload_session_id: str | None) -> str:
    if not isinstance(upload_session_id, str) or not upload_session_id.strip():
        raise InvalidSessionState("upload session not initiated: empty upload session identifier")
    return upload_session_id


def _require_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ArgumentError(f"{name} must be a positive integer; got: {value!r}")
    return value


class ServerUrls:
    """
    Creates the set of URLs for a Tableau Server site.

    Each method resolves the endpoint of a single operation. Methods that address a site take sign-in information as
    their first argument, which supplies the site identifier.
    """

    context: ServerConnectionContext
    templates: TemplateRegistry

    def __init__(self, context: ServerConnectionContext) -> None:
        self.context = context
        self.templates = TemplateRegistry(context)

    @classmethod
    def from_content_url(cls, content_url: str, page_size: int = DEFAULT_PAGE_SIZE) -> "ServerUrls":
        """
        Creates the set of URLs for the server and site of a content URL.

        :param content_url: URL to content as shown in the browser, e.g. `https://tableau.example.com/#/site/finance/workbooks`.
        :param page_size: Size of page to use when retrieving paginated result-sets.
        """

        return cls(parse_content_url(content_url, page_size))

    @property
    def server_url(self) -> str:
        "Server URL with scheme."

        return self.context.server_url

    @property
    def server_name(self) -> str:
        return self.context.server_host

    @property
    def site_segment(self) -> str:
        "Part of the content URL that designates the site, or empty for the default site."

        return self.context.site_segment

    @property
    def page_size(self) -> int:
        return self.context.page_size

    @property
    def upload_chunk_size(self) -> int:
        return UPLOAD_CHUNK_SIZE

    def url(self, operation: Operation, bindings: Bindings = ()) -> str:
        """
        Resolves the endpoint of an operation with explicit placeholder bindings.

        :param operation: The operation whose endpoint to resolve.
        :param bindings: Placeholder values.
        :returns: A fully-qualified URL.
        """

        url = resolve(self.templates[operation], bindings)
        LOGGER.debug("Resolved endpoint %s: %s", operation.value, url)
        return url

    def _site_url(self, operation: Operation, sign_in: SiteIdentity, *bindings: tuple[Placeholder, PlaceholderValue]) -> str:
        site_id = _require_id("site ID", sign_in.site_id)
        return self.url(operation, [(Placeholder.SITE_ID, site_id), *bindings])

    def _paged_url(
        self, operation: Operation, sign_in: SiteIdentity, page_size: int | None, page_number: int, *bindings: tuple[Placeholder, PlaceholderValue]
    ) -> str:
        if page_size is None:
            page_size = self.context.page_size
        return self._site_url(
            operation,
            sign_in,
            *bindings,
            (Placeholder.PAGE_SIZE, _require_positive("page size", page_size)),
            (Placeholder.PAGE_NUMBER, _require_positive("page number", page_number)),
        )

    def sign_in(self) -> str:
        "URL for API sign-in."

        return self.url(Operation.SIGN_IN)

    def site_info(self, sign_in: SiteIdentity) -> str:
        "URL to get site information."

        return self._site_url(Operation.SITE_INFO, sign_in)

    def initiate_file_upload(self, sign_in: SiteIdentity) -> str:
        "URL to start an upload."

        return self._site_url(Operation.INITIATE_UPLOAD, sign_in)

    def append_file_upload_chunk(self, sign_in: SiteIdentity, upload_session_id: str) -> str:
        """
        URL to append a chunk of data to an upload.

        :param sign_in: Sign-in information.
        :param upload_session_id: Identifier for the upload session, as returned when the upload was started.
        """

        return self._site_url(Operation.APPEND_UPLOAD_CHUNK, sign_in, (Placeholder.UPLOAD_SESSION, _require_session_id(upload_session_id)))

    def finalize_datasource_publish(self, sign_in: SiteIdentity, upload_session_id: str, datasource_type: str) -> str:
        """
        URL to finish publishing a data source. Publishing overwrites an existing data source with the same name.

        :param sign_in: Sign-in information.
        :param upload_session_id: Identifier for the upload session.
        :param datasource_type: Data source type, one of `tds`, `tdsx`, `tde` or `hyper`. Passed to the server verbatim.
        """

        return self._site_url(
            Operation.FINALIZE_DATASOURCE_PUBLISH,
            sign_in,
            (Placeholder.UPLOAD_SESSION, _require_session_id(upload_session_id)),
            (Placeholder.DATASOURCE_TYPE, datasource_type),
        )

    def finalize_workbook_publish(self, sign_in: SiteIdentity, upload_session_id: str, workbook_type: str) -> str:
        """
        URL to finish publishing a workbook. Publishing overwrites an existing workbook with the same name.

        :param sign_in: Sign-in information.
        :param upload_session_id: Identifier for the upload session.
        :param workbook_type: Workbook type, one of `twb` or `twbx`. Passed to the server verbatim.
        """

        return self._site_url(
            Operation.FINALIZE_WORKBOOK_PUBLISH,
            sign_in,
            (Placeholder.UPLOAD_SESSION, _require_session_id(upload_session_id)),
            (Placeholder.WORKBOOK_TYPE, workbook_type),
        )

    def view_thumbnail(self, sign_in: SiteIdentity, workbook_id: str, view_id: str) -> str:
        "URL for the preview image of a view."

        return self._site_url(
            Operation.VIEW_THUMBNAIL,
            sign_in,
            (Placeholder.WORKBOOK_ID, _require_id("workbook ID", workbook_id)),
            (Placeholder.VIEW_ID, _require_id("view ID", view_id)),
        )

    def view_image(self, sign_in: SiteIdentity, view_id: str, filter_name: str, filter_value: str, max_age: int) -> str:
        """
        URL for the image of a view, filtered on the value of a field.

        :param sign_in: Sign-in information.
        :param view_id: View ID.
        :param filter_name: Name of the field to filter on.
        :param filter_value: Value of the field to match.
        :param max_age: Maximum number of minutes the server may serve a cached image.
        """

        return self._site_url(
            Operation.VIEW_IMAGE,
            sign_in,
            (Placeholder.VIEW_ID, _require_id("view ID", view_id)),
            (Placeholder.MAX_AGE, _require_positive("maximum age", max_age)),
            (Placeholder.FILTER_VALUE, view_filter(filter_name, filter_value)),
        )

    def view_data(self, sign_in: SiteIdentity, view_id: str, filter_name: str, filter_value: str) -> str:
        """
        URL for the data of a view, filtered on the value of a field.

        :param sign_in: Sign-in information.
        :param view_id: View ID.
        :param filter_name: Name of the field to filter on.
        :param filter_value: Value of the field to match.
        """

        return self._site_url(
            Operation.VIEW_DATA,
            sign_in,
            (Placeholder.VIEW_ID, _require_id("view ID", view_id)),
            (Placeholder.FILTER_VALUE, view_filter(filter_name, filter_value)),
        )

    def view_pdf(self, sign_in: SiteIdentity, view_id: str, page_type: PageType, page_orientation: PageOrientation) -> str:
        "URL to download a view as PDF."

        return self._site_url(
            Operation.VIEW_PDF,
            sign_in,
            (Placeholder.VIEW_ID, _require_id("view ID", view_id)),
            (Placeholder.PAGE_TYPE, PageType(page_type)),
            (Placeholder.PAGE_ORIENTATION, PageOrientation(page_orientation)),
        )

    def views_list_for_site(self, sign_in: SiteIdentity, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        "URL for the list of views in a site."

        return self._paged_url(Operation.VIEWS_LIST_FOR_SITE, sign_in, page_size, page_number)

    def views_list_for_workbook(self, sign_in: SiteIdentity, workbook_id: str) -> str:
        "URL for the list of views in a workbook."

        return self._site_url(Operation.VIEWS_LIST_FOR_WORKBOOK, sign_in, (Placeholder.WORKBOOK_ID, _require_id("workbook ID", workbook_id)))

    def workbook(self, sign_in: SiteIdentity, workbook_id: str) -> str:
        return self._site_url(Operation.WORKBOOK, sign_in, (Placeholder.WORKBOOK_ID, _require_id("workbook ID", workbook_id)))

    def workbooks_list_for_user(self, sign_in: SiteIdentity, user_id: str, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        """
        URL for the list of workbooks a user can access.

        :param sign_in: Sign-in information.
        :param user_id: User whose workbooks to retrieve.
        :param page_size: Size of result set to retrieve, defaults to the page size of the connection context.
        :param page_number: Which page of the results to return.
        """

        return self._paged_url(Operation.WORKBOOKS_LIST_FOR_USER, sign_in, page_size, page_number, (Placeholder.USER_ID, _require_id("user ID", user_id)))

    def workbook_connections_list(self, sign_in: SiteIdentity, workbook_id: str) -> str:
        "URL for the list of data connections of a workbook."

        return self._site_url(Operation.WORKBOOK_CONNECTIONS_LIST, sign_in, (Placeholder.WORKBOOK_ID, _require_id("workbook ID", workbook_id)))

    def workbook_download(self, sign_in: SiteIdentity, workbook_id: str) -> str:
        "URL to download workbook content."

        return self._site_url(Operation.WORKBOOK_DOWNLOAD, sign_in, (Placeholder.REPOSITORY_ID, _require_id("workbook ID", workbook_id)))

    def workbook_pdf(self, sign_in: SiteIdentity, workbook_id: str, page_type: PageType, page_orientation: PageOrientation) -> str:
        "URL to download a workbook as PDF."

        return self._site_url(
            Operation.WORKBOOK_PDF,
            sign_in,
            (Placeholder.WORKBOOK_ID, _require_id("workbook ID", workbook_id)),
            (Placeholder.PAGE_TYPE, PageType(page_type)),
            (Placeholder.PAGE_ORIENTATION, PageOrientation(page_orientation)),
        )

    def delete_workbook_tag(self, sign_in: SiteIdentity, workbook_id: str, tag_text: str) -> str:
        "URL for deleting a tag from a workbook."

        return self._site_url(
            Operation.DELETE_WORKBOOK_TAG,
            sign_in,
            (Placeholder.WORKBOOK_ID, _require_id("workbook ID", workbook_id)),
            (Placeholder.TAG_TEXT, quote(_require_id("tag", tag_text), safe="")),
        )

    def datasource(self, sign_in: SiteIdentity, datasource_id: str) -> str:
        "URL to query a single data source."

        return self._site_url(Operation.DATASOURCE, sign_in, (Placeholder.DATASOURCE_ID, _require_id("data source ID", datasource_id)))

    def datasources(self, sign_in: SiteIdentity) -> str:
        "URL to query data sources without pagination parameters."

        return self._site_url(Operation.DATASOURCES, sign_in)

    def datasources_list(self, sign_in: SiteIdentity, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        "URL for a page of the list of data sources in a site."

        return self._paged_url(Operation.DATASOURCES_LIST, sign_in, page_size, page_number)

    def datasource_connections_list(self, sign_in: SiteIdentity, datasource_id: str) -> str:
        "URL for the list of data connections of a data source."

        return self._site_url(
            Operation.DATASOURCE_CONNECTIONS_LIST, sign_in, (Placeholder.REPOSITORY_ID, _require_id("data source ID", datasource_id))
        )

    def datasource_download(self, sign_in: SiteIdentity, datasource_id: str) -> str:
        "URL to download data source content."

        return self._site_url(Operation.DATASOURCE_DOWNLOAD, sign_in, (Placeholder.REPOSITORY_ID, _require_id("data source ID", datasource_id)))

    def delete_datasource_tag(self, sign_in: SiteIdentity, datasource_id: str, tag_text: str) -> str:
        "URL for deleting a tag from a data source."

        return self._site_url(
            Operation.DELETE_DATASOURCE_TAG,
            sign_in,
            (Placeholder.DATASOURCE_ID, _require_id("data source ID", datasource_id)),
            (Placeholder.TAG_TEXT, quote(_require_id("tag", tag_text), safe="")),
        )

    def flows_list(self, sign_in: SiteIdentity, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        return self._paged_url(Operation.FLOWS_LIST, sign_in, page_size, page_number)

    def flow_runs_list(self, sign_in: SiteIdentity, started_after: datetime.datetime) -> str:
        """
        URL for the list of flow runs that started after a point in time.

        :param sign_in: Sign-in information.
        :param started_after: Lower bound (exclusive) for the start time of flow runs. Naive timestamps are taken to be in UTC.
        """

        if not isinstance(started_after, datetime.datetime):
            raise ArgumentError(f"expected: timestamp; got: {started_after!r}")
        return self._site_url(Operation.FLOW_RUNS_LIST, sign_in, (Placeholder.STARTED_AT, started_after))

    def flow_download(self, sign_in: SiteIdentity, flow_id: str) -> str:
        "URL to download flow content."

        return self._site_url(Operation.FLOW_DOWNLOAD, sign_in, (Placeholder.REPOSITORY_ID, _require_id("flow ID", flow_id)))

    def projects_list(self, sign_in: SiteIdentity, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        return self._paged_url(Operation.PROJECTS_LIST, sign_in, page_size, page_number)

    def create_project(self, sign_in: SiteIdentity) -> str:
        return self._site_url(Operation.CREATE_PROJECT, sign_in)

    def groups_list(self, sign_in: SiteIdentity, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        return self._paged_url(Operation.GROUPS_LIST, sign_in, page_size, page_number)

    def groups_list_for_user(self, sign_in: SiteIdentity, user_id: str, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        "URL for the list of groups a user belongs to."

        return self._paged_url(Operation.GROUPS_LIST_FOR_USER, sign_in, page_size, page_number, (Placeholder.USER_ID, _require_id("user ID", user_id)))

    def users_list(self, sign_in: SiteIdentity, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        return self._paged_url(Operation.USERS_LIST, sign_in, page_size, page_number)

    def users_list_in_group(self, sign_in: SiteIdentity, group_id: str, page_size: int | None = None, page_number: int = DEFAULT_PAGE_NUMBER) -> str:
        "URL for the list of users in a group."

        return self._paged_url(Operation.USERS_LIST_IN_GROUP, sign_in, page_size, page_number, (Placeholder.GROUP_ID, _require_id("group ID", group_id)))

    def create_user(self, sign_in: SiteIdentity) -> str:
        return self._site_url(Operation.CREATE_USER, sign_in)

    def update_user(self, sign_in: SiteIdentity, user_id: str) -> str:
        return self._site_url(Operation.UPDATE_USER, sign_in, (Placeholder.USER_ID, _require_id("user ID", user_id)))

    def add_to_favorites(self, sign_in: SiteIdentity, user_id: str) -> str:
        "URL to add content to the favorites of a user."

        return self._site_url(Operation.ADD_TO_FAVORITES, sign_in, (Placeholder.USER_ID, _require_id("user ID", user_id)))

    def delete_workbook_from_favorites(self, sign_in: SiteIdentity, user_id: str, workbook_id: str) -> str:
        """
        URL to delete a workbook from the favorites of a user.

        If the workbook is not a favorite of the user, the call has no effect.
        """

        return self._site_url(
            Operation.DELETE_WORKBOOK_FROM_FAVORITES,
            sign_in,
            (Placeholder.USER_ID, _require_id("user ID", user_id)),
            (Placeholder.WORKBOOK_ID, _require_id("workbook ID", workbook_id)),
        )

    def delete_view_from_favorites(self, sign_in: SiteIdentity, user_id: str, view_id: str) -> str:
        """
        URL to delete a view from the favorites of a user.

        If the view is not a favorite of the user, the call has no effect.
        """

        return self._site_url(
            Operation.DELETE_VIEW_FROM_FAVORITES,
            sign_in,
            (Placeholder.USER_ID, _require_id("user ID", user_id)),
            (Placeholder.VIEW_ID, _require_id("view ID", view_id)),
        )

    def favorites_for_user(self, sign_in: SiteIdentity, user_id: str) -> str:
        "URL for the favorite projects, data sources, views, workbooks and flows of a user."

        return self._site_url(Operation.FAVORITES_FOR_USER, sign_in, (Placeholder.USER_ID, _require_id("user ID", user_id)))

    def order_favorites_for_user(self, sign_in: SiteIdentity, user_id: str) -> str:
        "URL to change the sort order of the favorites of a user."

        return self._site_url(Operation.ORDER_FAVORITES_FOR_USER, sign_in, (Placeholder.USER_ID, _require_id("user ID", user_id)))

    def schedule(self, schedule_id: str) -> str:
        return self.url(Operation.SCHEDULE, [(Placeholder.SCHEDULE_ID, _require_id("schedule ID", schedule_id))])

    def schedules(self) -> str:
        return self.url(Operation.SCHEDULES)

    def extract_refresh_tasks(self, sign_in: SiteIdentity) -> str:
        "URL for the list of extract refresh tasks in a site."

        return self._site_url(Operation.EXTRACT_REFRESH_TASKS, sign_in)

    def graphql_metadata(self) -> str:
        "URL of the GraphQL endpoint of the metadata API."

        return self.url(Operation.GRAPHQL_METADATA)
