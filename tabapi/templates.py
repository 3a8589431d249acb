"""
Address Tableau Server REST API endpoints and publish content in chunks.

Copyright 2022-2026, Levente Hunyadi
"""

import enum
import logging
from collections.abc import Iterator, Mapping

from .context import ServerConnectionContext
from .environment import InvalidContext
from .placeholders import EndpointTemplate, Placeholder

LOGGER = logging.getLogger(__name__)

_SITE = Placeholder.SITE_ID.token
_USER = Placeholder.USER_ID.token
_WORKBOOK = Placeholder.WORKBOOK_ID.token
_VIEW = Placeholder.VIEW_ID.token
_GROUP = Placeholder.GROUP_ID.token
_REPOSITORY = Placeholder.REPOSITORY_ID.token
_DATASOURCE = Placeholder.DATASOURCE_ID.token
_UPLOAD = Placeholder.UPLOAD_SESSION.token
_PAGING = f"pageSize={Placeholder.PAGE_SIZE.token}&pageNumber={Placeholder.PAGE_NUMBER.token}"
_PDF = f"type={Placeholder.PAGE_TYPE.token}&orientation={Placeholder.PAGE_ORIENTATION.token}"


@enum.unique
class Operation(enum.Enum):
    "Logical operations of the Tableau Server REST API that have an endpoint."

    SIGN_IN = "signIn"
    SITE_INFO = "siteInfo"
    INITIATE_UPLOAD = "initiateUpload"
    APPEND_UPLOAD_CHUNK = "appendUploadChunk"
    FINALIZE_DATASOURCE_PUBLISH = "finalizeDatasourcePublish"
    FINALIZE_WORKBOOK_PUBLISH = "finalizeWorkbookPublish"
    VIEW_THUMBNAIL = "viewThumbnail"
    VIEW_IMAGE = "viewImage"
    VIEW_DATA = "viewData"
    VIEW_PDF = "viewPdf"
    VIEWS_LIST_FOR_SITE = "viewsListForSite"
    VIEWS_LIST_FOR_WORKBOOK = "viewsListForWorkbook"
    WORKBOOK = "workbook"
    WORKBOOKS_LIST_FOR_USER = "workbooksListForUser"
    WORKBOOK_CONNECTIONS_LIST = "workbookConnectionsList"
    WORKBOOK_DOWNLOAD = "workbookDownload"
    WORKBOOK_PDF = "workbookPdf"
    DELETE_WORKBOOK_TAG = "deleteWorkbookTag"
    DATASOURCE = "datasource"
    DATASOURCES = "datasources"
    DATASOURCES_LIST = "datasourcesList"
    DATASOURCE_CONNECTIONS_LIST = "datasourceConnectionsList"
    DATASOURCE_DOWNLOAD = "datasourceDownload"
    DELETE_DATASOURCE_TAG = "deleteDatasourceTag"
    FLOWS_LIST = "flowsList"
    FLOW_RUNS_LIST = "flowRunsList"
    FLOW_DOWNLOAD = "flowDownload"
    PROJECTS_LIST = "projectsList"
    CREATE_PROJECT = "createProject"
    GROUPS_LIST = "groupsList"
    GROUPS_LIST_FOR_USER = "groupsListForUser"
    USERS_LIST = "usersList"
    USERS_LIST_IN_GROUP = "usersListInGroup"
    CREATE_USER = "createUser"
    UPDATE_USER = "updateUser"
    ADD_TO_FAVORITES = "addToFavorites"
    DELETE_WORKBOOK_FROM_FAVORITES = "deleteWorkbookFromFavorites"
    DELETE_VIEW_FROM_FAVORITES = "deleteViewFromFavorites"
    FAVORITES_FOR_USER = "favoritesForUser"
    ORDER_FAVORITES_FOR_USER = "orderFavoritesForUser"
    SCHEDULE = "schedule"
    SCHEDULES = "schedules"
    EXTRACT_REFRESH_TASKS = "extractRefreshTasks"
    GRAPHQL_METADATA = "graphqlMetadata"


# path of each endpoint relative to `/api/{apiVersion}`
_VERSIONED_PATHS: dict[Operation, str] = {
    Operation.SIGN_IN: "/auth/signin",
    Operation.SITE_INFO: f"/sites/{_SITE}",
    Operation.INITIATE_UPLOAD: f"/sites/{_SITE}/fileUploads",
    Operation.APPEND_UPLOAD_CHUNK: f"/sites/{_SITE}/fileUploads/{_UPLOAD}",
    Operation.FINALIZE_DATASOURCE_PUBLISH: (
        f"/sites/{_SITE}/datasources?uploadSessionId={_UPLOAD}&datasourceType={Placeholder.DATASOURCE_TYPE.token}&overwrite=true"
    ),
    Operation.FINALIZE_WORKBOOK_PUBLISH: (
        f"/sites/{_SITE}/workbooks?uploadSessionId={_UPLOAD}&workbookType={Placeholder.WORKBOOK_TYPE.token}&overwrite=true"
    ),
    Operation.VIEW_THUMBNAIL: f"/sites/{_SITE}/workbooks/{_WORKBOOK}/views/{_VIEW}/previewImage",
    Operation.VIEW_IMAGE: f"/sites/{_SITE}/views/{_VIEW}/image?maxAge={Placeholder.MAX_AGE.token}&{Placeholder.FILTER_VALUE.token}",
    Operation.VIEW_DATA: f"/sites/{_SITE}/views/{_VIEW}/data?{Placeholder.FILTER_VALUE.token}",
    Operation.VIEW_PDF: f"/sites/{_SITE}/views/{_VIEW}/pdf?{_PDF}",
    Operation.VIEWS_LIST_FOR_SITE: f"/sites/{_SITE}/views?{_PAGING}",
    Operation.VIEWS_LIST_FOR_WORKBOOK: f"/sites/{_SITE}/workbooks/{_WORKBOOK}/views",
    Operation.WORKBOOK: f"/sites/{_SITE}/workbooks/{_WORKBOOK}",
    Operation.WORKBOOKS_LIST_FOR_USER: f"/sites/{_SITE}/users/{_USER}/workbooks?{_PAGING}",
    Operation.WORKBOOK_CONNECTIONS_LIST: f"/sites/{_SITE}/workbooks/{_WORKBOOK}/connections",
    Operation.WORKBOOK_DOWNLOAD: f"/sites/{_SITE}/workbooks/{_REPOSITORY}/content",
    Operation.WORKBOOK_PDF: f"/sites/{_SITE}/workbooks/{_WORKBOOK}/pdf?{_PDF}",
    Operation.DELETE_WORKBOOK_TAG: f"/sites/{_SITE}/workbooks/{_WORKBOOK}/tags/{Placeholder.TAG_TEXT.token}",
    Operation.DATASOURCE: f"/sites/{_SITE}/datasources/{_DATASOURCE}",
    Operation.DATASOURCES: f"/sites/{_SITE}/datasources",
    Operation.DATASOURCES_LIST: f"/sites/{_SITE}/datasources?{_PAGING}",
    Operation.DATASOURCE_CONNECTIONS_LIST: f"/sites/{_SITE}/datasources/{_REPOSITORY}/connections",
    Operation.DATASOURCE_DOWNLOAD: f"/sites/{_SITE}/datasources/{_REPOSITORY}/content",
    Operation.DELETE_DATASOURCE_TAG: f"/sites/{_SITE}/datasources/{_DATASOURCE}/tags/{Placeholder.TAG_TEXT.token}",
    Operation.FLOWS_LIST: f"/sites/{_SITE}/flows?{_PAGING}",
    Operation.FLOW_RUNS_LIST: f"/sites/{_SITE}/flows/runs?filter=startedAt:gt:{Placeholder.STARTED_AT.token}",
    Operation.FLOW_DOWNLOAD: f"/sites/{_SITE}/flows/{_REPOSITORY}/content",
    Operation.PROJECTS_LIST: f"/sites/{_SITE}/projects?{_PAGING}",
    Operation.CREATE_PROJECT: f"/sites/{_SITE}/projects",
    Operation.GROUPS_LIST: f"/sites/{_SITE}/groups?{_PAGING}",
    Operation.GROUPS_LIST_FOR_USER: f"/sites/{_SITE}/users/{_USER}/groups?{_PAGING}",
    Operation.USERS_LIST: f"/sites/{_SITE}/users?{_PAGING}",
    Operation.USERS_LIST_IN_GROUP: f"/sites/{_SITE}/groups/{_GROUP}/users?{_PAGING}",
    Operation.CREATE_USER: f"/sites/{_SITE}/users",
    Operation.UPDATE_USER: f"/sites/{_SITE}/users/{_USER}",
    Operation.ADD_TO_FAVORITES: f"/sites/{_SITE}/favorites/{_USER}",
    Operation.DELETE_WORKBOOK_FROM_FAVORITES: f"/sites/{_SITE}/favorites/{_USER}/workbooks/{_WORKBOOK}",
    Operation.DELETE_VIEW_FROM_FAVORITES: f"/sites/{_SITE}/favorites/{_USER}/views/{_VIEW}",
    Operation.FAVORITES_FOR_USER: f"/sites/{_SITE}/favorites/{_USER}",
    Operation.ORDER_FAVORITES_FOR_USER: f"/sites/{_SITE}/orderFavorites/{_USER}",
    Operation.SCHEDULE: f"/schedules/{Placeholder.SCHEDULE_ID.token}",
    Operation.SCHEDULES: "/schedules",
    Operation.EXTRACT_REFRESH_TASKS: f"/sites/{_SITE}/tasks/extractRefreshes",
}

# the metadata API is not versioned with the REST API
_UNVERSIONED_PATHS: dict[Operation, str] = {
    Operation.GRAPHQL_METADATA: "/api/metadata/graphql",
}


class TemplateRegistry(Mapping[Operation, EndpointTemplate]):
    """
    Endpoint templates for every operation, built once for a server connection context.

    Templates combine the scheme, host and API version of the context with the path of each operation; placeholders are
    left unresolved. The registry is read-only after construction and may be shared across threads.
    """

    context: ServerConnectionContext
    _templates: dict[Operation, EndpointTemplate]

    def __init__(self, context: ServerConnectionContext) -> None:
        if not isinstance(context, ServerConnectionContext):
            raise InvalidContext(f"expected: server connection context; got: {context!r}")

        self.context = context

        api_url = f"{context.server_url}/api/{context.api_version}"
        templates = {operation: EndpointTemplate(f"{api_url}{path}") for operation, path in _VERSIONED_PATHS.items()}
        templates.update({operation: EndpointTemplate(f"{context.server_url}{path}") for operation, path in _UNVERSIONED_PATHS.items()})
        self._templates = templates

        LOGGER.debug("Built %d endpoint templates for %s (API version %s)", len(templates), context.server_url, context.api_version)

    def get_template(self, operation: Operation) -> EndpointTemplate:
        "Returns the cached template for an operation."

        return self._templates[operation]

    def __getitem__(self, operation: Operation) -> EndpointTemplate:
        return self._templates[operation]

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)
