"""
Address Tableau Server REST API endpoints and publish content in chunks.

Resolves the endpoint URL of a REST API operation for the server and site of a content URL, or publishes a workbook
or data source file with a chunked upload.

Copyright 2022-2026, Levente Hunyadi
"""

import argparse
import logging
import os.path
import sys
import typing
from collections.abc import Iterable, Sequence
from io import StringIO
from pathlib import Path
from typing import Any

from . import __version__
from .environment import ArgumentError, ConnectionProperties, InvalidSessionState, TableauError, TemplateIncompleteError
from .placeholders import Placeholder, view_filter
from .templates import Operation


class Arguments(argparse.Namespace):
    content_url: str | None
    operation: str | None
    params: dict[str, str]
    site_id: str | None
    user_id: str | None
    auth_token: str | None
    page_size: int | None
    server_version: str | None
    publish: Path | None
    project_id: str | None
    name: str | None
    headers: dict[str, str]
    loglevel: str


class KwargsAppendAction(argparse.Action):
    """Append key-value pairs to a dictionary."""

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: None | str | Sequence[Any],
        option_string: str | None = None,
    ) -> None:
        try:
            d = dict(map(lambda x: x.split("=", 1), typing.cast(Sequence[str], values)))
        except ValueError:
            raise argparse.ArgumentError(
                self,
                f'Could not parse argument "{values}". It should follow the format: k1=v1 k2=v2 ...',
            ) from None
        setattr(namespace, self.dest, d)


class PositionalOnlyHelpFormatter(argparse.HelpFormatter):
    def _format_usage(
        self,
        usage: str | None,
        actions: Iterable[argparse.Action],
        groups: Iterable[argparse._MutuallyExclusiveGroup],  # pyright: ignore[reportPrivateUsage]
        prefix: str | None,
    ) -> str:
        # filter only positional arguments
        positional_actions = [a for a in actions if not a.option_strings]

        # format usage string with only positional arguments
        usage_str = super()._format_usage(usage, positional_actions, groups, prefix).rstrip()

        # insert [OPTIONS] as a placeholder for all options (detailed below)
        usage_str += " [OPTIONS]\n"

        return usage_str


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(formatter_class=PositionalOnlyHelpFormatter)
    parser.prog = os.path.basename(os.path.dirname(__file__))
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "content_url",
        nargs="?",
        help="URL to content on Tableau Server as shown in the browser, e.g. 'https://tableau.example.com/#/site/finance/workbooks'.",
    )
    parser.add_argument(
        "operation",
        nargs="?",
        choices=[operation.value for operation in Operation],
        metavar="OPERATION",
        help="REST API operation whose endpoint URL to print (e.g. 'workbooksListForUser').",
    )
    parser.add_argument(
        "--params",
        nargs="+",
        required=False,
        action=KwargsAppendAction,
        default={},
        metavar="KEY=VALUE",
        help="Placeholder values to substitute into the endpoint URL (e.g. 'userId=...'). Site ID is taken from --site-id.",
    )
    parser.add_argument("--site-id", dest="site_id", help="Site identifier (LUID) obtained when signing in.")
    parser.add_argument("--user-id", dest="user_id", help="Identifier (LUID) of the signed-in user.")
    parser.add_argument("--auth-token", dest="auth_token", help="Credentials token obtained when signing in.")
    parser.add_argument("--page-size", dest="page_size", type=int, help="Size of page for paginated result-sets (default: 1000).")
    parser.add_argument("--server-version", dest="server_version", help="Tableau Server version tag (e.g. 'server10'), overrides inferred version.")
    parser.add_argument("--publish", type=Path, help="Workbook or data source file to publish with a chunked upload.")
    parser.add_argument("--project-id", dest="project_id", help="Project to publish content into.")
    parser.add_argument("--name", help="Name of published content (default: file name without extension).")
    parser.add_argument(
        "--headers",
        nargs="+",
        required=False,
        action=KwargsAppendAction,
        default={},
        metavar="KEY=VALUE",
        help="Apply custom headers to all Tableau REST API requests.",
    )
    parser.add_argument(
        "-l",
        "--loglevel",
        choices=[
            logging.getLevelName(level).lower()
            for level in (
                logging.DEBUG,
                logging.INFO,
                logging.WARN,
                logging.ERROR,
                logging.CRITICAL,
            )
        ],
        default=logging.getLevelName(logging.INFO),
        help="Use this option to set the log verbosity.",
    )
    return parser


def get_help() -> str:
    parser = get_parser()
    with StringIO() as buf:
        parser.print_help(file=buf)
        return buf.getvalue()


def operation_bindings(properties: ConnectionProperties, params: dict[str, str]) -> list[tuple[Placeholder, str]]:
    """
    Collects placeholder values from command-line parameters.

    Parameters `fieldName` and `fieldValue` are composed into the `filterValue` placeholder.
    """

    known = {p.value: p for p in Placeholder}
    values = dict(params)
    if properties.site_id and Placeholder.SITE_ID.value not in values:
        values[Placeholder.SITE_ID.value] = properties.site_id
    if properties.user_id and Placeholder.USER_ID.value not in values:
        values[Placeholder.USER_ID.value] = properties.user_id
    if Placeholder.PAGE_SIZE.value not in values:
        values[Placeholder.PAGE_SIZE.value] = str(properties.page_size)
    if Placeholder.PAGE_NUMBER.value not in values:
        values[Placeholder.PAGE_NUMBER.value] = "1"

    field_name = values.pop(Placeholder.FIELD_NAME.value, None)
    field_value = values.pop(Placeholder.FIELD_VALUE.value, None)
    if field_name is not None:
        values[Placeholder.FILTER_VALUE.value] = view_filter(field_name, field_value or "")

    bindings: list[tuple[Placeholder, str]] = []
    for key, value in values.items():
        placeholder = known.get(key)
        if placeholder is None:
            raise ArgumentError(f"unknown parameter: {key}; expected one of: {', '.join(known)}")
        bindings.append((placeholder, value))
    return bindings


def main() -> None:
    parser = get_parser()
    args = Arguments()
    parser.parse_args(namespace=args)

    logging.basicConfig(
        level=getattr(logging, args.loglevel.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
    )

    try:
        properties = ConnectionProperties(
            content_url=args.content_url,
            site_id=args.site_id,
            auth_token=args.auth_token,
            user_id=args.user_id,
            page_size=args.page_size,
            server_version=args.server_version,
            headers=args.headers,
        )
    except ArgumentError as e:
        parser.error(str(e))

    from requests import HTTPError

    from .publisher import TableauAPI

    api = TableauAPI(properties)

    if args.publish is None:
        if args.operation is None:
            parser.error("an operation or --publish is required")
        try:
            urls = api.server_urls()
            print(urls.url(Operation(args.operation), operation_bindings(properties, args.params)))
        except (ArgumentError, TemplateIncompleteError) as e:
            logging.error(e)
            sys.exit(1)
        return

    if not args.project_id:
        parser.error("--project-id is required with --publish")

    try:
        with api as publisher:
            content = publisher.publish(args.publish, project_id=args.project_id, name=args.name)
            print(content)
    except (ArgumentError, InvalidSessionState, TableauError) as e:
        logging.error(e)
        sys.exit(1)
    except HTTPError as err:
        logging.error(err)

        # print details for a response with XML body
        if err.response is not None and err.response.text:
            logging.error(err.response.text)

        sys.exit(1)


if __name__ == "__main__":
    main()
