"""atlassian-cli command line interface.

Services and commands:
  jira        issue, search, projects, project-issues, boards, sprints,
              sprint-issues, transitions, comments, user
  confluence  page, page-by-title, search, text-search, spaces, space,
              children, comments, labels
  config      set, get, path, check

Every Jira/Confluence command prints either the raw JSON body
(``--format json``) or a rendered text report (``--format text``, default).
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Callable
from typing import Any

from atlassian_cli.client import AtlassianClient
from atlassian_cli.config import CONFIG_KEYS, get_config_path, load_config, save_config
from atlassian_cli.confluence import ConfluenceClient
from atlassian_cli.env_auth import Settings, create_env_auth_manager
from atlassian_cli.errors import ConfigError
from atlassian_cli.formatter import render_response
from atlassian_cli.jira import JiraClient
from atlassian_cli.logging import DEFAULT_LEVEL, configure_logging
from atlassian_cli.runtime import build_client, execute_command, prepare_settings, report_error
from atlassian_cli.ux import print_success, print_warning

_MAX_HELP_WIDTH = 100
_SECRET_KEYS = {"atlassian_api_token"}


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _output_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="text report (default) or the raw JSON response",
    )
    return parent


def _content_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--full-content",
        action="store_true",
        help="Show full page content instead of a 200 character preview",
    )
    return parent


def _add_jira_parser(sub: Any, output: argparse.ArgumentParser) -> None:
    jira = sub.add_parser("jira", help="Jira operations")
    cmds = jira.add_subparsers(
        dest="command", required=True, parser_class=_FormatterArgumentParser, metavar="<command>"
    )

    issue = cmds.add_parser("issue", parents=[output], help="Get issue details (e.g. PROJECT-123)")
    issue.add_argument("key")
    issue.add_argument("--fields", help="Comma separated field list")

    search = cmds.add_parser("search", parents=[output], help="Search issues using JQL")
    search.add_argument("jql")
    search.add_argument("--max", type=int, default=20, dest="max_results")
    search.add_argument("--fields", help="Comma separated field list")

    cmds.add_parser("projects", parents=[output], help="List all projects")

    project_issues = cmds.add_parser(
        "project-issues", parents=[output], help="Get issues in a project, newest first"
    )
    project_issues.add_argument("key")
    project_issues.add_argument("--max", type=int, default=20, dest="max_results")

    boards = cmds.add_parser("boards", parents=[output], help="List agile boards")
    boards.add_argument("--type", dest="board_type", help="scrum or kanban")
    boards.add_argument("--max", type=int, default=50, dest="max_results")

    sprints = cmds.add_parser("sprints", parents=[output], help="List sprints of a board")
    sprints.add_argument("board_id")
    sprints.add_argument("--state", help="active, future or closed")

    sprint_issues = cmds.add_parser("sprint-issues", parents=[output], help="Get issues in a sprint")
    sprint_issues.add_argument("sprint_id")
    sprint_issues.add_argument("--max", type=int, default=50, dest="max_results")

    transitions = cmds.add_parser("transitions", help="Get workflow transitions of an issue (JSON)")
    transitions.add_argument("key")

    comments = cmds.add_parser("comments", help="Get issue comments (JSON)")
    comments.add_argument("key")

    cmds.add_parser("user", help="Get current user info (JSON)")


def _add_confluence_parser(
    sub: Any, output: argparse.ArgumentParser, content: argparse.ArgumentParser
) -> None:
    conf = sub.add_parser("confluence", help="Confluence operations")
    cmds = conf.add_subparsers(
        dest="command", required=True, parser_class=_FormatterArgumentParser, metavar="<command>"
    )

    page = cmds.add_parser("page", parents=[output], help="Get page by id")
    page.add_argument("page_id")

    by_title = cmds.add_parser(
        "page-by-title", parents=[output, content], help="Find a page by space key and title"
    )
    by_title.add_argument("space_key")
    by_title.add_argument("title")

    search = cmds.add_parser("search", parents=[output, content], help="Search using CQL")
    search.add_argument("cql")
    search.add_argument("--limit", type=int, default=10)

    text_search = cmds.add_parser(
        "text-search", parents=[output, content], help="Simple text search"
    )
    text_search.add_argument("query")
    text_search.add_argument("--limit", type=int, default=10)
    text_search.add_argument("--space", dest="space_key", help="Restrict to one space key")

    spaces = cmds.add_parser("spaces", parents=[output], help="List all spaces")
    spaces.add_argument("--limit", type=int, default=50)

    space = cmds.add_parser("space", parents=[output], help="Get space details")
    space.add_argument("space_key")

    children = cmds.add_parser("children", parents=[output, content], help="Get child pages")
    children.add_argument("page_id")
    children.add_argument("--limit", type=int, default=25)
    children.add_argument("--include-body", action="store_true", help="Expand page bodies")

    comments = cmds.add_parser("comments", parents=[output], help="Get page comments")
    comments.add_argument("page_id")

    labels = cmds.add_parser("labels", parents=[output], help="Get page labels")
    labels.add_argument("page_id")


def _add_config_parser(sub: Any) -> None:
    cfg = sub.add_parser("config", help="Configuration management")
    cmds = cfg.add_subparsers(
        dest="command", required=True, parser_class=_FormatterArgumentParser, metavar="<command>"
    )
    set_p = cmds.add_parser("set", help="Persist a value")
    set_p.add_argument("key", choices=CONFIG_KEYS)
    set_p.add_argument("value")
    get_p = cmds.add_parser("get", help="Show a persisted value")
    get_p.add_argument("key", choices=CONFIG_KEYS)
    cmds.add_parser("path", help="Show the config file location")
    cmds.add_parser("check", help="Show where each credential is resolved from")


def _build_parser() -> argparse.ArgumentParser:
    """Construct top-level CLI parser with services and commands."""
    p = _FormatterArgumentParser(
        prog="atlassian-cli",
        description="Command line interface for Jira and Confluence",
        epilog=(
            "Environment: ATLASSIAN_URL, ATLASSIAN_USERNAME, ATLASSIAN_API_TOKEN, "
            "ATLASSIAN_CLOUD (default true), CONFLUENCE_BASE_PATH (default /wiki)"
        ),
    )
    p.add_argument("--quiet", action="store_true", help="Only print errors to stderr")
    p.add_argument(
        "--log-level",
        default=os.environ.get("ATLASSIAN_CLI_LOG_LEVEL", DEFAULT_LEVEL),
        help="Logging level (env: ATLASSIAN_CLI_LOG_LEVEL)",
    )
    p.add_argument(
        "--json-logs",
        action="store_true",
        default=os.environ.get("ATLASSIAN_CLI_LOG_JSON") == "1",
        help="Emit structured JSON logs on stderr (env: ATLASSIAN_CLI_LOG_JSON=1)",
    )
    sub = p.add_subparsers(
        dest="service",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<service>",
    )
    output = _output_parent()
    content = _content_parent()
    _add_jira_parser(sub, output)
    _add_confluence_parser(sub, output, content)
    _add_config_parser(sub)
    return p


def _write_stdout(text: str) -> None:
    # lone surrogates and characters the terminal cannot encode become "?"
    encoding = getattr(sys.stdout, "encoding", None) or "utf-8"
    sys.stdout.write(text.encode(encoding, "replace").decode(encoding))


def _emit(body: bytes, args: argparse.Namespace, view: str, **options: Any) -> int:
    if getattr(args, "format", "json") == "json" or view == "raw":
        _write_stdout(body.decode("utf-8", errors="replace") + "\n")
        return 0
    _write_stdout(render_response(body, view, **options))
    return 0


def _cmd_jira(client: AtlassianClient, args: argparse.Namespace) -> int:
    jira = JiraClient(client)
    commands: dict[str, Callable[[], tuple[bytes, str, dict[str, Any]]]] = {
        "issue": lambda: (jira.get_issue(args.key, args.fields), "issue", {}),
        "search": lambda: (
            jira.search(args.jql, args.fields, args.max_results),
            "issues",
            {},
        ),
        "projects": lambda: (jira.get_projects(), "list", {"item_label": "project"}),
        "project-issues": lambda: (
            jira.get_project_issues(args.key, args.max_results),
            "issues",
            {},
        ),
        "boards": lambda: (
            jira.get_boards(args.board_type, args.max_results),
            "list",
            {"item_label": "board"},
        ),
        "sprints": lambda: (jira.get_sprints(args.board_id, args.state), "list", {"item_label": "sprint"}),
        "sprint-issues": lambda: (
            jira.get_sprint_issues(args.sprint_id, args.max_results),
            "issues",
            {},
        ),
        "transitions": lambda: (jira.get_transitions(args.key), "raw", {}),
        "comments": lambda: (jira.get_comments(args.key), "raw", {}),
        "user": lambda: (jira.get_current_user(), "raw", {}),
    }
    body, view, options = commands[args.command]()
    return _emit(body, args, view, **options)


def _cmd_confluence(client: AtlassianClient, settings: Settings, args: argparse.Namespace) -> int:
    conf = ConfluenceClient(client, base_path=settings.confluence_base_path)
    base_url = client.base_url
    search_opts = {
        "show_full_content": getattr(args, "full_content", False),
        "base_url": base_url,
    }

    def _text_search() -> bytes:
        if args.space_key:
            return conf.search_in_space(args.space_key, args.query, args.limit)
        return conf.simple_search(args.query, args.limit)

    commands: dict[str, Callable[[], tuple[bytes, str, dict[str, Any]]]] = {
        "page": lambda: (conf.get_page(args.page_id), "page", {"base_url": base_url}),
        "page-by-title": lambda: (
            conf.get_page_by_title(args.space_key, args.title),
            "search",
            search_opts,
        ),
        "search": lambda: (conf.search(args.cql, args.limit), "search", search_opts),
        "text-search": lambda: (_text_search(), "search", search_opts),
        "spaces": lambda: (conf.get_spaces(args.limit), "list", {"item_label": "space"}),
        "space": lambda: (conf.get_space(args.space_key), "item", {"item_label": "space"}),
        "children": lambda: (
            conf.get_page_children(args.page_id, args.limit, args.include_body),
            "search",
            search_opts,
        ),
        "comments": lambda: (conf.get_comments(args.page_id), "list", {"item_label": "comment"}),
        "labels": lambda: (conf.get_labels(args.page_id), "list", {"item_label": "label"}),
    }
    body, view, options = commands[args.command]()
    return _emit(body, args, view, **options)


def _run_service(args: argparse.Namespace) -> int:
    settings = prepare_settings()
    client = build_client(settings)
    try:
        if args.service == "jira":
            return _cmd_jira(client, args)
        return _cmd_confluence(client, settings, args)
    finally:
        client.close()


def _mask(value: str) -> str:
    if len(value) <= 4:  # noqa: PLR2004
        return "****"
    return "****" + value[-4:]


def _cmd_config(args: argparse.Namespace) -> int:
    if args.command == "path":
        print(get_config_path())
        return 0

    cfg = load_config()
    if args.command == "set":
        cfg.set(args.key, args.value)
        path = save_config(cfg)
        if not args.quiet:
            print_success(f"Updated {args.key} in {path}")
        return 0
    if args.command == "get":
        value = cfg.get(args.key)
        if value is None:
            print("(null)")
        else:
            print(_mask(value) if args.key in _SECRET_KEYS else value)
        return 0

    manager = create_env_auth_manager()
    sources = (
        ("ATLASSIAN_URL", manager.get_url(), cfg.atlassian_url),
        ("ATLASSIAN_USERNAME", manager.get_username(), cfg.atlassian_username),
        ("ATLASSIAN_API_TOKEN", manager.get_api_token(), cfg.atlassian_api_token),
    )
    for name, env_value, config_value in sources:
        origin = "environment" if env_value else "config file" if config_value else "missing"
        print(f"{name}: {origin}")
    recommendations = manager.get_authentication_recommendations(cfg)
    for rec in recommendations:
        print_warning(rec)
    return 0 if not recommendations else 2


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    level = "ERROR" if args.quiet else args.log_level
    configure_logging(json_logging=args.json_logs, level=level)

    if args.service == "config":
        try:
            return _cmd_config(args)
        except ConfigError as exc:
            return report_error(exc)

    return execute_command(lambda: _run_service(args), f"{args.service}.{args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
