"""atlassian-cli - command line gateway to Jira and Confluence.

High-level public API (stable):

from atlassian_cli import (
    AtlassianClient, Credential, JiraClient, parse_document, render_single_issue,
)

client = AtlassianClient(Credential("https://acme.atlassian.net", "me@acme.io", "token"))
body = JiraClient(client).get_issue("DEV-1")
print(render_single_issue(parse_document(body)))

The CLI (``atlassian-cli`` / ``python -m atlassian_cli``) is a thin layer over
these helpers.
"""

from __future__ import annotations

from .client import AtlassianClient, Credential
from .config import CliConfig, load_config, resolve, save_config
from .confluence import ConfluenceClient
from .errors import (
    AtlassianAPIError,
    ConfigurationMissing,
    FailureKind,
    MalformedResponse,
)
from .formatter import (
    parse_document,
    render_generic_list,
    render_issue_list,
    render_search_results,
    render_single_issue,
    render_single_page,
)
from .html_text import strip_and_normalize
from .jira import JiraClient
from .url_encoding import percent_encode

__version__ = "0.2.0"

__all__ = [
    "AtlassianAPIError",
    "AtlassianClient",
    "CliConfig",
    "ConfigurationMissing",
    "ConfluenceClient",
    "Credential",
    "FailureKind",
    "JiraClient",
    "MalformedResponse",
    "load_config",
    "parse_document",
    "percent_encode",
    "render_generic_list",
    "render_issue_list",
    "render_search_results",
    "render_single_issue",
    "render_single_page",
    "resolve",
    "save_config",
    "strip_and_normalize",
    "__version__",
]
