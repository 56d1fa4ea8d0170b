"""Read-only Jira REST endpoints."""

from __future__ import annotations

from dataclasses import dataclass

from .client import AtlassianClient
from .url_encoding import percent_encode

DEFAULT_ISSUE_FIELDS = (
    "summary,description,status,assignee,reporter,labels,priority,created,updated,issuetype"
)


@dataclass
class JiraClient:
    client: AtlassianClient

    def get_issue(self, issue_key: str, fields: str | None = None) -> bytes:
        query = f"fields={fields or DEFAULT_ISSUE_FIELDS}"
        return self.client.execute("GET", f"/rest/api/3/issue/{percent_encode(issue_key)}", query)

    def search(self, jql: str, fields: str | None = None, max_results: int = 20) -> bytes:
        query = (
            f"jql={percent_encode(jql)}"
            f"&fields={fields or DEFAULT_ISSUE_FIELDS}"
            f"&maxResults={max_results}"
        )
        return self.client.execute("GET", "/rest/api/3/search/jql", query)

    def get_projects(self) -> bytes:
        return self.client.execute("GET", "/rest/api/3/project")

    def get_project_issues(self, project_key: str, max_results: int = 20) -> bytes:
        return self.search(f"project={project_key} ORDER BY created DESC", max_results=max_results)

    def get_transitions(self, issue_key: str) -> bytes:
        return self.client.execute(
            "GET", f"/rest/api/3/issue/{percent_encode(issue_key)}/transitions"
        )

    def get_comments(self, issue_key: str) -> bytes:
        return self.client.execute("GET", f"/rest/api/3/issue/{percent_encode(issue_key)}/comment")

    def get_boards(self, board_type: str | None = None, max_results: int = 50) -> bytes:
        query = f"maxResults={max_results}"
        if board_type:
            query = f"type={percent_encode(board_type)}&{query}"
        return self.client.execute("GET", "/rest/agile/1.0/board", query)

    def get_sprints(self, board_id: str, state: str | None = None) -> bytes:
        query = f"state={percent_encode(state)}" if state else None
        return self.client.execute(
            "GET", f"/rest/agile/1.0/board/{percent_encode(board_id)}/sprint", query
        )

    def get_sprint_issues(self, sprint_id: str, max_results: int = 50) -> bytes:
        return self.client.execute(
            "GET",
            f"/rest/agile/1.0/sprint/{percent_encode(sprint_id)}/issue",
            f"maxResults={max_results}",
        )

    def get_current_user(self) -> bytes:
        path = "/rest/api/3/myself" if self.client.is_cloud else "/rest/api/2/myself"
        return self.client.execute("GET", path)


__all__ = ["DEFAULT_ISSUE_FIELDS", "JiraClient"]
