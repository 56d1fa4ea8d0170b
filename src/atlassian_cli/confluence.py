"""Read-only Confluence REST endpoints (v1 content API)."""

from __future__ import annotations

from dataclasses import dataclass

from .client import AtlassianClient
from .env_auth import DEFAULT_CONFLUENCE_BASE_PATH
from .url_encoding import percent_encode

SEARCH_EXPAND = "space,version,body.storage"


def _quote_cql(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


@dataclass
class ConfluenceClient:
    client: AtlassianClient
    base_path: str = DEFAULT_CONFLUENCE_BASE_PATH

    def _endpoint(self, api_path: str) -> str:
        return f"{self.base_path.rstrip('/')}{api_path}"

    def _get(self, api_path: str, query: str | None = None) -> bytes:
        return self.client.execute("GET", self._endpoint(api_path), query)

    def search(self, cql: str, limit: int = 10) -> bytes:
        return self._get(
            "/rest/api/content/search",
            f"cql={percent_encode(cql)}&limit={limit}&expand={SEARCH_EXPAND}",
        )

    def simple_search(self, query: str, limit: int = 10) -> bytes:
        return self.search(f'type=page AND siteSearch ~ "{_quote_cql(query)}"', limit)

    def search_in_space(self, space_key: str, query: str, limit: int = 10) -> bytes:
        cql = f'type=page AND space={space_key} AND siteSearch ~ "{_quote_cql(query)}"'
        return self.search(cql, limit)

    def get_page(self, page_id: str) -> bytes:
        return self._get(
            f"/rest/api/content/{percent_encode(page_id)}",
            "expand=body.storage,version,space,children.attachment,history",
        )

    def get_page_by_title(self, space_key: str, title: str) -> bytes:
        return self._get(
            "/rest/api/content",
            f"spaceKey={percent_encode(space_key)}&title={percent_encode(title)}"
            "&expand=body.storage,version,space",
        )

    def get_page_children(self, parent_id: str, limit: int = 25, include_body: bool = False) -> bytes:
        expand = "body.storage,version,space" if include_body else "version,space"
        return self._get(
            f"/rest/api/content/{percent_encode(parent_id)}/child/page",
            f"expand={expand}&limit={limit}",
        )

    def get_comments(self, page_id: str) -> bytes:
        return self._get(
            f"/rest/api/content/{percent_encode(page_id)}/child/comment",
            "expand=body.view,version",
        )

    def get_labels(self, page_id: str) -> bytes:
        return self._get(f"/rest/api/content/{percent_encode(page_id)}/label")

    def get_spaces(self, limit: int = 50) -> bytes:
        return self._get("/rest/api/space", f"limit={limit}&expand=description.plain")

    def get_space(self, space_key: str) -> bytes:
        return self._get(
            f"/rest/api/space/{percent_encode(space_key)}",
            "expand=description.plain,homepage",
        )


__all__ = ["ConfluenceClient"]
