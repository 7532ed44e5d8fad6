"""GitHub REST operations used by the release commands."""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from collections.abc import Iterator
from typing import Any
from urllib.parse import quote, urlencode

from .constants import API_BASE, GITHUB_API_ACCEPT, HTTP_TIMEOUT_SEC, PER_PAGE, USER_AGENT
from .errors import GitHubError, NotFoundError

logger = logging.getLogger(__name__)


class GitHubClient:
    def __init__(self, token: str | None = None, api_base: str = API_BASE) -> None:
        self.token = token
        self.api_base = api_base.rstrip("/")

    # ---------- low-level HTTP ----------
    def _request_json(self, url: str, method: str = "GET", payload: Any = None) -> Any:
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        req = urllib.request.Request(url, data=data, method=method)
        req.add_header("Accept", GITHUB_API_ACCEPT)
        req.add_header("User-Agent", USER_AGENT)
        if data is not None:
            req.add_header("Content-Type", "application/json")
        if self.token:
            req.add_header("Authorization", f"Bearer {self.token}")
        logger.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(req, timeout=HTTP_TIMEOUT_SEC) as resp:
                body = resp.read().decode("utf-8")
            return json.loads(body) if body else None
        except urllib.error.HTTPError as e:
            raise GitHubError(f"{method} {url} failed: HTTP {e.code} {_error_message(e)}", status=e.code) from e
        except urllib.error.URLError as e:
            raise GitHubError(f"{method} {url} failed: {e.reason}") from e
        except (TimeoutError, http.client.HTTPException, ValueError) as e:
            # ValueError covers undecodable and non-JSON bodies
            raise GitHubError(f"{method} {url} failed: {e!r}") from e

    def _url(self, path: str, **params: Any) -> str:
        query = {k: v for k, v in params.items() if v is not None}
        return f"{self.api_base}{path}" + (f"?{urlencode(query)}" if query else "")

    # ---------- repositories ----------
    def search_repositories(self, org: str, topic: str, visibility: str = "all") -> Iterator[dict[str, Any]]:
        """Yield repositories of org carrying topic, one search page at a time."""
        q = f"org:{org} topic:{topic}"
        if visibility != "all":
            q += f" is:{visibility}"
        page, seen = 1, 0
        while True:
            data = self._request_json(self._url("/search/repositories", q=q, per_page=PER_PAGE, page=page))
            items = data.get("items") or []
            if page == 1:
                logger.info("Found %s repositories for the org.", data.get("total_count", len(items)))
            if not items:
                return
            yield from items
            seen += len(items)
            if seen >= data.get("total_count", 0):
                return
            page += 1

    def get_repository(self, full_name: str) -> dict[str, Any]:
        try:
            return self._request_json(self._url(f"/repos/{full_name}"))
        except GitHubError as e:
            if e.status == 404:
                raise NotFoundError(f"Repository {full_name} not found") from e
            raise

    def get_branch_sha(self, full_name: str, branch: str) -> str:
        try:
            data = self._request_json(self._url(f"/repos/{full_name}/branches/{quote(branch, safe='')}"))
        except GitHubError as e:
            if e.status == 404:
                raise NotFoundError(f"Branch {branch} not found in {full_name}") from e
            raise
        return data["commit"]["sha"]

    # ---------- pull requests ----------
    def list_pull_requests(
        self,
        full_name: str,
        state: str = "open",
        base: str | None = None,
        sort: str = "created",
        direction: str = "desc",
    ) -> list[dict[str, Any]]:
        pulls: list[dict[str, Any]] = []
        page = 1
        while True:
            url = self._url(
                f"/repos/{full_name}/pulls",
                state=state,
                base=base,
                sort=sort,
                direction=direction,
                per_page=PER_PAGE,
                page=page,
            )
            data = self._request_json(url)
            if not data:
                break
            pulls.extend(data)
            if len(data) < PER_PAGE:
                break
            page += 1
        return pulls

    def get_pull_request(self, full_name: str, number: int) -> dict[str, Any]:
        return self._request_json(self._url(f"/repos/{full_name}/pulls/{number}"))

    def create_pull_request(self, full_name: str, *, title: str, head: str, base: str, body: str = "") -> dict[str, Any]:
        payload = {"title": title, "head": head, "base": base, "body": body}
        return self._request_json(self._url(f"/repos/{full_name}/pulls"), method="POST", payload=payload)

    def add_labels(self, full_name: str, number: int, labels: list[str]) -> list[dict[str, Any]]:
        # pull requests share the issues label endpoint
        url = self._url(f"/repos/{full_name}/issues/{number}/labels")
        return self._request_json(url, method="POST", payload={"labels": labels})

    def merge_pull_request(self, full_name: str, number: int, merge_method: str | None = None) -> dict[str, Any]:
        payload = {"merge_method": merge_method} if merge_method else {}
        return self._request_json(self._url(f"/repos/{full_name}/pulls/{number}/merge"), method="PUT", payload=payload)


def _error_message(e: urllib.error.HTTPError) -> str:
    try:
        raw = e.read().decode("utf-8")
    except OSError:
        return e.reason or ""
    try:
        return json.loads(raw).get("message", raw)
    except (ValueError, AttributeError):
        return raw
