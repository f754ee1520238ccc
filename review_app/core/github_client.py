"""GitHub contents API client and the remote whole-document persistence gateway."""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

import requests

from .config import DEFAULT_GITHUB_BRANCH, DEFAULT_GITHUB_DATA_DIR, DEFAULT_REQUEST_TIMEOUT, GITHUB_API_URL
from .errors import PersistenceError

logger = logging.getLogger(__name__)


def _json_body(resp: requests.Response, path: str) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise PersistenceError(f"GitHub returned a non-JSON body for {path}: {exc}") from exc


class GitHubContentsAPI:
    def __init__(
        self,
        owner: str,
        repo: str,
        token: str | None,
        *,
        branch: str = DEFAULT_GITHUB_BRANCH,
        base_url: str = GITHUB_API_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.owner = owner
        self.repo = repo
        self.token = token
        self.branch = branch
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def has_token(self) -> bool:
        return bool(self.token)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/repos/{self.owner}/{self.repo}/contents/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        if not self.has_token():
            raise PersistenceError("GitHub token not set. Configure it on the Setup page first.")
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
            "Content-Type": "application/json",
        }

    def get_file(self, path: str) -> tuple[Any, str] | None:
        """Return ``(decoded JSON, sha)`` for a file, or ``None`` when it does not exist."""
        headers = self._headers()
        try:
            resp = self.session.get(
                self._url(path), headers=headers, params={"ref": self.branch}, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise PersistenceError(f"GitHub request failed for {path}: {exc}") from exc
        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            raise PersistenceError(f"GitHub API error {resp.status_code}: {resp.text[:200]}")
        data = _json_body(resp, path)
        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected GitHub response for {path}: expected a file object")
        if data.get("type") != "file":
            return None
        try:
            content = base64.b64decode(data.get("content") or "").decode("utf-8")
            return json.loads(content), data.get("sha")
        except (ValueError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Unreadable JSON in {path}: {exc}") from exc

    def get_sha(self, path: str) -> str | None:
        found = self.get_file(path)
        return found[1] if found else None

    def put_file(self, path: str, content: Any, message: str) -> dict[str, Any]:
        """Create or overwrite a file with pretty-printed JSON."""
        sha = self.get_sha(path)
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(json.dumps(content, indent=2).encode("utf-8")).decode("ascii"),
            "branch": self.branch,
        }
        if sha:
            body["sha"] = sha
        try:
            resp = self.session.put(self._url(path), headers=self._headers(), json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PersistenceError(f"GitHub request failed for {path}: {exc}") from exc
        if resp.status_code >= 400:
            raise PersistenceError(f"GitHub API error {resp.status_code}: {resp.text[:200]}")
        return _json_body(resp, path)


class GitHubGateway:
    """Keeps each collection as ``<data_dir>/<collection>.json`` in a repository."""

    def __init__(self, api: GitHubContentsAPI, *, data_dir: str = DEFAULT_GITHUB_DATA_DIR):
        self.api = api
        self.data_dir = data_dir.strip("/")

    def path_for(self, collection: str) -> str:
        return f"{self.data_dir}/{collection}.json" if self.data_dir else f"{collection}.json"

    def load(self, collection: str) -> Any | None:
        try:
            found = self.api.get_file(self.path_for(collection))
        except PersistenceError as exc:
            exc.collection = collection
            raise
        return found[0] if found else None

    def save(self, collection: str, value: Any) -> bool:
        try:
            self.api.put_file(self.path_for(collection), value, f"Update {collection} data")
            return True
        except (PersistenceError, TypeError, ValueError) as exc:
            logger.error("Error saving %s to GitHub: %s", collection, exc)
            return False
