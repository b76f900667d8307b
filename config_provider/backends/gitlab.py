import base64
import binascii
from typing import List
from urllib.parse import quote

from config_provider.backends.http import get, open_session
from config_provider.errors import DecodeError, FetchError
from config_provider.interfaces import BackendAdapter
from config_provider.models import DirectoryEntry

# Only the first page of a tree listing is read
TREE_PAGE_SIZE = 100

_TREE_KINDS = {"blob": "file", "tree": "dir"}


def api_base_url(server_url: str) -> str:
    """Accept SERVER_URL with or without the /api/v4 suffix."""
    base_url = server_url.rstrip("/")
    if not base_url.endswith("/api/v4"):
        base_url = f"{base_url}/api/v4"
    return base_url


class GitLabBackend(BackendAdapter):
    """GitLab REST v4. File bodies come back base64-encoded and are decoded here."""

    name = "gitlab"

    def __init__(self, settings, session=None):
        super().__init__(settings)
        self.base_url = api_base_url(settings.server_url)
        self.session = session or open_session(settings.token, settings.tls_verify)

    def _project_url(self, namespace: str, repo: str) -> str:
        project_id = quote(f"{namespace}/{repo}", safe="")
        return f"{self.base_url}/projects/{project_id}"

    def list_directory(self, namespace: str, repo: str, branch: str, path: str) -> List[DirectoryEntry]:
        url = f"{self._project_url(namespace, repo)}/repository/tree"
        params = {"path": path, "ref": branch, "per_page": TREE_PAGE_SIZE}
        response = get(self.session, url, f"tree {path}@{branch}", timeout=self.settings.request_timeout, params=params)
        try:
            items = response.json()
        except ValueError as e:
            raise FetchError(f"tree {path}@{branch}: invalid JSON response") from e
        return [
            DirectoryEntry(
                name=item.get("name", ""),
                path=item.get("path", ""),
                kind=_TREE_KINDS.get(item.get("type"), item.get("type") or ""),
            )
            for item in items
        ]

    def read_file(self, namespace: str, repo: str, branch: str, file_path: str) -> str:
        url = f"{self._project_url(namespace, repo)}/repository/files/{quote(file_path, safe='')}"
        response = get(self.session, url, f"file {file_path}@{branch}", timeout=self.settings.request_timeout, params={"ref": branch})
        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"file {file_path}: invalid JSON response") from e

        encoded = payload.get("content") or ""
        try:
            if payload.get("encoding", "base64") == "base64":
                return base64.b64decode(encoded, validate=True).decode("utf-8")
            return encoded
        except (binascii.Error, UnicodeDecodeError) as e:
            raise DecodeError(f"file {file_path}: {e}") from e

    def close(self):
        self.session.close()
