import logging
from typing import List
from urllib.parse import quote

from config_provider.backends.http import get, open_session
from config_provider.errors import DecodeError, FetchError
from config_provider.interfaces import BackendAdapter
from config_provider.models import DirectoryEntry

logger = logging.getLogger(__name__)


class GiteaBackend(BackendAdapter):
    """Gitea REST v1. The raw endpoint returns the file bytes as-is."""

    name = "gitea"

    def __init__(self, settings, session=None):
        super().__init__(settings)
        self.base_url = settings.gitea_url.rstrip("/")
        self.session = session or open_session(settings.gitea_token, settings.tls_verify)

    def _repo_url(self, namespace: str, repo: str) -> str:
        return f"{self.base_url}/api/v1/repos/{quote(namespace, safe='')}/{quote(repo, safe='')}"

    def list_directory(self, namespace: str, repo: str, branch: str, path: str) -> List[DirectoryEntry]:
        url = f"{self._repo_url(namespace, repo)}/contents/{quote(path.strip('/'))}"
        response = get(self.session, url, f"contents {path}@{branch}", timeout=self.settings.request_timeout, params={"ref": branch})
        try:
            items = response.json()
        except ValueError as e:
            raise FetchError(f"contents {path}@{branch}: invalid JSON response") from e
        if isinstance(items, dict):
            # The path names a single file, not a directory
            logger.debug(f"{path} is a {items.get('type')}, not a directory")
            return []
        return [
            DirectoryEntry(name=item.get("name", ""), path=item.get("path", ""), kind=item.get("type") or "")
            for item in items
        ]

    def read_file(self, namespace: str, repo: str, branch: str, file_path: str) -> str:
        url = f"{self._repo_url(namespace, repo)}/raw/{quote(file_path)}"
        response = get(self.session, url, f"file {file_path}@{branch}", timeout=self.settings.request_timeout, params={"ref": branch})
        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"file {file_path}: {e}") from e

    def close(self):
        self.session.close()
