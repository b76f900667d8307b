import logging
from typing import List

import requests
from github import Auth, BadCredentialsException, Github, GithubException, UnknownObjectException

from config_provider.errors import BackendAuthError, DecodeError, DirectoryNotFoundError, FetchError
from config_provider.interfaces import BackendAdapter
from config_provider.models import DirectoryEntry

logger = logging.getLogger(__name__)

PUBLIC_API_HOST = "api.github.com"


def enterprise_base_url(server_url: str) -> str:
    """GitHub Enterprise serves its REST API under /api/v3."""
    base_url = server_url.rstrip("/")
    if not base_url.endswith("/api/v3"):
        base_url = f"{base_url}/api/v3"
    return base_url


def _translate(e: Exception, what: str) -> FetchError:
    if isinstance(e, UnknownObjectException):
        return DirectoryNotFoundError(f"{what} not found (404)")
    if isinstance(e, BadCredentialsException):
        return BackendAuthError(f"{what}: authentication failed (401)")
    if isinstance(e, GithubException) and e.status == 403:
        return BackendAuthError(f"{what}: access denied (403)")
    return FetchError(f"{what}: {e}")


class GitHubBackend(BackendAdapter):
    """GitHub via PyGithub; ``decoded_content`` is already base64-decoded by the client."""

    name = "github"

    def __init__(self, settings, client=None):
        super().__init__(settings)
        self.client = client or self._create_client()

    def _create_client(self) -> Github:
        kwargs = {"verify": self.settings.tls_verify}
        if self.settings.token:
            kwargs["auth"] = Auth.Token(self.settings.token)
        # None disables the timeout, same as the requests-based backends
        kwargs["timeout"] = self.settings.request_timeout
        if PUBLIC_API_HOST not in self.settings.server_url:
            kwargs["base_url"] = enterprise_base_url(self.settings.server_url)
            logger.debug(f"Using GitHub Enterprise API at {kwargs['base_url']}")
        return Github(**kwargs)

    def _get_contents(self, namespace: str, repo: str, branch: str, path: str, what: str):
        try:
            repository = self.client.get_repo(f"{namespace}/{repo}", lazy=True)
            return repository.get_contents(path, ref=branch)
        except (GithubException, requests.exceptions.RequestException) as e:
            raise _translate(e, what) from e

    def list_directory(self, namespace: str, repo: str, branch: str, path: str) -> List[DirectoryEntry]:
        contents = self._get_contents(namespace, repo, branch, path, f"contents {path}@{branch}")
        if not isinstance(contents, list):
            logger.debug(f"{path} is a {contents.type}, not a directory")
            return []
        return [DirectoryEntry(name=item.name, path=item.path, kind=item.type) for item in contents]

    def read_file(self, namespace: str, repo: str, branch: str, file_path: str) -> str:
        content_file = self._get_contents(namespace, repo, branch, file_path, f"file {file_path}@{branch}")
        if isinstance(content_file, list):
            raise FetchError(f"file {file_path}: path is a directory")
        # Files over 1MB come back with encoding "none" and no inline content
        if content_file.encoding != "base64":
            raise DecodeError(f"file {file_path}: unsupported encoding {content_file.encoding!r}")
        try:
            return content_file.decoded_content.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError(f"file {file_path}: {e}") from e

    def close(self):
        self.client.close()
