import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE_TEMPLATE = "{{ repo.owner }}"
DEFAULT_REPO_NAME_TEMPLATE = "woodpeckerfiles"
DEFAULT_BRANCH_TEMPLATE = "{{ pipeline.branch }}"
DEFAULT_PATH_TEMPLATE = "{{ repo.name }}/{{ pipeline.branch }}"


def get_env(environ: Mapping[str, str], key: str, default: str) -> str:
    value = environ.get(key)
    if value:
        return value
    return default


def get_env_with_fallback(environ: Mapping[str, str], primary: str, fallback: str, default: str) -> str:
    """Woodpecker-style name first, then the Drone-compatible one, then the default."""
    value = environ.get(primary)
    if value:
        return value
    value = environ.get(fallback)
    if value:
        return value
    return default


def get_env_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    value = environ.get(key)
    if not value:
        return default
    return value.lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ProviderSettings:
    """Process-wide configuration, read once at startup and never mutated."""
    server_type: str = "gitea"
    server_url: str = "https://git.local.lan"
    token: str = ""
    gitea_url: str = "https://git.local.lan"
    gitea_token: str = ""
    namespace_template: str = DEFAULT_NAMESPACE_TEMPLATE
    repo_name_template: str = DEFAULT_REPO_NAME_TEMPLATE
    branch_template: str = DEFAULT_BRANCH_TEMPLATE
    path_template: str = DEFAULT_PATH_TEMPLATE
    verify_ssl: bool = False
    ca_bundle: Optional[str] = None
    request_timeout: Optional[float] = 30.0
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProviderSettings":
        if environ is None:
            environ = os.environ

        server_url = get_env(environ, "SERVER_URL", "https://git.local.lan")
        token = get_env(environ, "TOKEN", "")

        timeout = float(get_env(environ, "HTTP_TIMEOUT", "30"))
        ca_bundle = environ.get("CA_BUNDLE") or None

        return cls(
            server_type=get_env(environ, "SERVERTYPE", "gitea"),
            server_url=server_url,
            token=token,
            # Legacy Gitea-only names still win over the generic ones
            gitea_url=get_env(environ, "GITEA_URL", server_url),
            gitea_token=get_env(environ, "GITEA_TOKEN", token),
            namespace_template=get_env_with_fallback(
                environ, "WOODPECKER_CONFIG_NAMESPACE_TEMP", "DRONE_CONFIG_NAMESPACE_TEMP", DEFAULT_NAMESPACE_TEMPLATE
            ),
            repo_name_template=get_env_with_fallback(
                environ, "WOODPECKER_CONFIG_REPONAME_TEMP", "DRONE_CONFIG_REPONAME_TEMP", DEFAULT_REPO_NAME_TEMPLATE
            ),
            branch_template=get_env_with_fallback(
                environ, "WOODPECKER_CONFIG_BRANCH_TEMP", "DRONE_CONFIG_BRANCH_TEMP", DEFAULT_BRANCH_TEMPLATE
            ),
            path_template=get_env_with_fallback(
                environ, "WOODPECKER_CONFIG_YAMLPATH_TEMP", "DRONE_CONFIG_YAMLPATH_TEMP", DEFAULT_PATH_TEMPLATE
            ),
            verify_ssl=get_env_bool(environ, "VERIFY_SSL", False) or ca_bundle is not None,
            ca_bundle=ca_bundle,
            request_timeout=timeout if timeout > 0 else None,
            debug=get_env_bool(environ, "PLUGIN_DEBUG", False),
            host=get_env(environ, "HOST", "0.0.0.0"),
            port=int(get_env(environ, "PORT", "8000")),
        )

    @property
    def tls_verify(self):
        """Value handed to requests/PyGithub as ``verify``."""
        if not self.verify_ssl:
            return False
        return self.ca_bundle or True

    def masked_token(self) -> str:
        token = self.token or self.gitea_token
        if len(token) > 16:
            return f"{token[:8]}...{token[-8:]}"
        return "***" if token else ""

    def log_summary(self) -> None:
        logger.info(f"Server Type: {self.server_type}")
        logger.info(f"Server URL: {self.server_url}")
        logger.info(f"Template Repo: {self.repo_name_template}")
        logger.info(f"Debug Mode: {self.debug}")
        if not self.token and not self.gitea_token:
            logger.warning("TOKEN is not set!")
        else:
            logger.info(f"Token configured: {self.masked_token()}")
        if not self.verify_ssl:
            logger.info("SSL verification disabled - allowing self-signed certificates")
        logger.info("Template Configuration:")
        logger.info(f"  Namespace: {self.namespace_template}")
        logger.info(f"  RepoName: {self.repo_name_template}")
        logger.info(f"  Branch: {self.branch_template}")
        logger.info(f"  Path: {self.path_template}")
