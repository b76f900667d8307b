from .gitea import GiteaBackend
from .github import GitHubBackend
from .gitlab import GitLabBackend

BACKENDS = {
    "gitea": GiteaBackend,
    "github": GitHubBackend,
    "gitlab": GitLabBackend,
}
