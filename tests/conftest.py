from unittest.mock import MagicMock

import pytest
import requests

from config_provider.config import ProviderSettings
from config_provider.models import EventContext, PipelineInfo, RepoInfo


@pytest.fixture
def settings():
    return ProviderSettings(
        server_type="gitea",
        server_url="https://git.example.com",
        token="secret-token",
        gitea_url="https://git.example.com",
        gitea_token="secret-token",
    )


@pytest.fixture
def event():
    return EventContext(
        repo=RepoInfo(name="myapp", owner="admin", full_name="admin/myapp", default_branch="main"),
        pipeline=PipelineInfo(branch="main", commit="abc123", ref="refs/heads/main"),
    )


def _make_response(status_code=200, json_data=None, content=b""):
    """Stand-in for requests.Response with just what the adapters touch."""
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def make_response():
    return _make_response
