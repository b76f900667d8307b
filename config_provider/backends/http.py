import logging

import requests
import urllib3

from config_provider.errors import BackendAuthError, DirectoryNotFoundError, FetchError

logger = logging.getLogger(__name__)

USER_AGENT = "Woodpecker-Config-Provider/2.0"


def open_session(token: str, verify) -> requests.Session:
    """A fresh session per backend call; nothing is pooled across requests."""
    session = requests.Session()
    session.headers.update({
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
    })
    if token:
        session.headers["Authorization"] = f"Bearer {token}"
    session.verify = verify
    if verify is False:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    return session


def raise_for_status(response: requests.Response, what: str) -> None:
    if response.status_code == 404:
        raise DirectoryNotFoundError(f"{what} not found (404)")
    if response.status_code in (401, 403):
        raise BackendAuthError(f"{what}: authentication failed ({response.status_code})")
    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        raise FetchError(f"{what}: {e}") from e


def get(session: requests.Session, url: str, what: str, timeout=None, **kwargs) -> requests.Response:
    try:
        response = session.get(url, timeout=timeout, **kwargs)
    except requests.exceptions.SSLError as e:
        if session.verify:
            logger.error(f"SSL Error - try setting VERIFY_SSL=false for self-signed certificates: {e}")
        raise FetchError(f"{what}: {e}") from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f"{what}: {e}") from e
    raise_for_status(response, what)
    return response
