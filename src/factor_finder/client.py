from typing import Any, Dict

import requests

from factor_finder.models.commands import SearchCommand


class RemoteSearchError(RuntimeError):
    pass


def submit_search(url: str, command: SearchCommand, *, timeout: float = 60.0) -> Dict[str, Any]:
    """Post a search command to a running API and return the response body."""
    endpoint = f"{url.rstrip('/')}/api/search"
    try:
        response = requests.post(endpoint, json=command.model_dump(), timeout=timeout)
    except requests.RequestException as e:
        raise RemoteSearchError(f"Failed to post {endpoint}: {e}") from e

    if response.status_code != 200:
        raise RemoteSearchError(f"Failed to post {endpoint}: {response.status_code} {response.text}")
    return response.json()
