"""Fakes for the CircleCI HTTP layer."""

from typing import Any
from unittest.mock import MagicMock, Mock

import requests


API = "https://circleci.com/api/v2/"
PROJECT = f"{API}project/gh/facebook/react-native"


def make_response(
    payload: Any = None, status_code: int = 200, text: str | None = None
) -> Mock:
    """Build a mock ``requests.Response`` returning ``payload`` as JSON."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text if text is not None else ("" if payload is None else "{...}")
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Error"
        )
    else:
        response.raise_for_status = Mock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


class FakeSession:
    """Stands in for ``requests.Session``, answering GETs from a URL table.

    A route is either a JSON payload, a callable ``(url, params) -> response``
    or an exception instance to raise.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.routes: dict[str, Any] = routes if routes is not None else {}
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    def get(self, url: str, params: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        self.calls.append((url, params))
        route = self.routes[url]
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, Mock):
            return route
        if callable(route):
            return route(url, params)
        return make_response(route)

    def urls(self) -> list[str]:
        return [url for url, _params in self.calls]


def items(*entries: dict[str, Any], next_page_token: str | None = None) -> dict[str, Any]:
    return {"items": list(entries), "next_page_token": next_page_token}
