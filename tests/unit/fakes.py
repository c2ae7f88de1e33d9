"""
Test doubles for the HTTP transport
"""

import json
from typing import Any, List

import requests


def make_response(status: int, body: Any) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    response.encoding = "utf-8"
    response.url = "https://billing.example.com"
    return response


class FakeTransport:
    """Stands in for Session.send, replaying queued outcomes"""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes: List[Any] = list(outcomes)
        self.requests: List[requests.PreparedRequest] = []

    def __call__(self, prepared, **kwargs):
        self.requests.append(prepared)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_raw_response(status: int, content: bytes, content_type: str) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = content
    response.headers["Content-Type"] = content_type
    response.url = "https://billing.example.com"
    return response
