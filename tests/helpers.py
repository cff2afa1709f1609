"""Shared test doubles for templatepub tests."""

import json
from typing import Any

import requests

from templatepub.publish.scheduler import DelayScheduler


class ImmediateScheduler(DelayScheduler):
    """Scheduler that records requested delays instead of sleeping."""

    def __init__(self) -> None:
        super().__init__()
        self.waits: list[float] = []

    def wait(self, seconds: float) -> None:
        self.waits.append(seconds)
        super().wait(0)


def make_response(
    status_code: int = 200,
    json_data: Any = None,
    text: str | None = None,
    content_type: str | None = None,
) -> requests.Response:
    """Build a real ``requests.Response`` with the given body."""
    response = requests.Response()
    response.status_code = status_code
    if json_data is not None:
        response._content = json.dumps(json_data).encode()
        response.headers["Content-Type"] = content_type or "application/json"
    else:
        response._content = (text or "").encode()
        response.headers["Content-Type"] = (
            content_type or "text/html; charset=utf-8"
        )
    response.encoding = "utf-8"
    return response
