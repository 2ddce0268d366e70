"""Shared fakes: canned HTTP responses and a recording session."""

import io
import json
from typing import Any, List, Optional
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from rich.console import Console


class FakeResponse:
    def __init__(
        self,
        body: Any = b"",
        status_code: int = 200,
        content_type: Optional[str] = "application/json",
        chunks: Optional[List[bytes]] = None,
    ):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.content = body
        self.status_code = status_code
        self.headers = CaseInsensitiveDict()
        if content_type is not None:
            self.headers["Content-Type"] = content_type
        self.chunks = chunks
        self.closed = False
        self.iterated = False

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.text)

    def iter_content(self, chunk_size: int = 1):
        self.iterated = True
        if self.chunks is not None:
            yield from self.chunks
            return
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def session():
    """A requests.Session stand-in whose get() is a MagicMock."""
    s = MagicMock(spec=requests.Session)
    return s


@pytest.fixture
def quiet_console():
    return Console(file=io.StringIO(), force_terminal=False, width=100)
