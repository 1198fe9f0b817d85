import dataclasses
import os

import httpx
import pytest
from fastapi.testclient import TestClient

# Plain-text logs for the module-level app built on import.
os.environ["LOG_JSON"] = "false"

from content_relay.config import Settings  # noqa: E402
from content_relay.main import create_app  # noqa: E402

GRAPHQL_URL = "https://cms.example.test/graphql"
IMAGE_HOST = "vacaylanka.atwebpages.com"
USERNAME = "editor"
PASSWORD = "s3cret-app-pass"


class UpstreamRecorder:
    """httpx.MockTransport handler that records every outbound request."""

    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def relay_settings() -> Settings:
    return Settings(
        graphql_url=GRAPHQL_URL,
        graphql_username=USERNAME,
        graphql_password=PASSWORD,
        image_allowed_hosts=frozenset({IMAGE_HOST}),
        log_json=False,
    )


@pytest.fixture
def make_client(relay_settings):
    def _make(handler, **overrides):
        settings = dataclasses.replace(relay_settings, **overrides)
        recorder = UpstreamRecorder(handler)
        app = create_app(settings=settings, transport=httpx.MockTransport(recorder))
        return TestClient(app), recorder

    return _make
