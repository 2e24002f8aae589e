"""
Shared fixtures for the ZeroKit admin SDK test suite
"""

import json
from datetime import datetime, timezone

import pytest

from zerokit_admin_sdk import AdminApiClient, HttpResponse, TransportError


ADMIN_KEY = "8f1c2b3a4d5e6f708192a3b4c5d6e7f8091a2b3c4d5e6f708192a3b4c5d6e7f8"
SERVICE_URL = "https://abcdefgh.api.tresorit.io"
FIXED_NOW = datetime(2017, 5, 4, 10, 20, 30, tzinfo=timezone.utc)


class StubTransport:
    """Records requests and replies with queued responses, no network involved."""

    verifies_tls = True

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def queue(self, response):
        self.responses.append(response)

    def send(self, method, url, headers, body):
        self.requests.append({
            "method": method,
            "url": url,
            "headers": list(headers),
            "body": body,
        })
        response = self.responses.pop(0) if self.responses else HttpResponse(200, {}, b"")
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_request(self):
        return self.requests[-1]


class EchoTransport(StubTransport):
    """Answers every call with its own request body, like an echo endpoint."""

    def send(self, method, url, headers, body):
        super().send(method, url, headers, body)
        return HttpResponse(200, {"Content-Type": "application/json"}, body or b"")


def json_response(status, data):
    return HttpResponse(status, {"Content-Type": "application/json"}, json.dumps(data).encode("utf-8"))


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def client(stub_transport):
    return AdminApiClient(SERVICE_URL, ADMIN_KEY, transport=stub_transport, clock=lambda: FIXED_NOW)


@pytest.fixture
def failing_transport():
    return StubTransport(TransportError("Connection error: refused", "CONNECTION_ERROR"))
