"""Shared fixtures: canned chart payloads and a fake HTTP session."""

import pytest
import requests


def make_payload(timestamps, closes, current=102.0, previous=100.0):
    return {
        "chart": {
            "result": [{
                "meta": {"regularMarketPrice": current, "chartPreviousClose": previous},
                "timestamp": timestamps,
                "indicators": {"quote": [{"close": closes}]},
            }],
            "error": None,
        }
    }


class FakeResponse:
    def __init__(self, payload=None, status=200, body_error=None):
        self.payload = payload
        self.status_code = status
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.body_error is not None:
            raise self.body_error
        return self.payload


class FakeSession:
    """Records requested URLs and replays one response (or raises one error)."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def payload():
    return make_payload([1, 2, 3], [100.0, None, 102.0])
