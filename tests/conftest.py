"""Shared fixtures for the understanding tester test suite"""
from unittest import mock

import pytest
import requests


def _make_response(payload=None, status_code=200, json_error=None):
    """Build a stand-in for `requests.Response` with the given JSON payload / status"""
    response = mock.MagicMock(spec=requests.Response)
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Client Error: Unauthorized for url: https://example.test/models/x"
        )
    else:
        response.raise_for_status.return_value = None
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def mock_post():
    with mock.patch("understanding_tester.model.huggingface.requests.post") as post:
        yield post


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("HF_TOKEN", "HF_TOKEN_SECRET_NAME", "HF_API_URL", "HF_REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def make_response():
    return _make_response
