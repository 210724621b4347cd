import json
import subprocess
from unittest.mock import MagicMock

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep local .env files and runner variables out of the tests."""
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    for name in ("CONFIG_FILE", "GITHUB_OUTPUT", "BRANCH_NAME", "GITHUB_REF_NAME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_response():
    """Build a stand-in for requests.Response."""

    def _make(status_code=200, body=None, text=None):
        response = MagicMock()
        response.status_code = status_code
        if text is None:
            text = json.dumps(body) if body is not None else ""
        response.text = text

        def _json():
            return json.loads(text)

        response.json.side_effect = _json
        return response

    return _make


@pytest.fixture
def completed():
    """Build a subprocess.CompletedProcess result."""

    def _make(returncode=0, stdout="", stderr=""):
        return subprocess.CompletedProcess(["cmd"], returncode, stdout=stdout, stderr=stderr)

    return _make
