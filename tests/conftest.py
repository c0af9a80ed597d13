"""Shared fixtures for bug-bridge tests."""

import io
from unittest.mock import patch

import httpx
import keyring.errors
import pytest
from rich.console import Console

from bug_bridge import config

API_URL = "https://api.github.com"


class ScriptedTerminal:
    """Terminal replaying prepared input; raises EOFError when exhausted."""

    def __init__(self, lines=(), secrets=()):
        self.lines = list(lines)
        self.secrets = list(secrets)
        self.prompts: list[str] = []

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)

    def read_secret(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.secrets:
            raise EOFError
        return self.secrets.pop(0)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the YAML config at a temp dir and drop cached settings."""
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "config.yaml")
    for var in ("API_URL", "TIMEOUT", "OTP_HEADER", "NOTE_PREFIX", "TOKEN"):
        monkeypatch.delenv(f"BUG_BRIDGE_{var}", raising=False)
    config.reset_settings()
    yield tmp_path / "config.yaml"
    config.reset_settings()


@pytest.fixture
def client():
    """HTTP client against the default API URL."""
    with httpx.Client(base_url=API_URL, timeout=5) as c:
        yield c


@pytest.fixture
def console():
    """Console writing into a buffer, read back with console.file.getvalue()."""
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def terminal_cls():
    return ScriptedTerminal


@pytest.fixture
def fake_keyring():
    """In-memory keyring replacing the OS backend."""
    secrets: dict[tuple[str, str], str] = {}

    def set_password(service, key, value):
        secrets[(service, key)] = value

    def get_password(service, key):
        return secrets.get((service, key))

    def delete_password(service, key):
        if (service, key) not in secrets:
            raise keyring.errors.PasswordDeleteError("Not found")
        del secrets[(service, key)]

    with patch("keyring.set_password", side_effect=set_password), patch(
        "keyring.get_password", side_effect=get_password
    ), patch("keyring.delete_password", side_effect=delete_password):
        yield secrets
