"""Tests for configuration and server bootstrap."""

import os
import stat
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

import opal.server
from opal.config import Settings, load_selectors, settings
from opal.errors import StoreError
from opal.server import bootstrap_store, main, not_initialized
from opal.store import FileAuthStore


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("OPAL_AUTH_FILE", raising=False)
    monkeypatch.setenv("HOME", "/home/rider")

    s = Settings(_env_file=None)

    assert s.opal_base_url == "https://www.opal.com.au"
    assert s.resolved_auth_file() == Path("/home/rider/.opal")
    assert s.save_after_login is False
    assert s.mcp_transport == "stdio"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("OPAL_AUTH_FILE", "/srv/opal/auth.json")
    monkeypatch.setenv("OPAL_PASSWORD", "hunter2")

    s = Settings(_env_file=None)

    assert s.resolved_auth_file() == Path("/srv/opal/auth.json")
    assert s.opal_password.get_secret_value() == "hunter2"
    assert "hunter2" not in repr(s)


def test_selectors_cover_every_page():
    selectors = load_selectors()

    assert {"login", "overview", "activity"} <= set(selectors)
    assert selectors["login"]["token_input"]


def test_bootstrap_creates_owner_only_file(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "opal_username", "rider")
    monkeypatch.setattr(settings, "opal_password", SecretStr("s3cret"))
    store = FileAuthStore(tmp_path / "auth.json")

    bootstrap_store(store)

    assert stat.S_IMODE(os.stat(store.path).st_mode) == 0o600
    record = store.load()
    assert record.username == "rider"
    assert record.password.get_secret_value() == "s3cret"
    assert record.cookies == []


def test_bootstrap_keeps_existing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "opal_username", "someone-else")
    monkeypatch.setattr(settings, "opal_password", SecretStr("other"))
    path = tmp_path / "auth.json"
    path.write_text("existing")

    bootstrap_store(FileAuthStore(path))

    assert path.read_text() == "existing"


def test_bootstrap_without_credentials(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "opal_username", None)
    monkeypatch.setattr(settings, "opal_password", None)

    with pytest.raises(StoreError):
        bootstrap_store(FileAuthStore(tmp_path / "auth.json"))


def test_not_initialized_response():
    response = not_initialized()

    assert response["status"] == "error"
    assert response["error"] == {
        "message": "Server not initialized",
        "type": "INITIALIZATION_ERROR",
    }
    assert "fetched_at" in response["metadata"]


def test_main_runs_stdio_by_default(monkeypatch):
    run = MagicMock()
    monkeypatch.setattr(opal.server.mcp, "run", run)
    monkeypatch.setattr(settings, "mcp_transport", "stdio")

    main()

    run.assert_called_once_with()


def test_main_passes_host_and_port_to_http_transport(monkeypatch):
    run = MagicMock()
    monkeypatch.setattr(opal.server.mcp, "run", run)
    monkeypatch.setattr(settings, "mcp_transport", "http")
    monkeypatch.setattr(settings, "mcp_host", "0.0.0.0")
    monkeypatch.setattr(settings, "mcp_port", 9100)

    main()

    run.assert_called_once_with(transport="http", host="0.0.0.0", port=9100)
