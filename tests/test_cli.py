"""
Tests for the command line entry point
"""

import importlib
import json
from unittest.mock import AsyncMock

import pytest

from cli.main import build_parser, main

cli_main = importlib.import_module("cli.main")

ENV_VARS = [
    "UIPATH_AUTH_DOMAIN",
    "UIPATH_AUTH_PORT",
    "UIPATH_AUTH_DIR",
    "UIPATH_ENV_FILE",
    "UIPATH_BEARER_TOKEN",
    "OTHER",
]


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    # Registered with monkeypatch so values loaded from .env are removed afterwards
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestParser:
    def test_domain_shorthand(self):
        args = build_parser().parse_args(["--alpha", "--port", "8055"])
        assert args.domain_shorthand == "alpha"
        assert args.port == 8055

    def test_shorthands_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--alpha", "--staging"])

    def test_unknown_domain_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--domain", "moon"])


class TestMain:
    def test_status_without_login(self, workdir, capsys):
        main(["--status"])
        output = capsys.readouterr().out
        assert "Logged In" in output
        assert "No" in output

    def test_logout_clears_credentials(self, workdir, capsys):
        auth_dir = workdir / ".uipath"
        auth_dir.mkdir()
        (auth_dir / ".auth.json").write_text(json.dumps({"accessToken": "x"}))
        (workdir / ".env").write_text("OTHER=1\nUIPATH_BEARER_TOKEN=x\n")

        main(["--logout"])

        assert not (auth_dir / ".auth.json").exists()
        assert (workdir / ".env").read_text() == "OTHER=1\n"
        assert "Successfully logged out" in capsys.readouterr().out

    def test_conflicting_domain_flags_exit(self, workdir):
        with pytest.raises(SystemExit):
            main(["--domain", "cloud", "--alpha"])

    def test_failed_login_exits_nonzero(self, workdir, monkeypatch):
        handle_login = AsyncMock(return_value=False)
        monkeypatch.setattr(cli_main, "handle_login", handle_login)

        with pytest.raises(SystemExit) as exc_info:
            main(["--staging", "--force"])

        assert exc_info.value.code == 1
        orchestrator = handle_login.await_args.args[0]
        assert orchestrator.settings.domain == "staging"
        assert handle_login.await_args.kwargs["force"] is True

    def test_successful_login_returns(self, workdir, monkeypatch):
        monkeypatch.setattr(cli_main, "handle_login", AsyncMock(return_value=True))
        main(["--no-folder"])
