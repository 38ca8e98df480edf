from __future__ import annotations

import pytest
from typer.testing import CliRunner

from tokenlists.app import AppState, app
from tokenlists.config import ConfigRepository, TokenListsSettings
from tokenlists.infra import SQLiteManager


@pytest.fixture
def cli_state(temp_config_repository: ConfigRepository, payloads, monkeypatch: pytest.MonkeyPatch):
    root = temp_config_repository.locator.project_root
    (root / "main.json").write_bytes(payloads.eth_snt_main_list)
    settings = TokenListsSettings(main_list_path="main.json", chains=[1], privacy_mode=True)
    manager = SQLiteManager()
    state = AppState(repository=temp_config_repository, settings=settings, storage=manager)
    monkeypatch.setattr("tokenlists.app.build_state", lambda verbose: state)
    yield state
    manager.close_all()


def test_cli_tokens(cli_state) -> None:
    result = CliRunner().invoke(app, ["tokens"])

    assert result.exit_code == 0, result.output
    assert "Tokens · 2" in result.output
    assert "SNT" in result.output


def test_cli_tokens_filtered_by_chain(cli_state) -> None:
    result = CliRunner().invoke(app, ["tokens", "--chain", "10"])

    assert result.exit_code == 0, result.output
    assert "Tokens · 0" in result.output


def test_cli_lists(cli_state) -> None:
    result = CliRunner().invoke(app, ["lists"])

    assert result.exit_code == 0, result.output
    assert "native" in result.output
    assert "status" in result.output


def test_cli_token_lookup(cli_state, payloads) -> None:
    result = CliRunner().invoke(app, ["token", "1", payloads.snt])

    assert result.exit_code == 0, result.output
    assert "SNT" in result.output
    assert "Cross-chain ID: status" in result.output


def test_cli_token_lookup_unknown(cli_state, payloads) -> None:
    result = CliRunner().invoke(app, ["token", "1", payloads.dai])

    assert result.exit_code == 1


def test_cli_token_lookup_rejects_bad_address(cli_state) -> None:
    result = CliRunner().invoke(app, ["token", "1", "0x1234"])

    assert result.exit_code == 2


def test_cli_refresh_in_private_mode(cli_state) -> None:
    result = CliRunner().invoke(app, ["refresh", "--timeout", "5"])

    assert result.exit_code == 0, result.output
    assert "Snapshot rebuilt: 2 tokens" in result.output


def test_cli_log_show(cli_state) -> None:
    logs_dir = cli_state.repository.locator.logs_dir
    (logs_dir / "tokenlists.log").write_text('{"message": "refresh_worker_started"}\n', encoding="utf-8")

    result = CliRunner().invoke(app, ["log", "show", "--tail", "5"])

    assert result.exit_code == 0, result.output
    assert "refresh_worker_started" in result.output


def test_cli_log_show_empty(cli_state) -> None:
    result = CliRunner().invoke(app, ["log", "show", "--errors"])

    assert result.exit_code == 0, result.output
    assert "No log entries yet." in result.output
