"""Tests for environment-driven settings."""

from desk.config import AppSettings, LedgerSettings, OrderSettings, ServerSettings


def test_defaults(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    settings = AppSettings()

    assert settings.log_level == "INFO"
    assert settings.ledger.network == "mainnet-beta"
    assert settings.orders.redistribute_ladder_remainder is False
    assert settings.orders.default_sub_account_id == 0
    assert settings.orders.max_ladder_legs == 32
    assert settings.server.port == 8080


def test_prefixed_env(monkeypatch) -> None:
    monkeypatch.setenv("ORDER_REDISTRIBUTE_LADDER_REMAINDER", "true")
    monkeypatch.setenv("ORDER_DEFAULT_SUB_ACCOUNT_ID", "3")
    monkeypatch.setenv("ORDER_MAX_LADDER_LEGS", "8")
    monkeypatch.setenv("LEDGER_SNAPSHOT_PATH", "/tmp/snap.json")
    monkeypatch.setenv("SERVER_PORT", "9000")

    assert OrderSettings().redistribute_ladder_remainder is True
    assert OrderSettings().default_sub_account_id == 3
    assert OrderSettings().max_ladder_legs == 8
    assert LedgerSettings().snapshot_path == "/tmp/snap.json"
    assert ServerSettings().port == 9000


def test_nested_env(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ORDERS__REDISTRIBUTE_LADDER_REMAINDER", "1")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = AppSettings()

    assert settings.orders.redistribute_ladder_remainder is True
    assert settings.log_level == "DEBUG"


def test_dotenv_file(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("LEDGER__NETWORK=devnet\n", encoding="utf-8")

    assert AppSettings().ledger.network == "devnet"


def test_cors_origins_from_json_env(monkeypatch) -> None:
    monkeypatch.setenv("SERVER_CORS_ORIGINS", '["http://localhost:3000"]')
    assert ServerSettings().cors_origins == ["http://localhost:3000"]
