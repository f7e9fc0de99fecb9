"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger boundary settings.

    The desk ships a snapshot-backed dry-run ledger; a chain-backed client
    implements the same LedgerClient interface and reads the same settings.
    """

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    network: str = "mainnet-beta"
    snapshot_path: str = "data/ledger_snapshot.json"


class OrderSettings(BaseSettings):
    """Order construction parameters."""

    model_config = SettingsConfigDict(env_prefix="ORDER_")

    # Off by default: ladder legs keep floor(total / legs) and the remainder is dropped
    redistribute_ladder_remainder: bool = False
    default_sub_account_id: int = 0
    # Open-order slots per subaccount on the exchange
    max_ladder_legs: int = 32


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8080
    # JSON list, e.g. SERVER_CORS_ORIGINS='["http://localhost:3000"]'
    cors_origins: list[str] = []


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    ledger: LedgerSettings = LedgerSettings()
    orders: OrderSettings = OrderSettings()
    server: ServerSettings = ServerSettings()
