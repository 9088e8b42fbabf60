"""Application configuration with environment variable support.

All settings can be overridden via environment variables prefixed with ``FEATUREFLOW_``,
or via a ``.env`` file in the project root.

Examples::

    FEATUREFLOW_PORT=9000 featureflow start
    FEATUREFLOW_DATA_DIR=/var/data/featureflow featureflow start
    FEATUREFLOW_API_URL=http://board.local:8000 featureflow features --app ios
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root: two levels up from this file (backend/app/config.py -> featureflow/)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """FeatureFlow configuration, every value overridable via env vars."""

    model_config = SettingsConfigDict(
        env_prefix="FEATUREFLOW_",
        env_file=str(_BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Paths
    data_dir: Path = _BASE_DIR / "data"

    # Logging
    log_level: str = "INFO"

    # Seed a handful of sample features into an empty board on startup
    seed_demo_data: bool = True

    # Client side: where the board lives and who is voting
    api_url: str = "http://localhost:8000"
    app_id: str = "default"
    user_id: str = "local-user"
    request_timeout: float = 10.0

    @property
    def db_path(self) -> Path:
        return self.data_dir / "featureflow.db"

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.db_path}"


# Singleton instance, import this everywhere
settings = Settings()
