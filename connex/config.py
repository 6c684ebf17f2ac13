from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    default_topology: str = "square"

    # Evaluation
    incremental_evaluation: bool = True
    verify_incremental: bool = False

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CONNEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
