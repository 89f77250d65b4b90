from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Storage settings
    DATABASE_URL: str = "postgresql://localhost:5432/charts"
    REDIS_URL: str = "redis://localhost:6379/0"

    # =================================================================
    # DATABASE POOL SETTINGS
    # =================================================================
    DB_POOL_MIN_SIZE: int = 3
    DB_POOL_MAX_SIZE: int = 12
    DB_POOL_TIMEOUT: float = 30.0
    DB_POOL_MAX_IDLE: float = 600.0  # 10 minutes
    DB_POOL_MAX_LIFETIME: float = 3600.0  # 1 hour

    # =================================================================
    # TRENDING / CHARTS SETTINGS
    # =================================================================
    TRENDING_DEFAULT_LIMIT: int = 50
    TRENDING_DEFAULT_WINDOW_DAYS: int = 7
    GLOBAL_TRENDING_DEFAULT_WINDOW_DAYS: int = 365

    # Chart candidate pool is wider than any requested page so that
    # position/peak/weeksOn lookups see the full ranked context.
    CHART_CANDIDATE_WINDOW_DAYS: int = 365
    CHART_CANDIDATE_POOL_SIZE: int = 200
    CHART_HISTORY_WEEKS: int = 12
    CHART_SNAPSHOT_INTERVAL_HOURS: int = 24

    NOTIFIER_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_db_pool_config(self) -> dict:
        """
        Get database pool configuration.
        Adjust environment-specific settings based on self.environment.
        """
        config = {
            "min_size": self.DB_POOL_MIN_SIZE,
            "max_size": self.DB_POOL_MAX_SIZE,
            "timeout": self.DB_POOL_TIMEOUT,
            "max_idle": self.DB_POOL_MAX_IDLE,
            "max_lifetime": self.DB_POOL_MAX_LIFETIME,
        }

        if self.environment == "development":
            # Smaller pool for local development
            config.update(
                {
                    "min_size": 2,
                    "max_size": 6,
                    "timeout": 15.0,
                }
            )

        return config


settings = Settings()
