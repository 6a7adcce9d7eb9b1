from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    STORE_DATA_FILE: str = "./data/appointments.json"
    PARTICIPANTS_FILE: str | None = None

    CONFLICT_WINDOW_MINUTES: int = 60
    STRICT_STATUS_TRANSITIONS: bool = False

    CLEANUP_ENABLED: bool = True
    CLEANUP_INTERVAL_SECONDS: float = 3600.0


settings = Settings()
