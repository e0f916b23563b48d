from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str | None = None

    OPENAI_MODEL_INTENT: str = "gpt-4.1"
    OPENAI_MODEL_REPLY: str = "gpt-4.1-mini"

    OPENAI_TEMPERATURE_INTENT: float = 0.0
    OPENAI_TEMPERATURE_REPLY: float = 0.3

    DATABASE_URL: str = "sqlite:///./bookings.db"
    DATABASE_ECHO: bool = False
    SEED_RESOURCES: bool = True
    RESOURCES_PER_TYPE: int = 4

    HUB_NAME: str = "InnoviaHub"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # unset = proposals never expire
    PENDING_ACTION_TTL_SECONDS: float | None = None
    CONVERSATION_HISTORY_LIMIT: int = 30


settings = Settings()
