from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    API_BASE_URL: str = "http://localhost:5000/api"
    API_TIMEOUT_SECONDS: float = 30.0
    API_RETRY_ATTEMPTS: int = 3
    API_RETRY_DELAY_SECONDS: float = 1.0
    USE_MOCK_API: bool = False

    EXECUTOR_MAX_RETRIES: int = 3

    AUTH_TOKEN_KEY: str = "janaseva_token"
    TOKEN_STORE_PATH: str = "./data/auth.json"

    BOOKINGS_ROUTE: str = "/my-bookings"
    BOOKING_SLOT_INTERVAL_MINUTES: int = 30


settings = Settings()
