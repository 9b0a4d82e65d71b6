from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    API_BASE_URL: str | None = None
    REQUEST_TIMEOUT_SECONDS: float = 15.0

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SESSION_STORE_PATH: str = "./data/session.json"

    BOOKING_TYPE: int = 0
    BOOKING_PAYMENT_MODE: str = "deferred"  # "deferred" | "immediate"
    DEFAULT_BOOKING_HOURS: int = 2
    DEFAULT_PAYMENT_ADDRESS: str = "Trực tuyến"

    # Matched case-insensitively against checkout page URLs.
    PAYMENT_SUCCESS_MARKERS: tuple[str, ...] = ("status=paid", "success")
    PAYMENT_FAILURE_MARKERS: tuple[str, ...] = (
        "status=cancelled",
        "status=canceled",
        "cancel",
        "fail",
        "error",
    )


settings = Settings()
