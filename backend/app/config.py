from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Finhub API"
    host: str = "0.0.0.0"
    port: int = 3000
    # empty key keeps the app booting; quote/search answer 503 until it is set
    finnhub_api_key: str = ""
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    upstream_timeout_seconds: float = 10.0
    # optional external chat bot; canned replies are used when unset or down
    bot_url: str = ""
    bot_api_key: str = ""
    bot_timeout_seconds: float = 10.0
    # Comma-separated origins for CORS. Use "*" only for demo environments.
    cors_allow_origins: str = "*"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = ""  # "json" or "console"; empty picks by environment

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


settings = Settings()
