from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the Accounts API client and example app.

    Notes
    -----
    - Every field can be overridden with an `ACCOUNTS_`-prefixed environment
      variable (e.g. `ACCOUNTS_APP_SECRET`) or a `.env` file.
    - Durations are expressed in seconds.
    """

    base_url: str = "https://accounts.bludood.com"
    app_id: str = ""
    app_secret: str = ""
    # how long fetched users stay fresh in the per-client cache
    cache_timeout: float = 5 * 60
    request_timeout: float = 20.0
    # used by the example app's /login endpoint
    redirect_uri: str = "http://localhost:8000/callback"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="ACCOUNTS_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
