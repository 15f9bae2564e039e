from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class MangopayCredentials(BaseModel):
    client_id: str
    password: str
    sandbox: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "MangopayConnect"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Mangopay credentials
    MANGOPAY_CLIENT_ID: str
    MANGOPAY_PASSWORD: str
    MANGOPAY_SANDBOX: bool = False

    MANGOPAY_API_VERSION: str = "v2.01"
    MANGOPAY_SANDBOX_BASE_URL: str = "https://api.sandbox.mangopay.com"
    MANGOPAY_LIVE_BASE_URL: str = "https://api.mangopay.com"
    MANGOPAY_TIMEOUT_SEC: int = 15
    MANGOPAY_RETRY_MAX: int = 4

    # OAuth token cache
    TOKEN_DB_FILE: str = "./data/mangopay_tokens.sqlite3"

    @property
    def credentials(self) -> MangopayCredentials:
        return MangopayCredentials(
            client_id=self.MANGOPAY_CLIENT_ID,
            password=self.MANGOPAY_PASSWORD,
            sandbox=self.MANGOPAY_SANDBOX,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
