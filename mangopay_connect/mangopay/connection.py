from typing import Optional

import httpx

from ..settings import MangopayCredentials, Settings
from .client import MangopayClient

STATUS_SUCCEEDED = "SUCCEEDED"
STATUS_CREATED = "CREATED"
STATUS_FAILED = "FAILED"

SANDBOX_BASE_URL = "https://api.sandbox.mangopay.com"
LIVE_BASE_URL = "https://api.mangopay.com"


class MangopayConnection:
    """
    Holds the Mangopay API client shared by all services.
    ``sandbox`` picks the base URL and the token cache namespace.
    """

    def __init__(
        self,
        credentials: MangopayCredentials,
        token_db_file: str = "./data/mangopay_tokens.sqlite3",
        sandbox_base_url: str = SANDBOX_BASE_URL,
        live_base_url: str = LIVE_BASE_URL,
        api_version: str = "v2.01",
        timeout_sec: int = 15,
        retry_max: int = 4,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.environment = "sandbox" if credentials.sandbox else "live"
        self.base_url = sandbox_base_url if credentials.sandbox else live_base_url
        self.api = MangopayClient(
            client_id=credentials.client_id,
            password=credentials.password,
            base_url=self.base_url,
            environment=self.environment,
            token_db_file=token_db_file,
            api_version=api_version,
            timeout_sec=timeout_sec,
            retry_max=retry_max,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "MangopayConnection":
        return cls(
            settings.credentials,
            token_db_file=settings.TOKEN_DB_FILE,
            sandbox_base_url=settings.MANGOPAY_SANDBOX_BASE_URL,
            live_base_url=settings.MANGOPAY_LIVE_BASE_URL,
            api_version=settings.MANGOPAY_API_VERSION,
            timeout_sec=settings.MANGOPAY_TIMEOUT_SEC,
            retry_max=settings.MANGOPAY_RETRY_MAX,
        )

    def get_api(self) -> MangopayClient:
        return self.api
