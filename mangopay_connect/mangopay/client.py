"""
Mangopay REST client (API v2.01).

- POST /{version}/oauth/token                    (client credentials)
- /{version}/{client_id}/users|wallets|payins|payouts|transfers ...

Tokens are kept in memory and in the sqlite token store, one per
environment (sandbox | live) and client id.
"""
import time
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
import structlog

from .. import db
from ..utils.http import client, retry_policy
from .schemas import (
    BankAccount,
    MangopayModel,
    Pagination,
    PayInCardWeb,
    PayOutBankWire,
    Transaction,
    TransactionFilter,
    Transfer,
    UserLegal,
    UserNatural,
    Wallet,
)

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=MangopayModel)

# Renew tokens slightly before the API expires them
TOKEN_EXPIRY_MARGIN_SEC = 60


class MangopayApiError(Exception):
    """Non-2xx answer from the Mangopay API."""

    def __init__(self, status_code: int, message: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(f"Mangopay API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or {}


class MangopayNotFoundError(MangopayApiError):
    pass


def _user_from_json(js: Dict[str, Any]):
    if js.get("PersonType") == "LEGAL":
        return UserLegal.model_validate(js)
    return UserNatural.model_validate(js)


class MangopayClient:

    def __init__(
        self,
        client_id: str,
        password: str,
        base_url: str,
        environment: str,
        token_db_file: str,
        api_version: str = "v2.01",
        timeout_sec: int = 15,
        retry_max: int = 4,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self._password = password
        self.base_url = base_url.rstrip("/")
        self.environment = environment
        self.token_db_file = token_db_file
        self.api_version = api_version
        self.timeout_sec = timeout_sec
        self.retry_max = retry_max
        self._transport = transport
        self._token: Optional[Dict[str, Any]] = None
        self._db_ready = False

    # ---- Transport ----
    def _client(self) -> httpx.AsyncClient:
        return client(base_url=self.base_url, timeout_sec=self.timeout_sec, transport=self._transport)

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        async with self._client() as c:
            return await c.request(method, url, **kwargs)

    async def _send_idempotent(self, method: str, url: str, **kwargs) -> httpx.Response:
        @retry_policy(max_attempts=self.retry_max)
        async def _attempt():
            return await self._send(method, url, **kwargs)
        return await _attempt()

    # ---- OAuth ----
    def _valid(self, token: Optional[Dict[str, Any]]) -> bool:
        return bool(token) and token["expires_at"] - TOKEN_EXPIRY_MARGIN_SEC > time.time()

    async def _authorization(self) -> str:
        if not self._db_ready:
            await db.init_db(self.token_db_file)
            self._db_ready = True
        if not self._valid(self._token):
            stored = await db.get_token(self.token_db_file, self.environment, self.client_id)
            if self._valid(stored):
                self._token = stored
            else:
                self._token = await self._request_token()
        return f"{self._token['token_type']} {self._token['access_token']}"

    async def _request_token(self) -> Dict[str, Any]:
        resp = await self._send_idempotent(
            "POST",
            f"/{self.api_version}/oauth/token",
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self._password),
        )
        if resp.status_code >= 400:
            raise self._error(resp)
        js = resp.json()
        token = {
            "access_token": js["access_token"],
            "token_type": js.get("token_type") or "Bearer",
            "expires_at": time.time() + int(js.get("expires_in") or 0),
        }
        await db.save_token(self.token_db_file, self.environment, self.client_id, **token)
        logger.info("mangopay_token_refreshed", environment=self.environment, expires_in=js.get("expires_in"))
        return token

    async def _drop_token(self):
        self._token = None
        await db.delete_token(self.token_db_file, self.environment, self.client_id)

    # ---- Requests ----
    def _error(self, resp: httpx.Response) -> MangopayApiError:
        try:
            js = resp.json()
        except ValueError:
            js = {"Message": resp.text or ""}
        if not isinstance(js, dict):
            js = {"Message": str(js)}
        message = js.get("Message") or js.get("message") or js.get("error") or resp.reason_phrase
        errors = js.get("errors") or js.get("Errors")
        cls = MangopayNotFoundError if resp.status_code == 404 else MangopayApiError
        return cls(resp.status_code, message, errors)

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        pagination: Optional[Pagination] = None,
    ) -> Any:
        url = f"/{self.api_version}/{self.client_id}{path}"
        query = dict(params or {})
        if pagination is not None:
            query.update(pagination.params())

        send = self._send_idempotent if method == "GET" else self._send
        resp = None
        for attempt in range(2):
            headers = {"Authorization": await self._authorization()}
            resp = await send(method, url, json=json, params=query or None, headers=headers)
            if resp.status_code != 401 or attempt:
                break
            # Token revoked or expired early
            await self._drop_token()

        logger.debug("mangopay_request", method=method, path=path, status=resp.status_code)
        if resp.status_code >= 400:
            error = self._error(resp)
            logger.warning("mangopay_request_failed", method=method, path=path,
                           status=resp.status_code, message=error.message)
            raise error

        if pagination is not None:
            pages = resp.headers.get("X-Number-Of-Pages")
            items = resp.headers.get("X-Number-Of-Items")
            pagination.TotalPages = int(pages) if pages is not None else None
            pagination.TotalItems = int(items) if items is not None else None

        return resp.json() if resp.content else None

    async def _list(self, path: str, model: Type[M], pagination: Pagination,
                    params: Optional[Dict[str, Any]] = None) -> List[M]:
        js = await self.request("GET", path, params=params, pagination=pagination)
        return [model.model_validate(item) for item in js or []]

    # ---- Users ----
    async def create_user(self, user):
        kind = "legal" if isinstance(user, UserLegal) else "natural"
        js = await self.request("POST", f"/users/{kind}", json=user.payload())
        return _user_from_json(js)

    async def get_user(self, user_id: str):
        js = await self.request("GET", f"/users/{user_id}")
        return _user_from_json(js)

    async def update_user(self, user_id: str, user):
        kind = "legal" if isinstance(user, UserLegal) else "natural"
        js = await self.request("PUT", f"/users/{kind}/{user_id}", json=user.payload())
        return _user_from_json(js)

    async def get_users(self, pagination: Pagination):
        js = await self.request("GET", "/users", pagination=pagination)
        return [_user_from_json(item) for item in js or []]

    async def get_user_wallets(self, user_id: str, pagination: Pagination) -> List[Wallet]:
        return await self._list(f"/users/{user_id}/wallets", Wallet, pagination)

    async def create_bank_account(self, user_id: str, account: BankAccount) -> BankAccount:
        js = await self.request(
            "POST", f"/users/{user_id}/bankaccounts/{account.Type.lower()}", json=account.payload()
        )
        return BankAccount.model_validate(js)

    async def get_bank_accounts(self, user_id: str, pagination: Pagination) -> List[BankAccount]:
        return await self._list(f"/users/{user_id}/bankaccounts", BankAccount, pagination)

    # ---- Wallets ----
    async def create_wallet(self, wallet: Wallet) -> Wallet:
        js = await self.request("POST", "/wallets", json=wallet.payload())
        return Wallet.model_validate(js)

    async def get_wallet(self, wallet_id: str) -> Wallet:
        js = await self.request("GET", f"/wallets/{wallet_id}")
        return Wallet.model_validate(js)

    async def update_wallet(self, wallet_id: str, wallet: Wallet) -> Wallet:
        js = await self.request("PUT", f"/wallets/{wallet_id}", json=wallet.payload())
        return Wallet.model_validate(js)

    async def get_wallet_transactions(
        self, wallet_id: str, pagination: Pagination, transaction_filter: Optional[TransactionFilter] = None
    ) -> List[Transaction]:
        params = transaction_filter.params() if transaction_filter is not None else None
        return await self._list(f"/wallets/{wallet_id}/transactions", Transaction, pagination, params)

    # ---- Money movements ----
    async def create_transfer(self, transfer: Transfer) -> Transfer:
        js = await self.request("POST", "/transfers", json=transfer.payload())
        return Transfer.model_validate(js)

    async def create_card_web_payin(self, payin: PayInCardWeb) -> PayInCardWeb:
        js = await self.request("POST", "/payins/card/web", json=payin.payload())
        return PayInCardWeb.model_validate(js)

    async def create_bank_wire_payout(self, payout: PayOutBankWire) -> PayOutBankWire:
        js = await self.request("POST", "/payouts/bankwire", json=payout.payload())
        return PayOutBankWire.model_validate(js)
