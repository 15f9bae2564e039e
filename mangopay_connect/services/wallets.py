from typing import Any, Dict, List, Optional

import structlog

from ..exceptions import InvalidArgumentError, NotFoundError
from ..mangopay.client import MangopayNotFoundError
from ..mangopay.connection import STATUS_SUCCEEDED
from ..mangopay.schemas import Pagination, Transaction, TransactionFilter, Transfer, Wallet
from .base import BaseService, money_dict, page_result, to_money

logger = structlog.get_logger(__name__)

TRANSACTION_FILTERS = {
    "direction": "Direction",
    "nature": "Nature",
    "status": "Status",
    "type": "Type",
}


def wallet_dict(wallet: Wallet) -> Dict[str, Any]:
    balance = money_dict(wallet.Balance)
    return {
        "id": wallet.Id,
        "currency": balance["currency"],
        "balance": balance["amount"],
    }


def transaction_dict(transaction: Transaction) -> Dict[str, Any]:
    credited = money_dict(transaction.CreditedFunds)
    debited = money_dict(transaction.DebitedFunds)
    fees = money_dict(transaction.Fees)
    return {
        "id": transaction.Id,
        "author_id": transaction.AuthorId,
        "credited_id": transaction.CreditedUserId,
        "tag": transaction.Tag,
        "created_date": transaction.CreationDate,
        "status": transaction.Status,
        "code": transaction.ResultCode,
        "message": transaction.ResultMessage,
        "type": transaction.Type,
        "nature": transaction.Nature,
        "credited_currency": credited["currency"],
        "credited_amount": credited["amount"],
        "debited_currency": debited["currency"],
        "debited_amount": debited["amount"],
        "fees_currency": fees["currency"],
        "fees_amount": fees["amount"],
    }


class WalletService(BaseService):
    """Adapter to the Mangopay wallets and transfers API."""

    async def create_wallet(
        self, owners: List[str], currency: str, description: str, tag: Optional[str] = None
    ) -> Dict[str, Any]:
        if not owners:
            raise InvalidArgumentError("To create wallet please specify at least one owner.")
        if not currency or not description:
            raise InvalidArgumentError("To create wallet please specify next parameters: currency, description.")

        wallet = Wallet(Owners=[str(o) for o in owners], Currency=currency, Description=description, Tag=tag)
        wallet = await self.api.create_wallet(wallet)
        logger.info("mangopay_wallet_created", wallet_id=wallet.Id, currency=currency)
        return wallet_dict(wallet)

    async def update_wallet(self, wallet_id: str, attributes: Dict[str, Any]) -> Dict[str, Any]:
        """Only description and tag can be updated."""
        if await self._find(wallet_id) is None:
            raise NotFoundError(f"Wallet with id {wallet_id} not found in Mangopay")

        attributes = attributes or {}
        changes = Wallet(Description=attributes.get("description"), Tag=attributes.get("tag"))
        wallet = await self.api.update_wallet(str(wallet_id), changes)
        return wallet_dict(wallet)

    async def get_wallet(self, wallet_id: str) -> Optional[Dict[str, Any]]:
        """Returns id, currency and balance, or None when the wallet does not exist."""
        wallet = await self._find(wallet_id)
        return wallet_dict(wallet) if wallet is not None else None

    async def get_transactions(
        self,
        wallet_id: str,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        per_page: int = 100,
    ) -> Dict[str, Any]:
        """
        Transactions of a wallet. Filters: direction, nature, status, type.
        Result keys: transactions, total_items, total_pages, current_page, items_per_page.
        """
        pagination = Pagination(Page=page, ItemsPerPage=per_page)

        filters = filters or {}
        values = {field: filters[key] for key, field in TRANSACTION_FILTERS.items() if filters.get(key) is not None}
        transaction_filter = TransactionFilter(**values) if values else None

        transactions = await self.api.get_wallet_transactions(str(wallet_id), pagination, transaction_filter)
        return page_result("transactions", [transaction_dict(t) for t in transactions], pagination)

    async def get_user_wallets(self, user_id: str, page: int = 1, per_page: int = 100) -> Dict[str, Any]:
        pagination = Pagination(Page=page, ItemsPerPage=per_page)
        wallets = await self.api.get_user_wallets(str(user_id), pagination)
        return page_result("wallets", [wallet_dict(w) for w in wallets], pagination)

    async def transfer(
        self,
        author_id: str,
        from_wallet_id: str,
        to_wallet_id: str,
        funds: Dict[str, Any],
        fees: Dict[str, Any],
    ) -> bool:
        """Moves money between two wallets; True when the transfer succeeded."""
        if author_id is None or from_wallet_id is None or to_wallet_id is None:
            raise InvalidArgumentError(
                "To make transfer please specify next parameters: author_id, from_wallet_id, to_wallet_id."
            )

        transfer = Transfer(
            AuthorId=str(author_id),
            DebitedWalletId=str(from_wallet_id),
            CreditedWalletId=str(to_wallet_id),
            DebitedFunds=to_money(funds, "funds"),
            Fees=to_money(fees, "fees"),
        )
        transfer = await self.api.create_transfer(transfer)
        logger.info("mangopay_transfer_created", transfer_id=transfer.Id, status=transfer.Status)
        return transfer.Status == STATUS_SUCCEEDED

    async def _find(self, wallet_id: str) -> Optional[Wallet]:
        try:
            return await self.api.get_wallet(str(wallet_id))
        except MangopayNotFoundError:
            return None
