from typing import Any, Dict

import structlog

from ..exceptions import InvalidArgumentError
from ..mangopay.schemas import BankAccount, Pagination, PayOutBankWire
from .base import BaseService, page_result, require, to_money

logger = structlog.get_logger(__name__)

# type -> (required parameter keys, optional parameter keys)
BANK_ACCOUNT_TYPES = {
    "IBAN": (("iban",), ("bic",)),
    "GB": (("account_number", "sort_code"), ()),
    "US": (("account_number", "aba"), ()),
    "CA": (("account_number", "bank_name", "institution_number", "branch_code"), ()),
    "OTHER": (("account_number", "country", "bic"), ()),
}

BANK_ACCOUNT_FIELDS = {
    "iban": "IBAN",
    "bic": "BIC",
    "account_number": "AccountNumber",
    "sort_code": "SortCode",
    "aba": "ABA",
    "bank_name": "BankName",
    "institution_number": "InstitutionNumber",
    "branch_code": "BranchCode",
    "country": "Country",
}


class PayoutService(BaseService):
    """Adapter to the Mangopay bank accounts and pay-out API."""

    async def create_account(self, user_id: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
        """
        Creates a bank account for a user. Parameter keys:
          - type: IBAN, GB, US, CA, OTHER
          - owner_name, owner_address: required
          - IBAN: iban (required), bic
          - GB: account_number, sort_code
          - US: account_number, aba
          - CA: account_number, bank_name, branch_code, institution_number
          - OTHER: country, account_number, bic
        """
        parameters = parameters or {}
        if parameters.get("type") is None:
            raise InvalidArgumentError("To create bank account please specify its type.")
        require(parameters, ("owner_name", "owner_address"),
                "To create bank account please specify next parameters: owner_name, owner_address.")

        account_type = str(parameters["type"]).upper()
        if account_type not in BANK_ACCOUNT_TYPES:
            raise InvalidArgumentError("Supported bank account types: " + ", ".join(BANK_ACCOUNT_TYPES) + ".")

        required, optional = BANK_ACCOUNT_TYPES[account_type]
        require(parameters, required,
                f"To create {account_type} bank account please specify next parameters: " + ", ".join(required) + ".")

        details = {
            BANK_ACCOUNT_FIELDS[key]: parameters[key]
            for key in required + optional
            if parameters.get(key) is not None
        }
        account = BankAccount(
            Type=account_type,
            OwnerName=parameters["owner_name"],
            OwnerAddress=parameters["owner_address"],
            UserId=str(parameters["user_id"]) if parameters.get("user_id") is not None else None,
            **details,
        )

        account = await self.api.create_bank_account(str(user_id), account)
        logger.info("mangopay_bank_account_created", account_id=account.Id, account_type=account.Type)
        return {"id": account.Id, "type": account.Type}

    async def get_accounts(self, user_id: str, page: int = 1, per_page: int = 100) -> Dict[str, Any]:
        pagination = Pagination(Page=page, ItemsPerPage=per_page)
        accounts = await self.api.get_bank_accounts(str(user_id), pagination)
        extracted = [{"type": a.Type, "id": a.Id} for a in accounts]
        return page_result("accounts", extracted, pagination)

    async def make_payout(
        self,
        user_id: str,
        wallet_id: str,
        bank_account_id: str,
        funds: Dict[str, Any],
        fees: Dict[str, Any],
    ) -> Dict[str, Any]:
        if user_id is None or wallet_id is None or bank_account_id is None:
            raise InvalidArgumentError(
                "To make pay out please specify next parameters: user_id, wallet_id, bank_account_id."
            )

        payout = PayOutBankWire(
            AuthorId=str(user_id),
            DebitedWalletId=str(wallet_id),
            BankAccountId=str(bank_account_id),
            DebitedFunds=to_money(funds, "funds"),
            Fees=to_money(fees, "fees"),
        )
        payout = await self.api.create_bank_wire_payout(payout)
        logger.info("mangopay_payout_created", payout_id=payout.Id, status=payout.Status)
        return {"id": payout.Id, "wallet_id": payout.DebitedWalletId}
