from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel

from ..exceptions import InvalidArgumentError
from ..mangopay.schemas import PayInCardWeb
from .base import BaseService, money_dict, to_money

logger = structlog.get_logger(__name__)

PAYIN_TYPE_CARD = "CARD"
PAYIN_TYPE_DIRECT = "DIRECT_DEBIT"
EXECUTION_TYPE_WEB = "WEB"


class PayinMethod(BaseModel):
    name: str
    currency: Optional[str] = None          # None: any currency
    type: str
    card_type: Optional[str] = None
    direct_type: Optional[str] = None
    template_url_key: str = ""


PAYIN_METHODS: Dict[str, PayinMethod] = {
    "cb_visa_mastercard": PayinMethod(
        name="CB/Visa/Mastercard", type=PAYIN_TYPE_CARD, card_type="CB_VISA_MASTERCARD", template_url_key="PAYLINE",
    ),
    "maestro": PayinMethod(name="Maestro", currency="EUR", type=PAYIN_TYPE_CARD, card_type="MAESTRO"),
    "diners": PayinMethod(name="Diners", currency="EUR", type=PAYIN_TYPE_CARD, card_type="DINERS"),
    "master_pass": PayinMethod(name="MasterPass", type=PAYIN_TYPE_CARD, card_type="MASTERPASS"),
    "sofort": PayinMethod(name="Sofort", currency="EUR", type=PAYIN_TYPE_DIRECT, direct_type="SOFORT"),
    "elv": PayinMethod(name="ELV", currency="EUR", type=PAYIN_TYPE_DIRECT, direct_type="ELV"),
    "giropay": PayinMethod(name="Giropay", currency="EUR", type=PAYIN_TYPE_DIRECT, direct_type="GIROPAY"),
}


class PayinService(BaseService):
    """Adapter to the Mangopay web pay-in API."""

    def get_available_payin_methods(self, currencies: List[str]) -> Dict[str, Dict[str, Dict[str, Any]]]:
        methods = {}
        for currency in currencies:
            methods[currency] = {
                key: method.model_dump()
                for key, method in PAYIN_METHODS.items()
                # direct debit has no web execution
                if method.type == PAYIN_TYPE_CARD and method.currency in (None, currency)
            }
        return methods

    async def make_payin(
        self,
        method_name: str,
        author_id: str,
        wallet_id: str,
        funds: Dict[str, Any],
        fees: Dict[str, Any],
        return_url: str,
        culture: str,
        template_url: str = "",
    ) -> Dict[str, Any]:
        """
        Creates a web card pay-in crediting ``wallet_id``.
        The payer must be redirected to ``redirect_url`` of the result.
        """
        method = PAYIN_METHODS.get(method_name)
        if method is None:
            raise InvalidArgumentError(f"Method {method_name} not found.")
        if method.type != PAYIN_TYPE_CARD:
            raise InvalidArgumentError(f"Method {method_name} can not be used for web pay in.")
        if author_id is None or wallet_id is None or not return_url or not culture:
            raise InvalidArgumentError(
                "To make pay in please specify next parameters: author_id, wallet_id, return_url, culture."
            )

        payin = PayInCardWeb(
            AuthorId=str(author_id),
            CreditedWalletId=str(wallet_id),
            DebitedFunds=to_money(funds, "funds"),
            Fees=to_money(fees, "fees"),
            CardType=method.card_type,
            Culture=culture,
            ReturnURL=return_url,
        )
        if template_url:
            if method.template_url_key:
                payin.TemplateURLOptions = {method.template_url_key: template_url}
            else:
                payin.TemplateURL = template_url

        payin = await self.api.create_card_web_payin(payin)
        logger.info("mangopay_payin_created", payin_id=payin.Id, method=method_name, status=payin.Status)

        return {
            "funds": money_dict(payin.CreditedFunds),
            "wallet_id": payin.CreditedWalletId,
            "redirect_url": payin.RedirectURL,
            "template_url": payin.TemplateURLOptions if method.template_url_key else payin.TemplateURL,
            "return_url": payin.ReturnURL,
        }
