from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import InvalidArgumentError
from ..mangopay.client import MangopayClient
from ..mangopay.connection import MangopayConnection
from ..mangopay.schemas import Money, Pagination


def missing(values: Optional[Dict[str, Any]], keys: Iterable[str]) -> List[str]:
    values = values or {}
    return [k for k in keys if values.get(k) is None]


def require(values: Optional[Dict[str, Any]], keys: Iterable[str], message: str) -> None:
    if missing(values, keys):
        raise InvalidArgumentError(message)


def to_money(value: Any, name: str) -> Money:
    if not isinstance(value, dict) or missing(value, ("amount", "currency")):
        raise InvalidArgumentError(f"{name} must contain amount and currency.")
    return Money(Amount=minor_units(value["amount"], name), Currency=str(value["currency"]))


def minor_units(amount: Any, name: str) -> int:
    """Amounts are integer cents; fractional or non-numeric values are rejected, never rounded."""
    if isinstance(amount, bool):
        amount = None
    elif isinstance(amount, str):
        try:
            amount = float(amount.strip())
        except ValueError:
            amount = None
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    if not isinstance(amount, int):
        raise InvalidArgumentError(f"{name} amount must be an integer number of minor units.")
    return amount


def money_dict(money: Optional[Money]) -> Dict[str, Any]:
    money = money or Money()
    return {"currency": money.Currency, "amount": money.Amount}


def page_result(key: str, items: List[Dict[str, Any]], pagination: Pagination) -> Dict[str, Any]:
    return {
        key: items,
        "total_items": pagination.TotalItems,
        "total_pages": pagination.TotalPages,
        "current_page": pagination.Page,
        "items_per_page": pagination.ItemsPerPage,
    }


class BaseService:

    def __init__(self, connection: MangopayConnection):
        self.connection = connection

    @property
    def api(self) -> MangopayClient:
        return self.connection.get_api()
