from functools import lru_cache

from fastapi import Depends

from .mangopay.connection import MangopayConnection
from .services.payins import PayinService
from .services.payouts import PayoutService
from .services.users import UserService
from .services.wallets import WalletService
from .settings import get_settings


@lru_cache
def get_connection() -> MangopayConnection:
    # One connection per process keeps the in-memory token warm
    return MangopayConnection.from_settings(get_settings())


def get_user_service(connection: MangopayConnection = Depends(get_connection)) -> UserService:
    return UserService(connection)


def get_wallet_service(connection: MangopayConnection = Depends(get_connection)) -> WalletService:
    return WalletService(connection)


def get_payin_service(connection: MangopayConnection = Depends(get_connection)) -> PayinService:
    return PayinService(connection)


def get_payout_service(connection: MangopayConnection = Depends(get_connection)) -> PayoutService:
    return PayoutService(connection)
