from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Dict, Any, Optional

from ..dependencies import get_wallet_service
from ..services.wallets import WalletService

router = APIRouter()


@router.post("/wallets")
async def create_wallet(body: Dict[str, Any], service: WalletService = Depends(get_wallet_service)):
    """
    { "owners": ["<user id>", ...], "currency": "EUR", "description": "...", "tag": "..." }
    """
    return await service.create_wallet(
        body.get("owners") or [],
        body.get("currency"),
        body.get("description"),
        body.get("tag"),
    )


@router.get("/wallets/{wallet_id}")
async def get_wallet(wallet_id: str, service: WalletService = Depends(get_wallet_service)):
    wallet = await service.get_wallet(wallet_id)
    if wallet is None:
        raise HTTPException(status_code=404, detail="Wallet not found")
    return wallet


@router.put("/wallets/{wallet_id}")
async def update_wallet(wallet_id: str, body: Dict[str, Any], service: WalletService = Depends(get_wallet_service)):
    return await service.update_wallet(wallet_id, body)


@router.get("/wallets/{wallet_id}/transactions")
async def wallet_transactions(
    wallet_id: str,
    direction: Optional[str] = None,
    nature: Optional[str] = None,
    status: Optional[str] = None,
    transaction_type: Optional[str] = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    service: WalletService = Depends(get_wallet_service),
):
    filters = {"direction": direction, "nature": nature, "status": status, "type": transaction_type}
    return await service.get_transactions(wallet_id, filters, page, per_page)


@router.get("/users/{user_id}/wallets")
async def user_wallets(
    user_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    service: WalletService = Depends(get_wallet_service),
):
    return await service.get_user_wallets(user_id, page, per_page)


@router.post("/transfers")
async def transfer(body: Dict[str, Any], service: WalletService = Depends(get_wallet_service)):
    """
    { "author_id": "...", "from_wallet_id": "...", "to_wallet_id": "...",
      "funds": {"amount": 1000, "currency": "EUR"}, "fees": {"amount": 0, "currency": "EUR"} }
    """
    succeeded = await service.transfer(
        body.get("author_id"),
        body.get("from_wallet_id"),
        body.get("to_wallet_id"),
        body.get("funds"),
        body.get("fees"),
    )
    return {"succeeded": succeeded}
