from fastapi import APIRouter, Depends, Query
from typing import Dict, Any, List

from ..dependencies import get_payin_service, get_payout_service
from ..services.payins import PayinService
from ..services.payouts import PayoutService

router = APIRouter()


# ---------- Pay-ins ----------
@router.get("/payins/methods")
async def payin_methods(
    currency: List[str] = Query(...),
    service: PayinService = Depends(get_payin_service),
):
    return service.get_available_payin_methods(currency)


@router.post("/payins")
async def make_payin(body: Dict[str, Any], service: PayinService = Depends(get_payin_service)):
    """
    { "method": "cb_visa_mastercard", "author_id": "...", "wallet_id": "...",
      "funds": {...}, "fees": {...}, "return_url": "...", "culture": "EN", "template_url": "" }
    """
    return await service.make_payin(
        body.get("method"),
        body.get("author_id"),
        body.get("wallet_id"),
        body.get("funds"),
        body.get("fees"),
        body.get("return_url"),
        body.get("culture"),
        body.get("template_url") or "",
    )


# ---------- Bank accounts / pay-outs ----------
@router.post("/users/{user_id}/bank-accounts")
async def create_bank_account(user_id: str, body: Dict[str, Any], service: PayoutService = Depends(get_payout_service)):
    return await service.create_account(user_id, body)


@router.get("/users/{user_id}/bank-accounts")
async def bank_accounts(
    user_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    service: PayoutService = Depends(get_payout_service),
):
    return await service.get_accounts(user_id, page, per_page)


@router.post("/payouts")
async def make_payout(body: Dict[str, Any], service: PayoutService = Depends(get_payout_service)):
    """
    { "user_id": "...", "wallet_id": "...", "bank_account_id": "...", "funds": {...}, "fees": {...} }
    """
    return await service.make_payout(
        body.get("user_id"),
        body.get("wallet_id"),
        body.get("bank_account_id"),
        body.get("funds"),
        body.get("fees"),
    )
