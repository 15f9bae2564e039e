from fastapi import APIRouter, Depends, Query
from typing import Dict, Any

from ..dependencies import get_user_service
from ..services.users import UserService

router = APIRouter()


@router.post("/users/persons")
async def create_person(body: Dict[str, Any], service: UserService = Depends(get_user_service)):
    return {"id": await service.create_person(body)}


@router.put("/users/persons/{user_id}")
async def update_person(user_id: str, body: Dict[str, Any], service: UserService = Depends(get_user_service)):
    return {"id": await service.update_person(user_id, body)}


@router.post("/users/companies")
async def create_company(body: Dict[str, Any], service: UserService = Depends(get_user_service)):
    return {"id": await service.create_company(body)}


@router.put("/users/companies/{user_id}")
async def update_company(user_id: str, body: Dict[str, Any], service: UserService = Depends(get_user_service)):
    return {"id": await service.update_company(user_id, body)}


@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    service: UserService = Depends(get_user_service),
):
    return await service.get_all_users(page, per_page)
