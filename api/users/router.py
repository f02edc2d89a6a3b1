"""
User API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from core.payload import read_payload
from core.store import Store, get_store

from . import schemas, service

router = APIRouter()


@router.get("/api/users")
async def list_users(store: Store = Depends(get_store)) -> list[schemas.UserResponse]:
    return await service.list_users(store.users)


@router.post("/api/users", status_code=status.HTTP_201_CREATED)
async def create_user(request: Request, store: Store = Depends(get_store)) -> schemas.UserResponse:
    """
    Register a user from a JSON body or a form post (`username`).
    """
    payload = await read_payload(request, schemas.CreateUserRequest)
    return await service.register(store.users, payload)
