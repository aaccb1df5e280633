"""
User endpoints. Credentials are stored as received; no authentication here.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ticketing.api.deps import get_queries, get_store
from ticketing.schemas.user import UserCreate, UserCreated, UserResponse
from ticketing.services.entity_store import EntityStore
from ticketing.services.query_service import QueryService

router = APIRouter(prefix="/user", tags=["Users"])


@router.post("", response_model=UserCreated)
async def create_user_endpoint(
    user_data: UserCreate,
    store: EntityStore = Depends(get_store),
):
    user = await store.create_user(user_data)
    return UserCreated(id=user.id)


@router.get("", response_model=UserResponse)
async def get_user_endpoint(
    user_id: Optional[int] = Query(None),
    queries: QueryService = Depends(get_queries),
):
    return await queries.get_user(user_id)
