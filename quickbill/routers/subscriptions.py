from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.crud.subscriptions import (
    get_active_plans_from_db,
    get_user_subscription_from_db,
    subscribe_user_in_db,
)
from quickbill.db import get_db
from quickbill.dependencies.depend import authentication_get_current_user
from quickbill.schemas.auth import CurrentUser
from quickbill.schemas.subscription import PlanOut, UserSubscriptionOut

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.get("/plans", response_model=list[PlanOut])
async def get_plans(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    return await get_active_plans_from_db(db)


@router.get("/me", response_model=UserSubscriptionOut | None)
async def get_my_subscription(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    return await get_user_subscription_from_db(current_user.id, db)


@router.post("/{plan_id}", response_model=UserSubscriptionOut)
async def subscribe(
    plan_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    return await subscribe_user_in_db(current_user.id, plan_id, db)
