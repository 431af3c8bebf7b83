from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.core.config import settings
from quickbill.core.metrics import SUBSCRIPTIONS_DB_OPERATIONS_TOTAL
from quickbill.models.subscription import SubscriptionPlan, UserSubscription
from quickbill.schemas.subscription import PlanOut, UserSubscriptionOut

SERVICE_NAME = settings.SERVICE_NAME


def _count(operation: str, result: str) -> None:
    SUBSCRIPTIONS_DB_OPERATIONS_TOTAL.labels(
        service=SERVICE_NAME,
        operation=operation,
        status=result,
    ).inc()


async def get_active_plans_from_db(db: AsyncSession) -> list[PlanOut]:
    res = await db.execute(
        select(SubscriptionPlan)
        .where(SubscriptionPlan.is_active == True)  # noqa: E712
        .order_by(SubscriptionPlan.price.asc())
    )
    plans = res.scalars().all()
    logger.info("Active subscription plans fetched, count={count}", count=len(plans))
    _count("list_plans", "success")
    return [PlanOut.model_validate(p) for p in plans]


async def _load_subscription(user_id: UUID, db: AsyncSession) -> UserSubscription | None:
    res = await db.execute(
        select(UserSubscription)
        .where(UserSubscription.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def get_user_subscription_from_db(user_id: UUID, db: AsyncSession) -> UserSubscriptionOut | None:
    sub = await _load_subscription(user_id, db)
    logger.info(
        "Subscription lookup for user_id='{user_id}', found={found}",
        user_id=str(user_id),
        found=sub is not None,
    )
    _count("get", "success" if sub else "not_found")
    return UserSubscriptionOut.model_validate(sub) if sub else None


async def subscribe_user_in_db(
    user_id: UUID,
    plan_id: UUID,
    db: AsyncSession,
    now: datetime | None = None,
) -> UserSubscriptionOut:
    logger.info(
        "Attempt to subscribe user_id='{user_id}' to plan_id='{plan_id}'",
        user_id=str(user_id),
        plan_id=str(plan_id),
    )
    plan = await db.scalar(
        select(SubscriptionPlan).where(SubscriptionPlan.id == plan_id, SubscriptionPlan.is_active == True)  # noqa: E712
    )
    if plan is None:
        logger.warning(
            "Subscription plan not found or inactive. plan_id='{plan_id}'",
            plan_id=str(plan_id),
        )
        _count("subscribe", "plan_not_found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription plan not found")

    now = now or datetime.now(timezone.utc)
    expires = now + timedelta(days=settings.SUBSCRIPTION_PERIOD_DAYS)

    sub = await _load_subscription(user_id, db)
    if sub is None:
        sub = UserSubscription(user_id=user_id, plan_id=plan.id, status="active", started_at=now, expires_at=expires)
        db.add(sub)
    else:
        sub.plan_id = plan.id
        sub.status = "active"
        sub.started_at = now
        sub.expires_at = expires
    await db.commit()

    fresh = await _load_subscription(user_id, db)
    logger.info(
        "User subscribed. user_id='{user_id}', plan='{plan}', expires_at={expires}",
        user_id=str(user_id),
        plan=plan.name,
        expires=expires.isoformat(),
    )
    _count("subscribe", "success")
    return UserSubscriptionOut.model_validate(fresh)
