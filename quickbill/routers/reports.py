from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.db import get_db
from quickbill.dependencies.depend import authentication_get_current_user
from quickbill.schemas.auth import CurrentUser
from quickbill.schemas.report import Dashboard, ReportPeriod, SalesReport
from quickbill.service.reports import get_dashboard, get_sales_report

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/sales", response_model=SalesReport)
async def sales_report(
    period: ReportPeriod = ReportPeriod.WEEK,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    return await get_sales_report(db, current_user.id, period)


@router.get("/dashboard", response_model=Dashboard)
async def dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    return await get_dashboard(db, current_user.id)
