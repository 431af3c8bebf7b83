from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.crud.profiles import get_profile_from_db, upsert_profile_in_db
from quickbill.db import get_db
from quickbill.dependencies.depend import authentication_get_current_user
from quickbill.schemas.auth import CurrentUser
from quickbill.schemas.profile import ProfileIn, ProfileOut

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileOut)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    return await get_profile_from_db(current_user.id, db)


@router.put("", response_model=ProfileOut)
async def put_profile(
    data: ProfileIn,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(authentication_get_current_user),
):
    return await upsert_profile_in_db(current_user.id, data, db)
