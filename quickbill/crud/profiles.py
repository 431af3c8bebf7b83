from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quickbill.models.profile import Profile
from quickbill.schemas.profile import ProfileIn, ProfileOut


async def get_profile_from_db(user_id: UUID, db: AsyncSession) -> ProfileOut:
    profile = await db.scalar(select(Profile).where(Profile.user_id == user_id))
    if profile is None:
        return ProfileOut(user_id=user_id)
    return ProfileOut.model_validate(profile)


async def upsert_profile_in_db(user_id: UUID, data: ProfileIn, db: AsyncSession) -> ProfileOut:
    profile = await db.scalar(select(Profile).where(Profile.user_id == user_id))
    changes = data.model_dump(exclude_unset=True)
    if profile is None:
        profile = Profile(user_id=user_id, **changes)
        db.add(profile)
    else:
        for field, value in changes.items():
            setattr(profile, field, value)
    await db.commit()
    await db.refresh(profile)
    logger.info(
        "Profile saved for user_id='{user_id}', fields={fields}",
        user_id=str(user_id),
        fields=list(changes.keys()),
    )
    return ProfileOut.model_validate(profile)
