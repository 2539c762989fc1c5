import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password, verify_password
from app.models.user import User, UserCreate

logger = logging.getLogger(__name__)


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, data: UserCreate) -> User | None:
    """Returns None if the username is taken."""
    if await get_user_by_username(session, data.username):
        return None
    user = User(username=data.username, hashed_password=hash_password(data.password))
    session.add(user)
    await session.flush()
    await session.refresh(user)
    logger.info("User %s created", user.username)
    return user


async def authenticate(session: AsyncSession, username: str, password: str) -> User | None:
    user = await get_user_by_username(session, username)
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed login for %s", username)
        return None
    return user
