from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.core.security import decode_access_token
from app.core.timezone import TimeZone, ZoneLike
from app.models.user import User
from app.services.appointment_service import AppointmentManager
from app.services.lookup_service import ReferenceDirectory

security = HTTPBearer(auto_error=False)


async def get_current_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        uid = int(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = await session.get(User, uid)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_display_zone() -> ZoneLike:
    """Zone used for every timestamp shown to a client. Overridable in tests."""
    return TimeZone.LOCAL


async def get_reference_directory(session: AsyncSession = Depends(get_session)) -> ReferenceDirectory:
    return await ReferenceDirectory.load(session)


async def get_appointment_manager(
    session: AsyncSession = Depends(get_session),
    zone: ZoneLike = Depends(get_display_zone),
) -> AppointmentManager:
    return AppointmentManager(session, zone)
