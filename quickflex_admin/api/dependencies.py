"""FastAPI dependencies wiring services to the application's database client."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.core.config import Settings, get_settings
from quickflex_admin.core.database import get_async_session
from quickflex_admin.services.driver_service import DriverService
from quickflex_admin.services.profile_service import ProfileService


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


async def get_profile_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ProfileService:
    """Dependency for profile service."""
    return ProfileService(db_session, settings)


async def get_driver_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> DriverService:
    """Dependency for driver service."""
    return DriverService(db_session, settings)
