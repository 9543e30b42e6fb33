"""Repository for background check records."""

from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.database.models import BackgroundCheck
from quickflex_admin.repositories.base_repository import SatelliteRepository


class BackgroundCheckRepository(SatelliteRepository[BackgroundCheck]):
    """Repository for BackgroundCheck model. Checks are only ever appended."""

    recency_field = "check_date"

    def __init__(self, session: AsyncSession):
        super().__init__(session, BackgroundCheck)
