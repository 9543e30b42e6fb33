"""Repository for insurance records."""

from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.database.models import Insurance
from quickflex_admin.repositories.base_repository import SatelliteRepository


class InsuranceRepository(SatelliteRepository[Insurance]):
    """Repository for Insurance model. Policies are only ever appended."""

    recency_field = "start_date"

    def __init__(self, session: AsyncSession):
        super().__init__(session, Insurance)
