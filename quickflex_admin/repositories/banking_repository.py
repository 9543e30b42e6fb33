"""Repository for banking records."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.database.models import BankingDetails
from quickflex_admin.repositories.base_repository import SatelliteRepository
from quickflex_admin.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BankingRepository(SatelliteRepository[BankingDetails]):
    """Repository for BankingDetails model, upserted by driver."""

    recency_field = "created_at"

    def __init__(self, session: AsyncSession):
        super().__init__(session, BankingDetails)

    async def get_for_driver(self, driver_id: str) -> Optional[BankingDetails]:
        try:
            result = await self.session.execute(
                select(BankingDetails).where(BankingDetails.driver_id == driver_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error getting banking details: {e}",
                extra={"driver_id": driver_id},
                exc_info=True
            )
            raise

    async def upsert(self, driver_id: str, **kwargs) -> BankingDetails:
        """Create or replace the banking details of a driver.

        Args:
            driver_id: Owning driver (natural key)
            **kwargs: Banking fields

        Returns:
            The created or updated BankingDetails
        """
        try:
            existing = await self.get_for_driver(driver_id)

            if existing:
                for key, value in kwargs.items():
                    if hasattr(existing, key):
                        setattr(existing, key, value)
                await self.session.flush()
                await self.session.commit()
                await self.session.refresh(existing)
                return existing

            return await self.create(driver_id=driver_id, **kwargs)
        except SQLAlchemyError as e:
            await self.session.rollback()
            LOGGER.error(
                f"Error upserting banking details: {e}",
                extra={"driver_id": driver_id},
                exc_info=True
            )
            raise
