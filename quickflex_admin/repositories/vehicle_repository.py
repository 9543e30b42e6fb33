"""Repository for vehicle records."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.database.models import Vehicle
from quickflex_admin.repositories.base_repository import SatelliteRepository
from quickflex_admin.utils.logging import get_logger

LOGGER = get_logger(__name__)


class VehicleRepository(SatelliteRepository[Vehicle]):
    """Repository for Vehicle model, upserted by VIN."""

    recency_field = "inspection_date"

    def __init__(self, session: AsyncSession):
        super().__init__(session, Vehicle)

    async def get_by_vin(self, vin: str) -> Optional[Vehicle]:
        """Get a vehicle by its VIN.

        Args:
            vin: Vehicle identification number

        Returns:
            Vehicle if found, None otherwise
        """
        try:
            result = await self.session.execute(select(Vehicle).where(Vehicle.vin == vin))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error getting vehicle by VIN: {e}",
                extra={"vin": vin},
                exc_info=True
            )
            raise

    async def upsert(self, driver_id: str, vin: str, **kwargs) -> Vehicle:
        """Create or update the vehicle with the given VIN.

        An existing vehicle keeps its row and takes the submitted values,
        including the submitting driver as owner.

        Args:
            driver_id: Owning driver
            vin: Vehicle identification number (natural key)
            **kwargs: Remaining vehicle fields

        Returns:
            The created or updated Vehicle
        """
        try:
            existing = await self.get_by_vin(vin)

            if existing:
                existing.driver_id = driver_id
                for key, value in kwargs.items():
                    if hasattr(existing, key):
                        setattr(existing, key, value)
                await self.session.flush()
                await self.session.commit()
                await self.session.refresh(existing)
                LOGGER.info("Vehicle updated", extra={"driver_id": driver_id, "vin": vin})
                return existing

            vehicle = await self.create(driver_id=driver_id, vin=vin, **kwargs)
            LOGGER.info("Vehicle created", extra={"driver_id": driver_id, "vin": vin})
            return vehicle
        except SQLAlchemyError as e:
            await self.session.rollback()
            LOGGER.error(
                f"Error upserting vehicle: {e}",
                extra={"driver_id": driver_id, "vin": vin},
                exc_info=True
            )
            raise
