"""Repository for driver records."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.database.models import Driver
from quickflex_admin.repositories.base_repository import BaseRepository
from quickflex_admin.utils.logging import get_logger

LOGGER = get_logger(__name__)


class DriverRepository(BaseRepository[Driver]):
    """Repository for Driver model.

    Drivers are created by the registration workflow; this service only
    reads them and changes their status.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the driver repository.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__(session, Driver)

    async def list_by_status(self, status: str) -> List[Driver]:
        """Get drivers with the given status, most recently registered first.

        Args:
            status: Exact status value to match

        Returns:
            List of matching drivers
        """
        try:
            query = (
                select(Driver)
                .where(Driver.status == status)
                .order_by(Driver.registration_date.desc(), Driver.driver_id)
            )
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error listing drivers by status: {e}",
                extra={"status": status},
                exc_info=True
            )
            raise

    async def update_status(self, driver_id: str, status: str) -> Optional[Driver]:
        """Set a driver's status.

        Args:
            driver_id: Driver identifier
            status: New status value

        Returns:
            The updated driver, or None when no driver has that identifier
        """
        driver = await self.update(driver_id, status=status)
        if driver:
            LOGGER.info(
                "Driver status updated",
                extra={"driver_id": driver_id, "status": status}
            )
        return driver
