"""Repository assembling driver profiles from the latest satellite records.

Each satellite table (vehicles, background checks, insurance, banking) is
reduced independently to at most one row per driver with a
``ROW_NUMBER() OVER (PARTITION BY driver_id ...)`` window, and only the
rank-1 rows are outer-joined to ``drivers``. Satellite tables are never
joined to each other, so a driver with several records of one or more kinds
still yields a single row, and a driver with no records at all still
yields one row with empty satellite columns.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import Select, and_, case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from quickflex_admin.database.models import (
    BackgroundCheck,
    BankingDetails,
    Driver,
    Insurance,
    Vehicle,
)
from quickflex_admin.utils.logging import get_logger

LOGGER = get_logger(__name__)

# (model, recency column) per satellite kind, in profile column order
SATELLITE_RECENCY = (
    (Vehicle, Vehicle.inspection_date),
    (BackgroundCheck, BackgroundCheck.check_date),
    (Insurance, Insurance.start_date),
    (BankingDetails, BankingDetails.created_at),
)


@dataclass(frozen=True)
class ProfileRecord:
    """A driver with its latest record of each satellite kind."""

    driver: Driver
    vehicle: Optional[Vehicle] = None
    background_check: Optional[BackgroundCheck] = None
    insurance: Optional[Insurance] = None
    banking: Optional[BankingDetails] = None


def latest_per_driver(model, recency_column, driver_id: Optional[str] = None) -> Tuple:
    """Build a ranked subquery selecting one latest row per driver.

    Rows are ranked by recency descending with undated rows last; equal
    recency values fall back to the highest id so the pick is deterministic.

    Args:
        model: Satellite model class
        recency_column: Column deciding which record is the latest
        driver_id: Restrict ranking to a single driver

    Returns:
        Tuple of (aliased model over the subquery, rank column)
    """
    rank = func.row_number().over(
        partition_by=model.driver_id,
        order_by=(recency_column.desc().nulls_last(), model.id.desc()),
    ).label("recency_rank")

    ranked = select(model, rank)
    if driver_id is not None:
        ranked = ranked.where(model.driver_id == driver_id)
    ranked = ranked.subquery(f"latest_{model.__tablename__}")

    return aliased(model, ranked), ranked.c.recency_rank


class ProfileRepository:
    """Read-only access to aggregated driver profiles."""

    def __init__(self, session: AsyncSession):
        """Initialize the profile repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _profile_query(self, driver_id: Optional[str] = None) -> Select:
        query = select(Driver)
        for model, recency_column in SATELLITE_RECENCY:
            latest, rank = latest_per_driver(model, recency_column, driver_id)
            query = query.add_columns(latest).outerjoin(
                latest,
                and_(latest.driver_id == Driver.driver_id, rank == 1),
            )
        return query

    async def _fetch(self, query: Select) -> List[ProfileRecord]:
        result = await self.session.execute(query)
        return [ProfileRecord(*row) for row in result.all()]

    async def get_profile(self, driver_id: str) -> Optional[ProfileRecord]:
        """Get the aggregated profile of one driver.

        Args:
            driver_id: Driver identifier

        Returns:
            ProfileRecord if the driver exists, None otherwise
        """
        try:
            query = self._profile_query(driver_id).where(Driver.driver_id == driver_id)
            records = await self._fetch(query)
            return records[0] if records else None
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error aggregating driver profile: {e}",
                extra={"driver_id": driver_id},
                exc_info=True
            )
            raise

    async def list_by_status(self, status: str) -> List[ProfileRecord]:
        """Get profiles of drivers with the given status, newest registration first.

        Args:
            status: Exact status value to match

        Returns:
            One ProfileRecord per matching driver
        """
        try:
            query = (
                self._profile_query()
                .where(Driver.status == status)
                .order_by(Driver.registration_date.desc(), Driver.driver_id)
            )
            return await self._fetch(query)
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error aggregating driver profiles by status: {e}",
                extra={"status": status},
                exc_info=True
            )
            raise

    async def list_all(self, priority_status: str) -> List[ProfileRecord]:
        """Get profiles of every driver.

        Drivers whose status equals ``priority_status`` come first; each group
        is ordered by registration date, newest first.

        Args:
            priority_status: Status value ordered ahead of all others

        Returns:
            One ProfileRecord per driver
        """
        try:
            status_group = case((Driver.status == priority_status, 0), else_=1)
            query = self._profile_query().order_by(
                status_group,
                Driver.registration_date.desc(),
                Driver.driver_id,
            )
            return await self._fetch(query)
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Error aggregating all driver profiles: {e}",
                exc_info=True
            )
            raise
