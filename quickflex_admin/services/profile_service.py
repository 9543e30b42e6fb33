"""Driver profile aggregation service.

Wraps ``ProfileRepository`` and turns its rows into ``AggregatedProfile``
schemas. Storage failures surface as ``AggregationError`` with no partial
result; an unknown driver surfaces as ``DriverNotFoundError``.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.core.config import Settings, get_settings
from quickflex_admin.core.database import STORAGE_ERRORS
from quickflex_admin.core.exceptions import AggregationError, DriverNotFoundError
from quickflex_admin.repositories.profile_repository import ProfileRecord, ProfileRepository
from quickflex_admin.schemas.driver import (
    BackgroundCheckDetails,
    BankingDetailsResponse,
    DriverDetails,
    InsuranceDetails,
    VehicleDetails,
)
from quickflex_admin.schemas.profile import AggregatedProfile, ProfileListResponse
from quickflex_admin.utils.logging import get_logger

LOGGER = get_logger(__name__)


def to_aggregated_profile(record: ProfileRecord) -> AggregatedProfile:
    """Merge a driver row with its latest satellite records."""
    # Read declared columns only; relationship attributes would lazy-load
    driver_fields = {name: getattr(record.driver, name) for name in DriverDetails.model_fields}

    return AggregatedProfile(
        **driver_fields,
        vehicle=VehicleDetails.model_validate(record.vehicle) if record.vehicle else None,
        background_check=(
            BackgroundCheckDetails.model_validate(record.background_check)
            if record.background_check
            else None
        ),
        insurance=InsuranceDetails.model_validate(record.insurance) if record.insurance else None,
        banking=BankingDetailsResponse.model_validate(record.banking) if record.banking else None,
    )


class ProfileService:
    """Service producing aggregated driver profiles."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        """Initialize the profile service.

        Args:
            session: SQLAlchemy async session
            settings: Application settings; defaults to the process settings
        """
        self.session = session
        self.settings = settings or get_settings()
        self.profile_repo = ProfileRepository(session)

    async def get_profile(self, driver_id: str) -> AggregatedProfile:
        """Get the aggregated profile of one driver.

        Raises:
            DriverNotFoundError: No driver has this identifier
            AggregationError: The store failed
        """
        try:
            record = await self.profile_repo.get_profile(driver_id)
        except STORAGE_ERRORS as e:
            raise AggregationError(e) from e

        if record is None:
            raise DriverNotFoundError(driver_id)

        return to_aggregated_profile(record)

    async def list_pending_profiles(self) -> ProfileListResponse:
        """Get one profile per pending driver, newest registration first."""
        pending_status = self.settings.pending_status
        try:
            records = await self.profile_repo.list_by_status(pending_status)
        except STORAGE_ERRORS as e:
            raise AggregationError(e) from e

        profiles = [to_aggregated_profile(record) for record in records]
        LOGGER.info(
            f"Aggregated {len(profiles)} pending driver profiles",
            extra={"status": pending_status, "count": len(profiles)}
        )
        return ProfileListResponse(total=len(profiles), profiles=profiles)

    async def list_all_profiles(self) -> ProfileListResponse:
        """Get one profile per driver, pending drivers first."""
        try:
            records = await self.profile_repo.list_all(self.settings.pending_status)
        except STORAGE_ERRORS as e:
            raise AggregationError(e) from e

        profiles = [to_aggregated_profile(record) for record in records]
        LOGGER.info(
            f"Aggregated {len(profiles)} driver profiles",
            extra={"count": len(profiles)}
        )
        return ProfileListResponse(total=len(profiles), profiles=profiles)
