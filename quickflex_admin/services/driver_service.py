"""Driver record service.

Thin operations over the driver and satellite repositories: status
transitions, and read/write of vehicle, background check, insurance and
banking records. Every satellite operation first checks that the driver
exists.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quickflex_admin.core.config import Settings, get_settings
from quickflex_admin.core.database import STORAGE_ERRORS
from quickflex_admin.core.exceptions import DatabaseError, DriverNotFoundError, ValidationError
from quickflex_admin.database.models import Driver
from quickflex_admin.repositories.background_check_repository import BackgroundCheckRepository
from quickflex_admin.repositories.banking_repository import BankingRepository
from quickflex_admin.repositories.driver_repository import DriverRepository
from quickflex_admin.repositories.insurance_repository import InsuranceRepository
from quickflex_admin.repositories.vehicle_repository import VehicleRepository
from quickflex_admin.schemas.driver import (
    BackgroundCheckCreate,
    BackgroundCheckDetails,
    BackgroundCheckListResponse,
    BankingDetailsResponse,
    BankingUpdate,
    DriverDetails,
    DriverListResponse,
    DriverSummary,
    InsuranceCreate,
    InsuranceDetails,
    InsuranceListResponse,
    StatusUpdateRequest,
    VehicleDetails,
    VehicleListResponse,
    VehicleUpdate,
)
from quickflex_admin.utils.logging import get_logger

LOGGER = get_logger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate SQLAlchemy and connectivity failures into DatabaseError."""
    try:
        yield
    except STORAGE_ERRORS as e:
        raise DatabaseError(f"Failed to {action}", e) from e


class DriverService:
    """Service for driver records and their satellite records."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        """Initialize the driver service.

        Args:
            session: SQLAlchemy async session
            settings: Application settings; defaults to the process settings
        """
        self.session = session
        self.settings = settings or get_settings()
        self.driver_repo = DriverRepository(session)
        self.vehicle_repo = VehicleRepository(session)
        self.background_check_repo = BackgroundCheckRepository(session)
        self.insurance_repo = InsuranceRepository(session)
        self.banking_repo = BankingRepository(session)

    async def _require_driver(self, driver_id: str) -> Driver:
        with storage_errors("load driver"):
            driver = await self.driver_repo.get_by_id(driver_id)
        if driver is None:
            raise DriverNotFoundError(driver_id)
        return driver

    # ------------------------------------------------------------------
    # Drivers
    # ------------------------------------------------------------------

    async def list_pending_drivers(self) -> DriverListResponse:
        """List drivers awaiting review, most recently registered first."""
        with storage_errors("list pending drivers"):
            drivers = await self.driver_repo.list_by_status(self.settings.pending_status)

        return DriverListResponse(
            total=len(drivers),
            drivers=[DriverSummary.model_validate(d) for d in drivers],
        )

    async def get_driver(self, driver_id: str) -> DriverDetails:
        driver = await self._require_driver(driver_id)
        return DriverDetails.model_validate(driver)

    async def update_status(self, request: StatusUpdateRequest) -> DriverDetails:
        """Move a driver to a new status.

        Raises:
            ValidationError: driver_id or status is missing
            DriverNotFoundError: No driver has this identifier
        """
        driver_id = (request.driver_id or "").strip()
        new_status = (request.status or "").strip()
        if not driver_id or not new_status:
            raise ValidationError("driver_id and status are required")

        with storage_errors("update driver status"):
            driver = await self.driver_repo.update_status(driver_id, new_status)

        if driver is None:
            raise DriverNotFoundError(driver_id)

        return DriverDetails.model_validate(driver)

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    async def get_vehicles(self, driver_id: str) -> VehicleListResponse:
        await self._require_driver(driver_id)
        with storage_errors("load vehicles"):
            vehicles = await self.vehicle_repo.list_for_driver(driver_id)
        return VehicleListResponse(
            total=len(vehicles),
            vehicles=[VehicleDetails.model_validate(v) for v in vehicles],
        )

    async def upsert_vehicle(self, driver_id: str, payload: VehicleUpdate) -> VehicleDetails:
        """Insert the vehicle, or update it in place when the VIN is already known."""
        await self._require_driver(driver_id)
        fields = payload.model_dump(exclude={"vin"})
        with storage_errors("save vehicle"):
            vehicle = await self.vehicle_repo.upsert(driver_id, payload.vin.strip(), **fields)
        return VehicleDetails.model_validate(vehicle)

    # ------------------------------------------------------------------
    # Background checks
    # ------------------------------------------------------------------

    async def get_background_checks(self, driver_id: str) -> BackgroundCheckListResponse:
        await self._require_driver(driver_id)
        with storage_errors("load background checks"):
            checks = await self.background_check_repo.list_for_driver(driver_id)
        return BackgroundCheckListResponse(
            total=len(checks),
            background_checks=[BackgroundCheckDetails.model_validate(c) for c in checks],
        )

    async def add_background_check(
        self, driver_id: str, payload: BackgroundCheckCreate
    ) -> BackgroundCheckDetails:
        await self._require_driver(driver_id)
        with storage_errors("save background check"):
            check = await self.background_check_repo.create(driver_id=driver_id, **payload.model_dump())
        LOGGER.info("Background check recorded", extra={"driver_id": driver_id, "check_id": check.id})
        return BackgroundCheckDetails.model_validate(check)

    # ------------------------------------------------------------------
    # Insurance
    # ------------------------------------------------------------------

    async def get_insurance(self, driver_id: str) -> InsuranceListResponse:
        await self._require_driver(driver_id)
        with storage_errors("load insurance"):
            policies = await self.insurance_repo.list_for_driver(driver_id)
        return InsuranceListResponse(
            total=len(policies),
            insurance=[InsuranceDetails.model_validate(p) for p in policies],
        )

    async def add_insurance(self, driver_id: str, payload: InsuranceCreate) -> InsuranceDetails:
        """Record a new insurance policy.

        Raises:
            ValidationError: policy_number is missing
        """
        policy_number = (payload.policy_number or "").strip()
        if not policy_number:
            raise ValidationError("policy_number is required")

        await self._require_driver(driver_id)
        fields = payload.model_dump(exclude={"policy_number"})
        with storage_errors("save insurance"):
            policy = await self.insurance_repo.create(
                driver_id=driver_id, policy_number=policy_number, **fields
            )
        LOGGER.info("Insurance policy recorded", extra={"driver_id": driver_id, "policy_id": policy.id})
        return InsuranceDetails.model_validate(policy)

    # ------------------------------------------------------------------
    # Banking
    # ------------------------------------------------------------------

    async def get_banking(self, driver_id: str) -> Optional[BankingDetailsResponse]:
        await self._require_driver(driver_id)
        with storage_errors("load banking details"):
            banking = await self.banking_repo.get_for_driver(driver_id)
        return BankingDetailsResponse.model_validate(banking) if banking else None

    async def upsert_banking(self, driver_id: str, payload: BankingUpdate) -> BankingDetailsResponse:
        """Insert or replace the banking details of a driver.

        Raises:
            ValidationError: The payload carries no fields
        """
        fields = payload.model_dump(exclude_unset=True)
        if not fields:
            raise ValidationError("At least one banking field is required")

        await self._require_driver(driver_id)
        with storage_errors("save banking details"):
            banking = await self.banking_repo.upsert(driver_id, **fields)
        LOGGER.info("Banking details saved", extra={"driver_id": driver_id})
        return BankingDetailsResponse.model_validate(banking)
