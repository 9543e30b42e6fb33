"""Driver and satellite record endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from quickflex_admin.api.dependencies import get_driver_service
from quickflex_admin.schemas.driver import (
    BackgroundCheckCreate,
    BankingUpdate,
    InsuranceCreate,
    StatusUpdateRequest,
    VehicleUpdate,
)
from quickflex_admin.services.driver_service import DriverService
from quickflex_admin.utils.logging import get_logger
from quickflex_admin.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()

DriverServiceDep = Annotated[DriverService, Depends(get_driver_service)]


@router.get(
    "/pending",
    response_model=dict,
    summary="List pending drivers",
    operation_id="list_pending_drivers",
)
async def list_pending_drivers(request: Request, driver_service: DriverServiceDep) -> dict:
    result = await driver_service.list_pending_drivers()
    return create_api_response(
        data=result,
        message=f"Retrieved {result.total} pending drivers",
        request=request,
    )


@router.put(
    "/status",
    response_model=dict,
    summary="Update driver status",
    description="Move a driver to a new onboarding status (e.g. Approved, Rejected)",
    operation_id="update_driver_status",
)
async def update_driver_status(
    request: Request,
    payload: StatusUpdateRequest,
    driver_service: DriverServiceDep,
) -> dict:
    driver = await driver_service.update_status(payload)
    LOGGER.info(f"Driver {driver.driver_id} moved to status {driver.status}")
    return create_api_response(
        data=driver,
        message="Driver status updated successfully",
        request=request,
    )


@router.get(
    "/{driver_id}",
    response_model=dict,
    summary="Get driver details",
    operation_id="get_driver",
)
async def get_driver(request: Request, driver_id: str, driver_service: DriverServiceDep) -> dict:
    driver = await driver_service.get_driver(driver_id)
    return create_api_response(
        data=driver,
        message="Driver retrieved successfully",
        request=request,
    )


@router.get(
    "/{driver_id}/vehicle",
    response_model=dict,
    summary="List driver vehicles",
    operation_id="get_driver_vehicles",
)
async def get_driver_vehicles(request: Request, driver_id: str, driver_service: DriverServiceDep) -> dict:
    result = await driver_service.get_vehicles(driver_id)
    return create_api_response(
        data=result,
        message=f"Retrieved {result.total} vehicles",
        request=request,
    )


@router.put(
    "/{driver_id}/vehicle",
    response_model=dict,
    summary="Create or update a vehicle",
    description="Upsert a vehicle keyed by VIN",
    operation_id="upsert_driver_vehicle",
)
async def upsert_driver_vehicle(
    request: Request,
    driver_id: str,
    payload: VehicleUpdate,
    driver_service: DriverServiceDep,
) -> dict:
    vehicle = await driver_service.upsert_vehicle(driver_id, payload)
    return create_api_response(
        data=vehicle,
        message="Vehicle saved successfully",
        request=request,
    )


@router.get(
    "/{driver_id}/background-checks",
    response_model=dict,
    summary="List background checks",
    operation_id="get_driver_background_checks",
)
async def get_driver_background_checks(
    request: Request, driver_id: str, driver_service: DriverServiceDep
) -> dict:
    result = await driver_service.get_background_checks(driver_id)
    return create_api_response(
        data=result,
        message=f"Retrieved {result.total} background checks",
        request=request,
    )


@router.post(
    "/{driver_id}/background-checks",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Record a background check",
    operation_id="add_driver_background_check",
)
async def add_driver_background_check(
    request: Request,
    driver_id: str,
    payload: BackgroundCheckCreate,
    driver_service: DriverServiceDep,
) -> dict:
    check = await driver_service.add_background_check(driver_id, payload)
    return create_api_response(
        data=check,
        message="Background check recorded successfully",
        request=request,
    )


@router.get(
    "/{driver_id}/insurance",
    response_model=dict,
    summary="List insurance policies",
    operation_id="get_driver_insurance",
)
async def get_driver_insurance(request: Request, driver_id: str, driver_service: DriverServiceDep) -> dict:
    result = await driver_service.get_insurance(driver_id)
    return create_api_response(
        data=result,
        message=f"Retrieved {result.total} insurance policies",
        request=request,
    )


@router.post(
    "/{driver_id}/insurance",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Record an insurance policy",
    operation_id="add_driver_insurance",
)
async def add_driver_insurance(
    request: Request,
    driver_id: str,
    payload: InsuranceCreate,
    driver_service: DriverServiceDep,
) -> dict:
    policy = await driver_service.add_insurance(driver_id, payload)
    return create_api_response(
        data=policy,
        message="Insurance policy recorded successfully",
        request=request,
    )


@router.get(
    "/{driver_id}/banking",
    response_model=dict,
    summary="Get banking details",
    operation_id="get_driver_banking",
)
async def get_driver_banking(request: Request, driver_id: str, driver_service: DriverServiceDep) -> dict:
    banking = await driver_service.get_banking(driver_id)
    return create_api_response(
        data={"banking": banking.model_dump(mode="json") if banking else None},
        message="Banking details retrieved successfully" if banking else "No banking details on file",
        request=request,
    )


@router.put(
    "/{driver_id}/banking",
    response_model=dict,
    summary="Create or update banking details",
    operation_id="upsert_driver_banking",
)
async def upsert_driver_banking(
    request: Request,
    driver_id: str,
    payload: BankingUpdate,
    driver_service: DriverServiceDep,
) -> dict:
    banking = await driver_service.upsert_banking(driver_id, payload)
    return create_api_response(
        data=banking,
        message="Banking details saved successfully",
        request=request,
    )
