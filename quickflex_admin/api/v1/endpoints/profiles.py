"""Aggregated driver profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from quickflex_admin.api.dependencies import get_profile_service
from quickflex_admin.services.profile_service import ProfileService
from quickflex_admin.utils.logging import get_logger
from quickflex_admin.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/pending-details",
    response_model=dict,
    summary="List pending driver profiles",
    description="One aggregated profile per driver awaiting review, newest registration first",
    operation_id="list_pending_profiles",
)
async def list_pending_profiles(
    request: Request,
    profile_service: Annotated[ProfileService, Depends(get_profile_service)],
) -> dict:
    """List aggregated profiles of pending drivers.

    Each profile carries the driver's latest vehicle, background check,
    insurance and banking record; kinds without records are null.
    """
    result = await profile_service.list_pending_profiles()
    return create_api_response(
        data=result,
        message=f"Retrieved {result.total} pending driver profiles",
        request=request,
    )


@router.get(
    "/details",
    response_model=dict,
    summary="List all driver profiles",
    description="One aggregated profile per driver, pending drivers first",
    operation_id="list_all_profiles",
)
async def list_all_profiles(
    request: Request,
    profile_service: Annotated[ProfileService, Depends(get_profile_service)],
) -> dict:
    result = await profile_service.list_all_profiles()
    return create_api_response(
        data=result,
        message=f"Retrieved {result.total} driver profiles",
        request=request,
    )


@router.get(
    "/{driver_id}/details",
    response_model=dict,
    summary="Get a driver profile",
    operation_id="get_driver_profile",
)
async def get_driver_profile(
    request: Request,
    driver_id: str,
    profile_service: Annotated[ProfileService, Depends(get_profile_service)],
) -> dict:
    """Get the aggregated profile of one driver.

    Raises:
        DriverNotFoundError: Reported as 404
    """
    profile = await profile_service.get_profile(driver_id)
    return create_api_response(
        data=profile,
        message="Driver profile retrieved successfully",
        request=request,
    )
