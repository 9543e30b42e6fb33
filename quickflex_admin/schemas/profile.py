"""Aggregated driver profile schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from quickflex_admin.schemas.driver import (
    BackgroundCheckDetails,
    BankingDetailsResponse,
    DriverDetails,
    InsuranceDetails,
    VehicleDetails,
)


class AggregatedProfile(DriverDetails):
    """Driver details merged with the latest record of each satellite kind.

    A kind with no records for the driver is ``None``.
    """

    vehicle: Optional[VehicleDetails] = Field(None, description="Latest vehicle by inspection date")
    background_check: Optional[BackgroundCheckDetails] = Field(
        None, description="Latest background check by check date"
    )
    insurance: Optional[InsuranceDetails] = Field(None, description="Latest policy by start date")
    banking: Optional[BankingDetailsResponse] = Field(None, description="Latest banking record")


class ProfileListResponse(BaseModel):
    total: int
    profiles: List[AggregatedProfile]
