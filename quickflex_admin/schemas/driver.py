"""Driver and satellite record schemas.

Response models read straight from ORM instances (``from_attributes``) and
render every date as MM-DD-YYYY. Request models accept ISO dates as well
as MM-DD-YYYY input.
"""

from datetime import date, datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, field_serializer

from quickflex_admin.utils.dates import parse_input_date, serialize_display_date

DisplayDate = Annotated[
    Optional[date],
    PlainSerializer(serialize_display_date, return_type=Optional[str]),
]
DisplayDateTime = Annotated[
    Optional[datetime],
    PlainSerializer(serialize_display_date, return_type=Optional[str]),
]
InputDate = Annotated[Optional[date], BeforeValidator(parse_input_date)]


def mask_account_number(value: Optional[str]) -> Optional[str]:
    """Keep only the last four characters of an account number visible."""
    if not value:
        return value
    visible = value[-4:]
    return "*" * max(len(value) - 4, 0) + visible


# ============================================================================
# Response Schemas
# ============================================================================


class DriverSummary(BaseModel):
    """Driver row as shown in review queues."""

    model_config = ConfigDict(from_attributes=True)

    driver_id: str = Field(..., description="Driver identifier")
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    status: str = Field(..., description="Onboarding status, e.g. 'New Registered'")
    registration_date: DisplayDateTime = None


class DriverDetails(DriverSummary):
    """Full personal and license details of a driver."""

    date_of_birth: DisplayDate = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    license_number: Optional[str] = None
    license_state: Optional[str] = None
    license_expiry: DisplayDate = None


class VehicleDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    vin: str
    license_plate: Optional[str] = None
    inspection_date: DisplayDate = None


class BackgroundCheckDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    check_type: Optional[str] = None
    provider: Optional[str] = None
    result: Optional[str] = None
    notes: Optional[str] = None
    check_date: DisplayDate = None


class InsuranceDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    provider: Optional[str] = None
    policy_number: str
    coverage_type: Optional[str] = None
    start_date: DisplayDate = None
    end_date: DisplayDate = None


class BankingDetailsResponse(BaseModel):
    """Banking details with the account number masked."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    bank_name: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_number: Optional[str] = None
    routing_number: Optional[str] = None
    created_at: DisplayDateTime = None

    @field_serializer("account_number")
    def serialize_account_number(self, value: Optional[str]) -> Optional[str]:
        return mask_account_number(value)


class DriverListResponse(BaseModel):
    total: int
    drivers: List[DriverSummary]


class VehicleListResponse(BaseModel):
    total: int
    vehicles: List[VehicleDetails]


class BackgroundCheckListResponse(BaseModel):
    total: int
    background_checks: List[BackgroundCheckDetails]


class InsuranceListResponse(BaseModel):
    total: int
    insurance: List[InsuranceDetails]


# ============================================================================
# Request Schemas
# ============================================================================


class StatusUpdateRequest(BaseModel):
    """Status transition request. The service rejects a missing field."""

    driver_id: Optional[str] = Field(None, description="Driver identifier")
    status: Optional[str] = Field(None, description="New status, e.g. 'Approved'")


class VehicleUpdate(BaseModel):
    """Vehicle upsert payload; ``vin`` is the natural key."""

    vin: str = Field(..., min_length=1, description="Vehicle identification number")
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(None, ge=1900, le=2100)
    color: Optional[str] = None
    license_plate: Optional[str] = None
    inspection_date: InputDate = None


class BackgroundCheckCreate(BaseModel):
    check_type: Optional[str] = None
    provider: Optional[str] = None
    result: Optional[str] = None
    notes: Optional[str] = None
    check_date: InputDate = None


class InsuranceCreate(BaseModel):
    """Insurance policy payload; the service rejects a blank policy number."""

    policy_number: Optional[str] = None
    provider: Optional[str] = None
    coverage_type: Optional[str] = None
    start_date: InputDate = None
    end_date: InputDate = None


class BankingUpdate(BaseModel):
    bank_name: Optional[str] = None
    account_holder_name: Optional[str] = None
    account_number: Optional[str] = None
    routing_number: Optional[str] = None
