from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import status
from sqlalchemy.exc import OperationalError

from quickflex_admin.api.dependencies import get_driver_service, get_profile_service
from quickflex_admin.core.exceptions import AggregationError, DriverNotFoundError
from quickflex_admin.main import app
from quickflex_admin.schemas.driver import DriverDetails, InsuranceDetails, VehicleDetails
from quickflex_admin.schemas.profile import AggregatedProfile, ProfileListResponse
from quickflex_admin.services.driver_service import DriverService
from quickflex_admin.services.profile_service import ProfileService


@pytest.fixture
def mock_profile_service():
    service = AsyncMock(spec=ProfileService)
    app.dependency_overrides[get_profile_service] = lambda: service
    return service


@pytest.fixture
def real_driver_service():
    """DriverService over a session that is never reached by validation failures."""
    service = DriverService(MagicMock())
    app.dependency_overrides[get_driver_service] = lambda: service
    return service


def make_profile(**overrides) -> AggregatedProfile:
    fields = dict(
        driver_id="drv-1",
        first_name="Ada",
        last_name="Lovelace",
        status="New Registered",
        registration_date=datetime(2024, 3, 2, 14, 30),
        vehicle=VehicleDetails(id=1, vin="VIN1", inspection_date=date(2024, 1, 9)),
        insurance=InsuranceDetails(id=4, policy_number="POL-9", start_date=date(2023, 12, 1)),
    )
    fields.update(overrides)
    return AggregatedProfile(**fields)


def test_list_pending_profiles(test_client, mock_profile_service):
    mock_profile_service.list_pending_profiles.return_value = ProfileListResponse(
        total=1, profiles=[make_profile()]
    )

    response = test_client.get("/api/v1/drivers/pending-details")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["total"] == 1
    profile = data["profiles"][0]
    assert profile["registration_date"] == "03-02-2024"
    assert profile["vehicle"]["inspection_date"] == "01-09-2024"
    assert profile["insurance"]["start_date"] == "12-01-2023"
    assert profile["background_check"] is None
    assert profile["banking"] is None


def test_list_all_profiles(test_client, mock_profile_service):
    mock_profile_service.list_all_profiles.return_value = ProfileListResponse(
        total=2,
        profiles=[make_profile(), make_profile(driver_id="drv-2", status="Approved")],
    )

    response = test_client.get("/api/v1/drivers/details")

    assert response.status_code == status.HTTP_200_OK
    assert [p["driver_id"] for p in response.json()["data"]["profiles"]] == ["drv-1", "drv-2"]
    mock_profile_service.list_all_profiles.assert_awaited_once()


def test_get_profile(test_client, mock_profile_service):
    mock_profile_service.get_profile.return_value = make_profile()

    response = test_client.get("/api/v1/drivers/drv-1/details")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["driver_id"] == "drv-1"
    mock_profile_service.get_profile.assert_awaited_once_with("drv-1")


def test_get_profile_not_found(test_client, mock_profile_service):
    mock_profile_service.get_profile.side_effect = DriverNotFoundError("nonexistent-id")

    response = test_client.get("/api/v1/drivers/nonexistent-id/details")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    body = response.json()
    assert body["error_type"] == "not_found"
    assert body["instance"] == "/api/v1/drivers/nonexistent-id/details"


def test_aggregation_failure_hides_internal_detail(test_client, mock_profile_service):
    mock_profile_service.list_pending_profiles.side_effect = AggregationError(
        OperationalError("SELECT secret_column", {}, Exception("password authentication failed"))
    )

    response = test_client.get("/api/v1/drivers/pending-details")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["error_type"] == "storage_error"
    assert body["detail"] == "Failed to aggregate driver profiles"
    assert "password" not in response.text
    assert "secret_column" not in response.text


@pytest.mark.parametrize(
    "payload",
    [{}, {"driver_id": "drv-1"}, {"status": "Approved"}, {"driver_id": "", "status": "Approved"}],
)
def test_status_update_requires_id_and_status(test_client, real_driver_service, payload):
    response = test_client.put("/api/v1/drivers/status", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_type"] == "validation_error"


def test_insurance_requires_policy_number(test_client, real_driver_service):
    response = test_client.post("/api/v1/drivers/drv-1/insurance", json={"provider": "Acme"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "policy_number is required"


def test_vehicle_without_vin_is_rejected(test_client, real_driver_service):
    response = test_client.put("/api/v1/drivers/drv-1/vehicle", json={"make": "Ford"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error_type"] == "validation_error"
    assert "vin" in body["detail"]


def test_correlation_id_is_echoed(test_client, mock_profile_service):
    mock_profile_service.list_all_profiles.return_value = ProfileListResponse(total=0, profiles=[])

    response = test_client.get("/api/v1/drivers/details", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert response.json()["meta"]["request_id"] == "abc-123"


def test_root(test_client):
    response = test_client.get("/")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["health"] == "/health"


@pytest.fixture
def mock_driver_service():
    service = AsyncMock(spec=DriverService)
    app.dependency_overrides[get_driver_service] = lambda: service
    return service


def test_get_driver(test_client, mock_driver_service):
    mock_driver_service.get_driver.return_value = DriverDetails(
        driver_id="drv-1",
        first_name="Ada",
        last_name="Lovelace",
        status="New Registered",
        registration_date=datetime(2024, 3, 2, 14, 30),
        date_of_birth=date(1990, 12, 10),
    )

    response = test_client.get("/api/v1/drivers/drv-1")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["driver_id"] == "drv-1"
    assert data["date_of_birth"] == "12-10-1990"
    assert data["registration_date"] == "03-02-2024"
    mock_driver_service.get_driver.assert_awaited_once_with("drv-1")


def test_get_driver_not_found(test_client, mock_driver_service):
    mock_driver_service.get_driver.side_effect = DriverNotFoundError("ghost")

    response = test_client.get("/api/v1/drivers/ghost")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error_type"] == "not_found"


def test_unreachable_store_returns_storage_error(test_client):
    service = ProfileService(MagicMock())
    service.profile_repo = AsyncMock()
    service.profile_repo.list_by_status.side_effect = ConnectionRefusedError(111, "Connect call failed")
    app.dependency_overrides[get_profile_service] = lambda: service

    response = test_client.get("/api/v1/drivers/pending-details")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["error_type"] == "storage_error"
    assert body["detail"] == "Failed to aggregate driver profiles"
