"""Unit tests for the latest-record profile aggregation query."""

from datetime import date, datetime

import pytest

from quickflex_admin.repositories.profile_repository import ProfileRepository

PENDING = "New Registered"


@pytest.mark.asyncio
async def test_one_row_per_driver_despite_many_satellite_records(db_session, seed):
    """Several records of every kind must not multiply the driver's row."""
    driver = await seed.driver()
    for day in (1, 2, 3):
        await seed.vehicle(driver, inspection_date=date(2024, 1, day))
    for day in (5, 6):
        await seed.background_check(driver, check_date=date(2024, 2, day))
    for day in (7, 8):
        await seed.insurance(driver, start_date=date(2024, 3, day), policy_number=f"POL-{day}")
    await seed.banking(driver)

    records = await ProfileRepository(db_session).list_by_status(PENDING)

    assert len(records) == 1
    assert records[0].driver.driver_id == driver.driver_id


@pytest.mark.asyncio
async def test_driver_without_satellites_is_kept(db_session, seed):
    bare = await seed.driver(first_name="Bare")
    full = await seed.driver(first_name="Full", registration_date=datetime(2024, 2, 1))
    await seed.vehicle(full, inspection_date=date(2024, 2, 2))
    await seed.vehicle(full, inspection_date=date(2024, 2, 3))

    records = await ProfileRepository(db_session).list_by_status(PENDING)

    assert [r.driver.first_name for r in records] == ["Full", "Bare"]
    bare_record = records[1]
    assert bare_record.driver.driver_id == bare.driver_id
    assert bare_record.vehicle is None
    assert bare_record.background_check is None
    assert bare_record.insurance is None
    assert bare_record.banking is None


@pytest.mark.asyncio
async def test_latest_record_wins_per_kind(db_session, seed):
    driver = await seed.driver()
    await seed.insurance(driver, start_date=date(2023, 6, 1), policy_number="T2")
    await seed.insurance(driver, start_date=date(2024, 6, 1), policy_number="T3")
    await seed.insurance(driver, start_date=date(2022, 6, 1), policy_number="T1")
    await seed.vehicle(driver, inspection_date=date(2024, 5, 1), vin="NEWER")
    await seed.vehicle(driver, inspection_date=date(2023, 5, 1), vin="OLDER")
    await seed.background_check(driver, check_date=date(2021, 1, 1), result="pending")
    await seed.background_check(driver, check_date=date(2024, 1, 1), result="clear")

    record = await ProfileRepository(db_session).get_profile(driver.driver_id)

    assert record.insurance.policy_number == "T3"
    assert record.vehicle.vin == "NEWER"
    assert record.background_check.result == "clear"


@pytest.mark.asyncio
async def test_equal_recency_prefers_highest_id(db_session, seed):
    driver = await seed.driver()
    first = await seed.insurance(driver, start_date=date(2024, 1, 1), policy_number="FIRST")
    second = await seed.insurance(driver, start_date=date(2024, 1, 1), policy_number="SECOND")
    assert second.id > first.id

    record = await ProfileRepository(db_session).get_profile(driver.driver_id)

    assert record.insurance.policy_number == "SECOND"


@pytest.mark.asyncio
async def test_undated_record_used_only_without_dated_ones(db_session, seed):
    driver = await seed.driver()
    await seed.background_check(driver, check_date=None, result="undated")

    repo = ProfileRepository(db_session)
    record = await repo.get_profile(driver.driver_id)
    assert record.background_check.result == "undated"

    await seed.background_check(driver, check_date=date(2020, 1, 1), result="dated")
    record = await repo.get_profile(driver.driver_id)
    assert record.background_check.result == "dated"


@pytest.mark.asyncio
async def test_other_drivers_records_do_not_leak(db_session, seed):
    alice = await seed.driver(first_name="Alice")
    bob = await seed.driver(first_name="Bob")
    await seed.vehicle(bob, inspection_date=date(2024, 1, 1), vin="BOBVIN")

    record = await ProfileRepository(db_session).get_profile(alice.driver_id)

    assert record.driver.first_name == "Alice"
    assert record.vehicle is None


@pytest.mark.asyncio
async def test_get_profile_unknown_driver_returns_none(db_session, seed):
    await seed.driver()

    assert await ProfileRepository(db_session).get_profile("nonexistent-id") is None


@pytest.mark.asyncio
async def test_list_by_status_filters_and_orders(db_session, seed):
    older = await seed.driver(first_name="Older", registration_date=datetime(2024, 1, 1))
    newer = await seed.driver(first_name="Newer", registration_date=datetime(2024, 3, 1))
    await seed.driver(first_name="Done", status="Approved", registration_date=datetime(2024, 5, 1))

    records = await ProfileRepository(db_session).list_by_status(PENDING)

    assert [r.driver.driver_id for r in records] == [newer.driver_id, older.driver_id]


@pytest.mark.asyncio
async def test_list_all_puts_pending_first(db_session, seed):
    await seed.driver(first_name="ApprovedNew", status="Approved", registration_date=datetime(2024, 6, 1))
    await seed.driver(first_name="PendingOld", registration_date=datetime(2024, 1, 1))
    await seed.driver(first_name="Rejected", status="Rejected", registration_date=datetime(2024, 2, 1))
    await seed.driver(first_name="PendingNew", registration_date=datetime(2024, 4, 1))

    records = await ProfileRepository(db_session).list_all(PENDING)

    assert [r.driver.first_name for r in records] == [
        "PendingNew",
        "PendingOld",
        "ApprovedNew",
        "Rejected",
    ]


@pytest.mark.asyncio
async def test_fan_out_across_many_drivers(db_session, seed):
    """Row count equals driver count for mixed satellite cardinalities."""
    drivers = []
    for index in range(4):
        driver = await seed.driver(first_name=f"D{index}", registration_date=datetime(2024, 1, index + 1))
        for n in range(index):
            await seed.vehicle(driver, inspection_date=date(2024, 2, n + 1))
            await seed.background_check(driver, check_date=date(2024, 3, n + 1))
            await seed.insurance(driver, start_date=date(2024, 4, n + 1))
        drivers.append(driver)

    records = await ProfileRepository(db_session).list_all(PENDING)

    assert len(records) == len(drivers)
    assert len({r.driver.driver_id for r in records}) == len(drivers)
