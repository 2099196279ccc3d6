from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.city import City
from app.models.city_destination import CityDestination, TransportMode
from app.models.destination import Destination
from app.services.seed_store import SqlSeedStore


def _session(mocker, row=None):
    db = mocker.create_autospec(AsyncSession, instance=True)
    db.execute = mocker.AsyncMock(
        return_value=SimpleNamespace(scalar_one_or_none=lambda: row)
    )
    db.commit = mocker.AsyncMock()
    db.rollback = mocker.AsyncMock()
    db.refresh = mocker.AsyncMock()
    db.get = mocker.AsyncMock(return_value=None)
    return db


def _destination() -> Destination:
    return Destination(
        name="Lonavala",
        slug="lonavala",
        category="hill_station",
        short_summary="Famous hill stations known for its scenic beauty.",
        latitude=18.75,
        longitude=73.4,
        is_active=True,
        weather_info={"temp": 20, "condition": "Rain", "humidity": 90},
        air_quality={"aqi": 40, "status": "Good"},
    )


@pytest.mark.asyncio
async def test_find_city_returns_match(mocker):
    # Arrange
    city = City(name="Pune", slug="pune", state="Maharashtra", latitude=18.52, longitude=73.85)
    db = _session(mocker, row=city)
    store = SqlSeedStore(db)

    # Act
    found = await store.find_city("PUNE")

    # Assert
    assert found is city
    db.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_add_city_commits_and_refreshes(mocker):
    # Arrange
    db = _session(mocker)
    store = SqlSeedStore(db)
    city = City(name="Pune", slug="pune", state="Unknown", latitude=18.52, longitude=73.85)

    # Act
    result = await store.add_city(city)

    # Assert
    assert result is city
    db.add.assert_called_once_with(city)
    db.commit.assert_awaited_once()
    db.refresh.assert_awaited_once_with(city)


@pytest.mark.asyncio
async def test_commit_failure_rolls_back_and_reraises(mocker):
    # Arrange
    db = _session(mocker)
    db.commit = mocker.AsyncMock(
        side_effect=IntegrityError("insert", {}, Exception("duplicate slug"))
    )
    store = SqlSeedStore(db)

    # Act / Assert
    with pytest.raises(IntegrityError):
        await store.add_destination(_destination())
    db.rollback.assert_awaited_once()
    db.refresh.assert_not_awaited()


@pytest.mark.asyncio
async def test_is_linked_reflects_query_result(mocker):
    # Arrange
    linked = SqlSeedStore(_session(mocker, row=12))
    unlinked = SqlSeedStore(_session(mocker, row=None))

    # Act / Assert
    assert await linked.is_linked(1, 2) is True
    assert await unlinked.is_linked(1, 2) is False


@pytest.mark.asyncio
async def test_enrichment_without_snapshots_keeps_previous_values(mocker):
    # Arrange
    db = _session(mocker)
    destination = _destination()
    db.get.return_value = destination
    store = SqlSeedStore(db)

    # Act
    await store.update_destination_enrichment(
        5,
        weather_info=None,
        air_quality=None,
        best_visit_time={"best_months": ["July"]},
    )

    # Assert
    assert destination.weather_info == {"temp": 20, "condition": "Rain", "humidity": 90}
    assert destination.air_quality == {"aqi": 40, "status": "Good"}
    assert destination.best_visit_time == {"best_months": ["July"]}
    db.get.assert_awaited_once_with(Destination, 5)
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_enrichment_overwrites_with_fresh_snapshots(mocker):
    # Arrange
    db = _session(mocker)
    destination = _destination()
    db.get.return_value = destination
    store = SqlSeedStore(db)

    # Act
    await store.update_destination_enrichment(
        5,
        weather_info={"temp": 25, "condition": "Clear sky", "humidity": 50},
        air_quality={"aqi": 80, "status": "Moderate"},
        best_visit_time={"best_months": ["March"]},
    )

    # Assert
    assert destination.weather_info["temp"] == 25
    assert destination.air_quality["status"] == "Moderate"


@pytest.mark.asyncio
async def test_enrichment_of_unknown_destination_raises(mocker):
    # Arrange
    db = _session(mocker)
    store = SqlSeedStore(db)

    # Act / Assert
    with pytest.raises(LookupError):
        await store.update_destination_enrichment(
            404, weather_info=None, air_quality=None, best_visit_time={}
        )
    db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_upsert_creates_new_link(mocker):
    # Arrange
    db = _session(mocker, row=None)
    store = SqlSeedStore(db)

    # Act
    link = await store.upsert_city_destination(
        1,
        2,
        TransportMode.DRIVING,
        {"distance_km": 100, "travel_time_minutes": 120, "estimated_fuel_cost": 900},
    )

    # Assert
    assert isinstance(link, CityDestination)
    assert (link.city_id, link.destination_id) == (1, 2)
    assert link.transport_mode is TransportMode.DRIVING
    assert link.distance_km == 100
    db.add.assert_called_once_with(link)
    db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_upsert_updates_existing_link_in_place(mocker):
    # Arrange
    existing = CityDestination(
        city_id=1,
        destination_id=2,
        transport_mode=TransportMode.TRANSIT,
        distance_km=90,
        travel_time_minutes=200,
    )
    db = _session(mocker, row=existing)
    store = SqlSeedStore(db)

    # Act
    link = await store.upsert_city_destination(
        1, 2, TransportMode.TRANSIT, {"distance_km": 95, "travel_time_minutes": 180}
    )

    # Assert
    assert link is existing
    assert (link.distance_km, link.travel_time_minutes) == (95, 180)
    db.add.assert_not_called()
    db.commit.assert_awaited_once()
