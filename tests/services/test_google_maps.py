import httpx
import pytest

from app.models.city_destination import TransportMode
from app.schemas.geo import Coordinates
from app.services.geo_cache import CachedDistance
from app.services.google_maps import GoogleMapsService
from app.services.google_maps_errors import GeoConfigurationError, RemoteApiError
from tests.utils.fakes import InMemoryGeoLookupCache
from tests.utils.google_api import FakeGoogleApi, element, place


PUNE = Coordinates(lat=18.52, lng=73.85)
LONAVALA = Coordinates(lat=18.75, lng=73.4)
ALIBAG = Coordinates(lat=18.64, lng=72.87)


@pytest.mark.asyncio
async def test_search_places_parses_results_in_order():
    # Arrange
    api = FakeGoogleApi()
    api.add_place("Forts near Pune", place("p1", "Sinhagad Fort", 18.36, 73.75))
    api.add_place("Forts near Pune", place("p2", "Rajgad Fort", 18.24, 73.68))
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    places = await maps.search_places("Forts near Pune")

    # Assert
    assert [p.name for p in places] == ["Sinhagad Fort", "Rajgad Fort"]
    assert places[0].location == Coordinates(lat=18.36, lng=73.75)
    assert api.calls("textsearch")[0].url.params["key"] == "test-key"


@pytest.mark.asyncio
async def test_search_places_zero_results_is_empty():
    # Arrange
    maps = FakeGoogleApi().service(InMemoryGeoLookupCache())

    # Act
    places = await maps.search_places("Volcanoes near Pune")

    # Assert
    assert places == []


@pytest.mark.asyncio
async def test_search_places_raises_on_error_status():
    # Arrange
    api = FakeGoogleApi()
    api.search_status["Lakes near Pune"] = "REQUEST_DENIED"
    maps = api.service(InMemoryGeoLookupCache())

    # Act / Assert
    with pytest.raises(RemoteApiError) as excinfo:
        await maps.search_places("Lakes near Pune")
    assert excinfo.value.status == "REQUEST_DENIED"
    assert "Places Search API error: REQUEST_DENIED" in str(excinfo.value)


@pytest.mark.asyncio
async def test_search_places_skips_malformed_results():
    # Arrange
    api = FakeGoogleApi()
    api.searches["Lakes near Pune"] = [
        {"name": "No id lake"},
        place("p1", "Pawna Lake", 18.66, 73.49),
    ]
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    places = await maps.search_places("Lakes near Pune")

    # Assert
    assert [p.place_id for p in places] == ["p1"]


@pytest.mark.asyncio
async def test_place_details_are_cached_after_first_lookup():
    # Arrange
    api = FakeGoogleApi()
    api.details["p1"] = place("p1", "Lonavala", 18.75, 73.4, photos=2, overview="Hill town")
    cache = InMemoryGeoLookupCache()
    maps = api.service(cache)

    # Act
    first = await maps.get_place_details("p1")
    second = await maps.get_place_details("p1")

    # Assert
    assert len(api.calls("details")) == 1
    assert "p1" in cache.places
    assert first == second
    assert first.editorial_summary == "Hill town"
    assert len(first.photos) == 2


@pytest.mark.asyncio
async def test_place_details_error_status_raises():
    # Arrange
    maps = FakeGoogleApi().service(InMemoryGeoLookupCache())

    # Act / Assert
    with pytest.raises(RemoteApiError, match="Places API error: NOT_FOUND"):
        await maps.get_place_details("missing")


@pytest.mark.asyncio
async def test_distance_matrix_second_call_is_served_from_cache():
    # Arrange
    api = FakeGoogleApi()
    api.default_element = element(95_400, 5_430)
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    first = await maps.get_distance_matrix(PUNE, LONAVALA)
    second = await maps.get_distance_matrix(PUNE, LONAVALA)

    # Assert
    assert first.cached is False
    assert second.cached is True
    assert (first.distance_km, first.duration_minutes) == (95, 91)
    assert (second.distance_km, second.duration_minutes) == (95, 91)
    assert len(api.calls("distancematrix")) == 1


@pytest.mark.asyncio
async def test_distance_matrix_cache_is_keyed_by_mode():
    # Arrange
    api = FakeGoogleApi()
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    await maps.get_distance_matrix(PUNE, LONAVALA, TransportMode.DRIVING)
    transit = await maps.get_distance_matrix(PUNE, LONAVALA, TransportMode.TRANSIT)

    # Assert
    assert transit.cached is False
    assert len(api.calls("distancematrix")) == 2


@pytest.mark.asyncio
async def test_distance_matrix_rounds_half_up():
    # Arrange
    api = FakeGoogleApi()
    api.default_element = element(1_500, 90)
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    result = await maps.get_distance_matrix(PUNE, LONAVALA)

    # Assert
    assert result.distance_km == 2
    assert result.duration_minutes == 2


@pytest.mark.asyncio
async def test_distance_matrix_unroutable_pair_raises():
    # Arrange
    api = FakeGoogleApi()
    api.default_element = {"status": "ZERO_RESULTS"}
    maps = api.service(InMemoryGeoLookupCache())

    # Act / Assert
    with pytest.raises(RemoteApiError, match="No route found"):
        await maps.get_distance_matrix(PUNE, LONAVALA)


@pytest.mark.asyncio
async def test_cached_lookups_work_without_api_key():
    # Arrange
    cache = InMemoryGeoLookupCache()
    await cache.put_distance(
        PUNE, LONAVALA, TransportMode.DRIVING, CachedDistance(80_000, 6_000)
    )
    await cache.put_place_details("p1", place("p1", "Lonavala", 18.75, 73.4))
    maps = GoogleMapsService("", cache)

    # Act
    distance = await maps.get_distance_matrix(PUNE, LONAVALA)
    details = await maps.get_place_details("p1")

    # Assert
    assert distance.cached is True
    assert distance.distance_km == 80
    assert details.name == "Lonavala"


@pytest.mark.asyncio
async def test_uncached_lookup_without_api_key_raises_configuration_error():
    # Arrange
    maps = GoogleMapsService("", InMemoryGeoLookupCache())

    # Act / Assert
    with pytest.raises(GeoConfigurationError):
        await maps.search_places("Pune")


@pytest.mark.asyncio
async def test_batch_substitutes_placeholder_for_unroutable_element():
    # Arrange
    api = FakeGoogleApi()
    api.elements[("driving", ALIBAG.as_param())] = {"status": "NOT_FOUND"}
    cache = InMemoryGeoLookupCache()
    maps = api.service(cache)

    # Act
    results = await maps.get_distance_matrix_batch([PUNE], [LONAVALA, ALIBAG])

    # Assert
    assert len(results) == 2
    assert results[0].is_reachable
    assert results[0].distance_km == 100
    assert results[1].distance_km == 0
    assert results[1].duration_minutes == 0
    assert results[1].status == "NOT_FOUND"
    assert not results[1].is_reachable
    assert cache.distances == {}


@pytest.mark.asyncio
async def test_batch_joins_destinations_in_one_request():
    # Arrange
    api = FakeGoogleApi()
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    await maps.get_distance_matrix_batch([PUNE], [LONAVALA, ALIBAG], TransportMode.TRANSIT)

    # Assert
    calls = api.calls("distancematrix")
    assert len(calls) == 1
    assert calls[0].url.params["destinations"] == "18.75,73.4|18.64,72.87"
    assert calls[0].url.params["mode"] == "transit"


@pytest.mark.asyncio
async def test_batch_carries_transit_fare():
    # Arrange
    api = FakeGoogleApi()
    api.default_element = element(
        120_000, 9_000, fare={"value": 145, "currency": "INR", "text": "₹145"}
    )
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    [result] = await maps.get_distance_matrix_batch([PUNE], [LONAVALA], TransportMode.TRANSIT)

    # Assert
    assert result.fare is not None
    assert result.fare.value == 145
    assert result.fare.currency == "INR"


@pytest.mark.asyncio
async def test_batch_top_level_error_raises():
    # Arrange
    api = FakeGoogleApi()
    api.matrix_status = "OVER_QUERY_LIMIT"
    maps = api.service(InMemoryGeoLookupCache())

    # Act / Assert
    with pytest.raises(RemoteApiError):
        await maps.get_distance_matrix_batch([PUNE], [LONAVALA])


@pytest.mark.asyncio
async def test_directions_sample_every_fifth_step():
    # Arrange
    api = FakeGoogleApi()
    api.directions_steps = 11
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    route = await maps.get_directions(PUNE, LONAVALA)

    # Assert
    assert route is not None
    assert route.polyline == "encoded_polyline"
    names = [w.name for w in route.waypoints]
    assert names == ["Start", "Continue on NH0", "Continue on NH5", "Continue on NH10", "End"]
    assert (route.waypoints[0].lat, route.waypoints[0].lng) == (PUNE.lat, PUNE.lng)
    assert (route.waypoints[-1].lat, route.waypoints[-1].lng) == (LONAVALA.lat, LONAVALA.lng)


@pytest.mark.asyncio
async def test_directions_error_status_returns_none():
    # Arrange
    api = FakeGoogleApi()
    api.directions_status = "ZERO_RESULTS"
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    route = await maps.get_directions(PUNE, LONAVALA)

    # Assert
    assert route is None


@pytest.mark.asyncio
async def test_geocode_returns_first_location():
    # Arrange
    api = FakeGoogleApi()
    api.geocode_results["Lonavala, Maharashtra"] = {"lat": 18.75, "lng": 73.4}
    maps = api.service(InMemoryGeoLookupCache())

    # Act
    coords = await maps.geocode("Lonavala, Maharashtra")

    # Assert
    assert coords == LONAVALA


@pytest.mark.asyncio
async def test_geocode_without_results_raises():
    # Arrange
    maps = FakeGoogleApi().service(InMemoryGeoLookupCache())

    # Act / Assert
    with pytest.raises(RemoteApiError, match="Geocoding failed: ZERO_RESULTS"):
        await maps.geocode("Nowhere")


@pytest.mark.asyncio
async def test_http_error_becomes_remote_api_error():
    # Arrange
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(503))
    )
    maps = GoogleMapsService("test-key", InMemoryGeoLookupCache(), client=client)

    # Act / Assert
    with pytest.raises(RemoteApiError) as excinfo:
        await maps.search_places("Pune")
    assert excinfo.value.status == 503


def test_photo_url_contains_reference_and_key():
    # Arrange
    maps = GoogleMapsService("test-key", InMemoryGeoLookupCache())

    # Act
    url = httpx.URL(maps.photo_url("ref-1"))

    # Assert
    assert url.path == "/maps/api/place/photo"
    assert url.params["photoreference"] == "ref-1"
    assert url.params["maxwidth"] == "800"
    assert url.params["key"] == "test-key"
