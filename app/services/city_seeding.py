"""Seed a city with nearby weekend-getaway destinations.

Pipeline for one run, strictly sequential:

1. Resolve the city from the database, or create it from the first Google
   text-search hit.
2. For every search category, text-search ``"{term} near {city}"`` and look
   at the first few places. Places named after the city itself are skipped
   (beaches excepted), places already stored are de-duplicated by slug, new
   ones are created with their first photos.
3. For the category's destinations, fetch driving and transit distances from
   the city centre in one batch request per mode.
4. Per destination: directions, fare, live weather/AQI and best visit months,
   then upsert one city-destination link per reachable mode.

Only a failure to resolve the city aborts the run. Everything else is
logged and the run carries on, so the returned log is the record of why a
place was or was not added.

Usage:
    result = await seed_city_nearby(
        "Pune", admin.id, store=SqlSeedStore(db), maps=maps
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, NamedTuple, Sequence

from app.core.logging import logger, seed_logger
from app.models.city import City
from app.models.city_destination import TransportMode
from app.models.destination import Destination, DestinationPhoto
from app.schemas.enrichment import WeatherReport
from app.schemas.geo import Coordinates, DirectionsResult, DistanceResult, PlaceDetails, PlaceSummary
from app.services.fare_estimation import estimate_fare, get_best_visit_time
from app.services.geo_common import city_slug, destination_slug, round_half_up
from app.services.google_maps import GoogleMapsService
from app.services.seed_store import SeedStore
from app.services.weather_service import get_real_weather_and_aqi


class SearchCategory(NamedTuple):
    term: str
    code: str


SEARCH_CATEGORIES: tuple[SearchCategory, ...] = (
    SearchCategory("Hill Stations", "hill_station"),
    SearchCategory("Beaches", "beach"),
    SearchCategory("Forts", "historical"),
    SearchCategory("Waterfalls", "nature"),
    SearchCategory("Temples", "spiritual"),
    SearchCategory("Wildlife Sanctuaries", "wildlife"),
    SearchCategory("Trekking Points", "adventure"),
    SearchCategory("Lakes", "nature"),
)

# Places considered per category search; keeps API spend per run bounded.
MAX_PLACES_PER_CATEGORY = 5
MAX_PHOTOS_PER_DESTINATION = 3

UNKNOWN_STATE = "Unknown"

WeatherLookup = Callable[[float, float], Awaitable[WeatherReport | None]]


class CityNotFoundError(RuntimeError):
    """Raised when the requested city is neither stored nor found on Google."""

    def __init__(self, city_name: str) -> None:
        super().__init__(f"Could not find city: {city_name}")
        self.city_name = city_name


@dataclass
class SeedRunResult:
    city_id: int
    city_name: str
    destinations_created: int
    logs: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SeededCity:
    """Plain snapshot of a stored city.

    Stages pass snapshots rather than ORM instances: a failed write rolls the
    shared session back and expires every loaded row, and the run must keep
    going after that.
    """

    id: int
    name: str
    center: Coordinates

    @classmethod
    def of(cls, city: City) -> "SeededCity":
        return cls(
            id=city.id,
            name=city.name,
            center=Coordinates(lat=city.latitude, lng=city.longitude),
        )


@dataclass(frozen=True)
class SeededDestination:
    id: int
    name: str
    category: str
    location: Coordinates

    @classmethod
    def of(cls, destination: Destination) -> "SeededDestination":
        return cls(
            id=destination.id,
            name=destination.name,
            category=destination.category,
            location=Coordinates(lat=destination.latitude, lng=destination.longitude),
        )


class SeedLog:
    """Human-readable run log, mirrored to the application logger."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def info(self, message: str) -> None:
        seed_logger.info(message)
        self.lines.append(message)

    def error(self, message: str, error: BaseException | None = None) -> None:
        line = f"ERROR: {message} {error}" if error is not None else f"ERROR: {message}"
        seed_logger.error(line, exc_info=error)
        self.lines.append(line)


def is_self_match(place_name: str, city_name: str) -> bool:
    """True when a search hit is the city itself rather than a getaway.

    Names containing "beach" are never treated as self matches: "Goa Beach"
    near Goa is a legitimate result.
    """
    place = place_name.lower()
    return city_name.lower() in place and "beach" not in place


class CitySeeder:
    """One seeding run's stages as separately awaitable units.

    ``run`` drives them one at a time; the stages take everything they need
    as arguments so they can also be scheduled independently.

    Args:
        store: Persistence for cities, destinations, photos and links.
        maps: Google Maps client (with its lookup cache).
        weather_lookup: Coroutine returning live conditions for a coordinate,
            or ``None`` when unavailable.
        categories: Ordered search categories.
    """

    def __init__(
        self,
        store: SeedStore,
        maps: GoogleMapsService,
        *,
        weather_lookup: WeatherLookup = get_real_weather_and_aqi,
        categories: Sequence[SearchCategory] = SEARCH_CATEGORIES,
    ) -> None:
        self.store = store
        self.maps = maps
        self.weather_lookup = weather_lookup
        self.categories = categories
        self.log = SeedLog()

    async def run(self, city_name: str) -> SeedRunResult:
        self.log.info(f"Seeding nearby weekend getaways for: {city_name}")
        try:
            city = await self.resolve_city(city_name)
        except Exception as exc:
            self.log.error("Seeding failed:", exc)
            raise

        created = 0
        for category in self.categories:
            created += await self.seed_category(city, category)

        self.log.info("Nearby seeding complete!")
        return SeedRunResult(
            city_id=city.id,
            city_name=city.name,
            destinations_created=created,
            logs=self.log.lines,
        )

    async def resolve_city(self, city_name: str) -> SeededCity:
        """Find the city by name/slug, or create it from Google text search.

        Raises:
            CityNotFoundError: If Google returns no match for the name.
        """
        existing = await self.store.find_city(city_name)
        if existing is not None:
            city = SeededCity.of(existing)
            self.log.info(f"Found existing city: {city.name}")
            return city

        self.log.info(f"City {city_name} not found in DB. Searching Google Maps...")
        results = await self.maps.search_places(city_name)
        if not results:
            self.log.error(f"Could not find city: {city_name}")
            raise CityNotFoundError(city_name)

        match = results[0]
        # Google may canonicalize the name to a city we already have.
        existing = await self.store.find_city(match.name)
        if existing is not None:
            city = SeededCity.of(existing)
            self.log.info(f"Found existing city: {city.name}")
            return city

        # Details are fetched for the places cache; coordinates come from the hit.
        await self.maps.get_place_details(match.place_id)
        created = await self.store.add_city(
            City(
                name=match.name,
                slug=city_slug(match.name),
                state=UNKNOWN_STATE,
                latitude=match.location.lat,
                longitude=match.location.lng,
                is_active=True,
            )
        )
        city = SeededCity.of(created)
        self.log.info(f"Created city: {city.name}")
        return city

    async def seed_category(self, city: SeededCity, category: SearchCategory) -> int:
        """Discover, create and link one category. Returns destinations created."""
        batch, created = await self.discover_places(city, category)
        if batch:
            await self.link_destinations(city, batch)
        return created

    async def discover_places(
        self, city: SeededCity, category: SearchCategory
    ) -> tuple[list[SeededDestination], int]:
        """Turn a category search into destinations that need linking.

        Returns:
            The destinations to link (new ones plus existing ones not yet
            linked to ``city``) and the number newly created.
        """
        query = f"{category.term} near {city.name}"
        self.log.info(f"Searching for: {query}")
        try:
            places = await self.maps.search_places(query)
        except Exception as exc:
            self.log.error(f"Search failed for {query}:", exc)
            return [], 0
        self.log.info(f"  -> Found {len(places)} potential places")

        batch: list[SeededDestination] = []
        created = 0
        for place in places[:MAX_PLACES_PER_CATEGORY]:
            if is_self_match(place.name, city.name):
                continue

            slug = destination_slug(place.name)
            try:
                existing = await self.store.find_destination_by_slug(slug)
                if existing is not None:
                    known = SeededDestination.of(existing)
                    self.log.info(f"  -> Skipping {place.name} (already exists)")
                    if not await self.store.is_linked(city.id, known.id):
                        batch.append(known)
                    continue

                details = await self.maps.get_place_details(place.place_id)
                destination = await self.create_destination(
                    city, category, place, details, slug
                )
                batch.append(destination)
                created += 1
                await self.save_photos(destination, details)
            except Exception as exc:
                self.log.error(f"  -> Failed to process {place.name}:", exc)

        return batch, created

    async def create_destination(
        self,
        city: SeededCity,
        category: SearchCategory,
        place: PlaceSummary,
        details: PlaceDetails,
        slug: str,
    ) -> SeededDestination:
        term = category.term.lower()
        photos = details.photos
        stored = await self.store.add_destination(
            Destination(
                name=place.name,
                slug=slug,
                category=category.code,
                ai_enhanced_summary=details.editorial_summary
                or f"A beautiful {term} near {city.name}.",
                short_summary=f"Famous {term} known for its scenic beauty.",
                latitude=place.location.lat,
                longitude=place.location.lng,
                image_url=self.maps.photo_url(photos[0].photo_reference) if photos else None,
                is_active=True,
            )
        )
        destination = SeededDestination.of(stored)
        self.log.info(f"  -> Created destination: {destination.name}")
        return destination

    async def save_photos(
        self, destination: SeededDestination, details: PlaceDetails
    ) -> None:
        """Store the first few place photos; the first one is primary."""
        for index, photo in enumerate(details.photos[:MAX_PHOTOS_PER_DESTINATION]):
            await self.store.add_photo(
                DestinationPhoto(
                    destination_id=destination.id,
                    photo_url=self.maps.photo_url(photo.photo_reference),
                    photo_reference=photo.photo_reference,
                    width=photo.width,
                    height=photo.height,
                    attribution=photo.html_attributions[0] if photo.html_attributions else None,
                    is_primary=index == 0,
                )
            )

    async def link_destinations(
        self, city: SeededCity, batch: list[SeededDestination]
    ) -> None:
        """Batch distances for ``batch`` then enrich and link each destination."""
        self.log.info(f"  -> Calculating travel times for {len(batch)} places...")
        coords = [d.location for d in batch]

        driving = await self._batch_distances(city.center, coords, TransportMode.DRIVING)
        transit = await self._batch_distances(city.center, coords, TransportMode.TRANSIT)

        for destination, drive, ride in zip(batch, driving, transit):
            try:
                await self.enrich_and_link(city, destination, drive, ride)
            except Exception as exc:
                self.log.error(f"  -> Failed to link {destination.name}:", exc)

    async def enrich_and_link(
        self,
        city: SeededCity,
        destination: SeededDestination,
        driving: DistanceResult,
        transit: DistanceResult,
    ) -> None:
        """Refresh a destination's live data and upsert its links to ``city``.

        A destination reachable by neither mode ends up without links for
        this city; that is logged, not treated as an error.
        """
        route: DirectionsResult | None = None
        if driving.is_reachable:
            try:
                route = await self.maps.get_directions(
                    city.center, destination.location, TransportMode.DRIVING
                )
            except Exception as exc:
                self.log.info(f"  -> Failed to get directions for {destination.name}: {exc}")

        report = await self.weather_lookup(destination.location.lat, destination.location.lng)
        if report is None:
            self.log.info(f"  -> Live weather unavailable for {destination.name}")
        best_time = get_best_visit_time(destination.category)

        await self.store.update_destination_enrichment(
            destination.id,
            weather_info=report.weather.model_dump() if report else None,
            air_quality=report.aqi.model_dump() if report else None,
            best_visit_time=best_time.model_dump(),
        )

        if driving.is_reachable:
            estimate = estimate_fare(TransportMode.DRIVING, driving.distance_km)
            await self.store.upsert_city_destination(
                city.id,
                destination.id,
                TransportMode.DRIVING,
                {
                    "distance_km": driving.distance_km,
                    "travel_time_minutes": driving.duration_minutes,
                    "estimated_fuel_cost": estimate.fare["total"],
                    "estimated_transport_cost": estimate.fare["taxi"],
                    "route_polyline": route.polyline if route else None,
                    "major_waypoints": (
                        [w.model_dump() for w in route.waypoints] if route else []
                    ),
                    "fare_details": estimate.fare,
                    "booking_links": estimate.links,
                },
            )

        if transit.is_reachable:
            estimate = estimate_fare(TransportMode.TRANSIT, transit.distance_km, transit)
            await self.store.upsert_city_destination(
                city.id,
                destination.id,
                TransportMode.TRANSIT,
                {
                    "distance_km": transit.distance_km,
                    "travel_time_minutes": transit.duration_minutes,
                    "estimated_transport_cost": round_half_up(
                        estimate.fare["train"] or estimate.fare["bus"]
                    ),
                    "fare_details": estimate.fare,
                    "booking_links": estimate.links,
                },
            )

        if not driving.is_reachable and not transit.is_reachable:
            self.log.info(f"  -> No route from {city.name} to {destination.name}; not linked")

    async def _batch_distances(
        self, center: Coordinates, coords: list[Coordinates], mode: TransportMode
    ) -> list[DistanceResult]:
        try:
            results = await self.maps.get_distance_matrix_batch([center], coords, mode)
        except Exception as exc:
            self.log.error(f"  -> Failed to calculate {mode.value} travel times:", exc)
            results = []
        # Pad so every destination still gets its enrichment pass.
        missing = len(coords) - len(results)
        return results[: len(coords)] + [DistanceResult.unreachable("MISSING")] * max(0, missing)


async def seed_city_nearby(
    city_name: str,
    admin_user_id: int,
    *,
    store: SeedStore,
    maps: GoogleMapsService,
    weather_lookup: WeatherLookup = get_real_weather_and_aqi,
) -> SeedRunResult:
    """Seed ``city_name`` with nearby destinations on behalf of an admin.

    Args:
        city_name: City to seed, as typed by the admin.
        admin_user_id: Id of the admin triggering the run.
        store: Persistence layer.
        maps: Google Maps client.
        weather_lookup: Live weather provider.

    Returns:
        The resolved city, the number of destinations created and the run log.

    Raises:
        CityNotFoundError: If Google has no match for an unknown city.
        GoogleMapsError: If the lookup needed to resolve the city fails.
    """
    logger.info("Admin %s started seeding for %s", admin_user_id, city_name)
    seeder = CitySeeder(store, maps, weather_lookup=weather_lookup)
    return await seeder.run(city_name)
