from __future__ import annotations

import re
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from app.core.logging import logger
from app.models.city_destination import TransportMode
from app.schemas.geo import (
    Coordinates,
    DirectionsResult,
    DistanceResult,
    PlaceDetails,
    PlaceSummary,
    TransitFare,
    Waypoint,
)
from app.services.geo_cache import CachedDistance, GeoLookupCache
from app.services.geo_common import round_half_up
from app.services.google_maps_errors import GeoConfigurationError, RemoteApiError

GOOGLE_TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
GOOGLE_PLACE_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
GOOGLE_PLACE_PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"
GOOGLE_DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
GOOGLE_DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
GOOGLE_GEOCODING_URL = "https://maps.googleapis.com/maps/api/geocode/json"

PLACE_DETAILS_FIELDS = (
    "name,formatted_address,rating,user_ratings_total,types,opening_hours,"
    "website,formatted_phone_number,reviews,photos,editorial_summary,geometry"
)

# Keep every Nth step of a route leg as a named waypoint.
WAYPOINT_STEP_INTERVAL = 5

_HTML_TAG = re.compile(r"<[^>]*>")


class GoogleMapsService:
    """Client for the Google Maps web services used by seeding.

    Place details and single-pair distance lookups go through ``cache``
    first; a cache hit never needs the API key. Everything else always
    calls Google.

    Args:
        api_key: Google Maps API key. May be empty; calls that need the
            network then raise :class:`GeoConfigurationError`.
        cache: Persistent lookup cache.
        client: Optional shared ``httpx.AsyncClient``. When omitted a
            short-lived client is opened per request.
        timeout: Per-request timeout in seconds for short-lived clients.
    """

    def __init__(
        self,
        api_key: str,
        cache: GeoLookupCache,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.cache = cache
        self._client = client
        self._timeout = timeout
        if not api_key:
            logger.warning("Google Maps API key not set; only cached lookups will work")

    async def search_places(self, query: str) -> list[PlaceSummary]:
        """Free-text place search. Not cached.

        Returns:
            Matching places in Google's order; empty on ``ZERO_RESULTS``.
        """
        data = await self._get_json(GOOGLE_TEXT_SEARCH_URL, {"query": query})
        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            raise RemoteApiError(f"Places Search API error: {status}", status=status)

        places: list[PlaceSummary] = []
        for raw in data.get("results") or []:
            try:
                places.append(PlaceSummary.from_api(raw))
            except (KeyError, ValidationError) as exc:
                logger.warning("Ignoring malformed search result for %r: %s", query, exc)
        return places

    async def get_place_details(self, place_id: str) -> PlaceDetails:
        """Return place details, from the cache when available."""
        cached = await self.cache.get_place_details(place_id)
        if cached is not None:
            return PlaceDetails.from_api(place_id, cached)

        data = await self._get_json(
            GOOGLE_PLACE_DETAILS_URL,
            {"place_id": place_id, "fields": PLACE_DETAILS_FIELDS},
        )
        status = data.get("status")
        if status != "OK":
            raise RemoteApiError(f"Places API error: {status}", status=status)

        result = data.get("result") or {}
        await self.cache.put_place_details(place_id, result)
        return PlaceDetails.from_api(place_id, result)

    async def get_distance_matrix(
        self,
        origin: Coordinates,
        destination: Coordinates,
        mode: TransportMode = TransportMode.DRIVING,
    ) -> DistanceResult:
        """Distance and duration for one pair, cached by exact coordinates and mode.

        Raises:
            RemoteApiError: If Google reports an error or no route for the pair.
        """
        cached = await self.cache.get_distance(origin, destination, mode)
        if cached is not None:
            return DistanceResult(
                distance_km=round_half_up(cached.distance_meters / 1000),
                duration_minutes=round_half_up(cached.duration_seconds / 60),
                cached=True,
            )

        data = await self._get_json(
            GOOGLE_DISTANCE_MATRIX_URL,
            {
                "origins": origin.as_param(),
                "destinations": destination.as_param(),
                "mode": mode.value,
            },
        )
        status = data.get("status")
        if status != "OK":
            raise RemoteApiError(f"Google Maps API error: {status}", status=status)

        rows = data.get("rows") or []
        elements = (rows[0].get("elements") or []) if rows else []
        element = elements[0] if elements else None
        if not element or element.get("status") != "OK":
            raise RemoteApiError(
                "No route found", status=(element or {}).get("status")
            )

        entry = CachedDistance(
            distance_meters=element["distance"]["value"],
            duration_seconds=element["duration"]["value"],
            distance_text=element["distance"].get("text"),
            duration_text=element["duration"].get("text"),
        )
        await self.cache.put_distance(origin, destination, mode, entry)
        return DistanceResult(
            distance_km=round_half_up(entry.distance_meters / 1000),
            duration_minutes=round_half_up(entry.duration_seconds / 60),
            cached=False,
        )

    async def get_distance_matrix_batch(
        self,
        origins: Sequence[Coordinates],
        destinations: Sequence[Coordinates],
        mode: TransportMode = TransportMode.DRIVING,
    ) -> list[DistanceResult]:
        """One request for the first origin against many destinations.

        Bypasses the pairwise cache so freshly discovered places always get
        current figures. Elements Google cannot route become
        :meth:`DistanceResult.unreachable` placeholders instead of failing the
        batch.

        Returns:
            One result per destination, in input order.
        """
        data = await self._get_json(
            GOOGLE_DISTANCE_MATRIX_URL,
            {
                "origins": "|".join(o.as_param() for o in origins),
                "destinations": "|".join(d.as_param() for d in destinations),
                "mode": mode.value,
            },
        )
        status = data.get("status")
        if status != "OK":
            raise RemoteApiError(f"Google Maps API error: {status}", status=status)

        rows = data.get("rows") or []
        if not rows:
            return []

        results: list[DistanceResult] = []
        for element in rows[0].get("elements") or []:
            element_status = element.get("status")
            if element_status != "OK":
                results.append(DistanceResult.unreachable(element_status or "UNKNOWN"))
                continue
            fare = element.get("fare")
            results.append(
                DistanceResult(
                    distance_km=round_half_up(element["distance"]["value"] / 1000),
                    duration_minutes=round_half_up(element["duration"]["value"] / 60),
                    fare=TransitFare.model_validate(fare) if fare else None,
                )
            )
        return results

    async def get_directions(
        self,
        origin: Coordinates,
        destination: Coordinates,
        mode: TransportMode = TransportMode.DRIVING,
    ) -> DirectionsResult | None:
        """Route polyline and a thinned list of named waypoints.

        Returns ``None`` instead of raising when Google has no route, so a
        missing route never aborts the caller.
        """
        data = await self._get_json(
            GOOGLE_DIRECTIONS_URL,
            {
                "origin": origin.as_param(),
                "destination": destination.as_param(),
                "mode": mode.value,
            },
        )
        status = data.get("status")
        if status != "OK":
            logger.warning("Directions API error: %s", status)
            return None

        routes = data.get("routes") or []
        if not routes:
            return None
        route = routes[0]
        leg = (route.get("legs") or [{}])[0]

        start = leg.get("start_location") or origin.model_dump()
        end = leg.get("end_location") or destination.model_dump()
        waypoints = [Waypoint(name="Start", lat=start["lat"], lng=start["lng"])]
        for i, step in enumerate(leg.get("steps") or []):
            if i % WAYPOINT_STEP_INTERVAL != 0:
                continue
            location = step["end_location"]
            waypoints.append(
                Waypoint(
                    name=_HTML_TAG.sub("", step.get("html_instructions", "")),
                    lat=location["lat"],
                    lng=location["lng"],
                )
            )
        waypoints.append(Waypoint(name="End", lat=end["lat"], lng=end["lng"]))

        return DirectionsResult(
            polyline=(route.get("overview_polyline") or {}).get("points", ""),
            waypoints=waypoints,
            distance_text=(leg.get("distance") or {}).get("text"),
            duration_text=(leg.get("duration") or {}).get("text"),
        )

    async def geocode(self, address: str) -> Coordinates:
        """Forward-geocode an address.

        Raises:
            RemoteApiError: If Google returns no result.
        """
        data = await self._get_json(GOOGLE_GEOCODING_URL, {"address": address})
        status = data.get("status")
        results = data.get("results") or []
        if status != "OK" or not results:
            raise RemoteApiError(f"Geocoding failed: {status}", status=status)
        location = results[0]["geometry"]["location"]
        return Coordinates(lat=location["lat"], lng=location["lng"])

    def photo_url(self, photo_reference: str, max_width: int = 800) -> str:
        """Public Places photo URL for a photo reference."""
        return str(
            httpx.URL(
                GOOGLE_PLACE_PHOTO_URL,
                params={
                    "maxwidth": max_width,
                    "photoreference": photo_reference,
                    "key": self.api_key,
                },
            )
        )

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise GeoConfigurationError("Google Maps API key not configured")

        query = {**params, "key": self.api_key}
        try:
            if self._client is not None:
                resp = await self._client.get(url, params=query)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(url, params=query)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteApiError(
                f"Google Maps request failed: {exc}",
                status=exc.response.status_code,
            ) from exc
        return resp.json()
