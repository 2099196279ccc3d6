"""Deterministic fare and best-visit-time estimates for destination links.

All prices are in INR and intentionally coarse: a per-kilometre rate per
fare component, rounded half-up to whole rupees.
"""

from __future__ import annotations

from app.models.city_destination import TransportMode
from app.schemas.enrichment import BestVisitTime, FareEstimate
from app.schemas.geo import DistanceResult
from app.services.geo_common import round_half_up

FUEL_RATE_PER_KM = 7
TOLL_RATE_PER_KM = 2
TAXI_RATE_PER_KM = 15
TRAIN_RATE_PER_KM = 1.5
BUS_RATE_PER_KM = 2.5

DRIVING_BOOKING_LINKS = {
    "rental": "https://www.zoomcar.com",
    "taxi": "https://www.uber.com",
}
TRANSIT_BOOKING_LINKS = {
    "bus": "https://www.redbus.in",
    "train": "https://www.irctc.co.in",
}

_BEST_MONTHS: dict[str, list[str]] = {
    "hill_station": ["March", "April", "May", "October", "November"],
    "beach": ["October", "November", "December", "January", "February"],
    "wildlife": ["October", "November", "December", "January", "February", "March"],
    "nature": ["July", "August", "September", "October"],
    "waterfall": ["July", "August", "September", "October"],
}
_DEFAULT_BEST_MONTHS = ["October", "November", "December", "January", "February", "March"]


def estimate_fare(
    mode: TransportMode | str,
    distance_km: float,
    transit_details: DistanceResult | None = None,
) -> FareEstimate:
    """Estimate fare components for a trip of ``distance_km``.

    Driving costs fuel plus tolls, with a taxi estimate alongside. Transit
    uses the fare Google reported for the route when there is one (booked as
    train, bus left at zero), otherwise per-km train and bus estimates.

    Args:
        mode: ``"driving"`` or ``"transit"``.
        distance_km: Trip distance in kilometres.
        transit_details: Transit distance result, possibly carrying a fare.

    Returns:
        Fare components and matching booking links.
    """
    if TransportMode(mode) is TransportMode.DRIVING:
        fuel = round_half_up(distance_km * FUEL_RATE_PER_KM)
        toll = round_half_up(distance_km * TOLL_RATE_PER_KM)
        return FareEstimate(
            fare={
                "fuel": fuel,
                "toll": toll,
                "total": fuel + toll,
                "taxi": round_half_up(distance_km * TAXI_RATE_PER_KM),
            },
            links=dict(DRIVING_BOOKING_LINKS),
        )

    if transit_details is not None and transit_details.fare is not None:
        train: int | float = transit_details.fare.value
        bus: int | float = 0
    else:
        train = round_half_up(distance_km * TRAIN_RATE_PER_KM)
        bus = round_half_up(distance_km * BUS_RATE_PER_KM)
    return FareEstimate(
        fare={"bus": bus, "train": train},
        links=dict(TRANSIT_BOOKING_LINKS),
    )


def get_best_visit_time(category: str) -> BestVisitTime:
    """Favourable months for a destination category, winter by default."""
    return BestVisitTime(best_months=list(_BEST_MONTHS.get(category, _DEFAULT_BEST_MONTHS)))
