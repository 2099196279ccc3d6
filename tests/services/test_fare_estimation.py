import pytest

from app.models.city_destination import TransportMode
from app.schemas.geo import DistanceResult, TransitFare
from app.services.fare_estimation import (
    DRIVING_BOOKING_LINKS,
    TRANSIT_BOOKING_LINKS,
    estimate_fare,
    get_best_visit_time,
)


def test_driving_fare_uses_per_km_rates():
    # Act
    estimate = estimate_fare(TransportMode.DRIVING, 100)

    # Assert
    assert estimate.fare == {"fuel": 700, "toll": 200, "total": 900, "taxi": 1500}
    assert estimate.links == DRIVING_BOOKING_LINKS


def test_driving_fare_accepts_mode_string():
    # Act
    estimate = estimate_fare("driving", 10)

    # Assert
    assert estimate.fare["total"] == 90


def test_transit_fare_without_google_fare_estimates_train_and_bus():
    # Act
    estimate = estimate_fare(TransportMode.TRANSIT, 100)

    # Assert
    assert estimate.fare == {"bus": 250, "train": 150}
    assert estimate.links == TRANSIT_BOOKING_LINKS


def test_transit_fare_rounds_half_up():
    # Act
    estimate = estimate_fare(TransportMode.TRANSIT, 1)

    # Assert
    assert estimate.fare == {"bus": 3, "train": 2}


def test_transit_fare_prefers_reported_fare():
    # Arrange
    details = DistanceResult(
        distance_km=100,
        duration_minutes=150,
        fare=TransitFare(value=185, currency="INR", text="₹185"),
    )

    # Act
    estimate = estimate_fare(TransportMode.TRANSIT, 100, details)

    # Assert
    assert estimate.fare == {"bus": 0, "train": 185}


def test_transit_details_without_fare_fall_back_to_rates():
    # Arrange
    details = DistanceResult(distance_km=40, duration_minutes=60)

    # Act
    estimate = estimate_fare(TransportMode.TRANSIT, 40, details)

    # Assert
    assert estimate.fare == {"bus": 100, "train": 60}


def test_unknown_mode_is_rejected():
    # Act / Assert
    with pytest.raises(ValueError):
        estimate_fare("flying", 100)


@pytest.mark.parametrize(
    "category,expected",
    [
        ("hill_station", ["March", "April", "May", "October", "November"]),
        ("beach", ["October", "November", "December", "January", "February"]),
        ("nature", ["July", "August", "September", "October"]),
        ("waterfall", ["July", "August", "September", "October"]),
        (
            "wildlife",
            ["October", "November", "December", "January", "February", "March"],
        ),
        (
            "spiritual",
            ["October", "November", "December", "January", "February", "March"],
        ),
    ],
)
def test_best_visit_time_by_category(category, expected):
    # Act
    best = get_best_visit_time(category)

    # Assert
    assert best.best_months == expected


def test_best_visit_time_returns_independent_lists():
    # Arrange
    first = get_best_visit_time("beach")

    # Act
    first.best_months.append("June")

    # Assert
    assert "June" not in get_best_visit_time("beach").best_months
