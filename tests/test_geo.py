import math

import pytest

from src.visit_tracker.visit_tracker.common.geo import Coordinates, haversine_distance
from src.visit_tracker.visit_tracker.core.exceptions import ValidationError

CHENNAI = Coordinates(13.0827, 80.2707)
NEARBY = Coordinates(13.0927, 80.2807)


def test_distance_to_self_is_zero():
    assert haversine_distance(CHENNAI, CHENNAI) == 0.0


def test_distance_is_symmetric():
    pairs = [
        (CHENNAI, NEARBY),
        (Coordinates(51.5074, -0.1278), Coordinates(40.7128, -74.0060)),
        (Coordinates(-33.8688, 151.2093), Coordinates(35.6762, 139.6503)),
    ]
    for a, b in pairs:
        assert math.isclose(haversine_distance(a, b), haversine_distance(b, a), rel_tol=1e-12)


def test_known_distance_about_1_5_km():
    d = haversine_distance(CHENNAI, NEARBY)
    assert 1500 < d < 1600


def test_one_degree_of_latitude_on_the_equator():
    d = haversine_distance(Coordinates(0.0, 0.0), Coordinates(1.0, 0.0))
    assert d == pytest.approx(111_195, rel=1e-3)


def test_antipodal_points_do_not_blow_up():
    d = haversine_distance(Coordinates(0.0, 0.0), Coordinates(0.0, 180.0))
    assert d == pytest.approx(math.pi * 6_371_000, rel=1e-9)


def test_parse_accepts_numeric_strings():
    c = Coordinates.parse("13.0827", "80.2707")
    assert c == CHENNAI


@pytest.mark.parametrize(
    "lat,lng",
    [(None, 80.0), ("abc", 80.0), (91, 0), (-91, 0), (0, 181), (0, -181), (True, 0), ("nan", 0)],
)
def test_parse_rejects_bad_input(lat, lng):
    with pytest.raises(ValidationError):
        Coordinates.parse(lat, lng)


def test_map_link_uses_coordinates():
    assert CHENNAI.map_link() == "https://www.google.com/maps?q=13.0827,80.2707"
