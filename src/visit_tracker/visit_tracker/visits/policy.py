from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..common.geo import Coordinates, haversine_distance


@dataclass(frozen=True)
class MismatchDecision:
    distance_meters: Optional[float]
    location_mismatch: bool


class LocationMismatchPolicy(ABC):
    """Strategy Pattern: decide whether a check-out strayed from its check-in."""

    @abstractmethod
    def evaluate(
        self,
        *,
        check_in: Optional[Coordinates],
        check_out: Coordinates,
        threshold_m: int,
    ) -> MismatchDecision:
        raise NotImplementedError


class DistanceThresholdPolicy(LocationMismatchPolicy):
    """Mismatch when the great-circle distance is strictly above the threshold.

    Visits recorded without check-in coordinates cannot be measured and are never flagged.
    """

    def evaluate(
        self,
        *,
        check_in: Optional[Coordinates],
        check_out: Coordinates,
        threshold_m: int,
    ) -> MismatchDecision:
        if check_in is None:
            return MismatchDecision(distance_meters=None, location_mismatch=False)
        distance = haversine_distance(check_in, check_out)
        return MismatchDecision(distance_meters=distance, location_mismatch=distance > threshold_m)
