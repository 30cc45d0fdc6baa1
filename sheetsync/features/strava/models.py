"""
Strava activity record.

One completed activity as it is written to an athlete's sheet.
Built once from the Strava list payload and never mutated.
"""

from dataclasses import dataclass, astuple
from typing import Any, Optional

from sheetsync.shared.constants import (
    METERS_PER_KM,
    SECONDS_PER_MINUTE,
    MPS_TO_KMH,
)


def _per(value: Optional[float], divisor: float) -> Optional[float]:
    return None if value is None else value / divisor


def _times(value: Optional[float], factor: float) -> Optional[float]:
    return None if value is None else value * factor


@dataclass(frozen=True)
class ActivityRecord:
    """
    Activity in sheet units.

    Distance in km, duration in minutes, speeds in km/h.
    Optional metrics are None when Strava did not report them
    (e.g. no heart rate monitor) and are written as blank cells.
    """

    id: str
    name: str
    type: str
    distance_km: Optional[float]
    duration_min: Optional[float]
    start_date_local: str
    description: str = ""
    elevation_gain_m: float = 0
    avg_speed_kmh: Optional[float] = None
    max_speed_kmh: Optional[float] = None
    avg_hr: Optional[float] = None
    max_hr: Optional[float] = None
    avg_cadence: Optional[float] = None
    avg_watts: Optional[float] = None
    max_watts: Optional[float] = None
    suffer_score: Optional[float] = None
    kilojoules: Optional[float] = None

    @classmethod
    def from_strava(cls, data: dict[str, Any]) -> "ActivityRecord":
        """
        Convert a raw activity from GET /athlete/activities.

        Args:
            data: Activity summary dict from Strava API

        Returns:
            ActivityRecord with unit-converted fields
        """
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            type=data.get("type") or "",
            distance_km=_per(data.get("distance"), METERS_PER_KM),
            duration_min=_per(data.get("moving_time"), SECONDS_PER_MINUTE),
            start_date_local=data.get("start_date_local") or "",
            description=data.get("description") or "",
            elevation_gain_m=data.get("total_elevation_gain") or 0,
            avg_speed_kmh=_times(data.get("average_speed"), MPS_TO_KMH),
            max_speed_kmh=_times(data.get("max_speed"), MPS_TO_KMH),
            avg_hr=data.get("average_heartrate"),
            max_hr=data.get("max_heartrate"),
            avg_cadence=data.get("average_cadence"),
            avg_watts=data.get("average_watts"),
            max_watts=data.get("max_watts"),
            suffer_score=data.get("suffer_score"),
            kilojoules=data.get("kilojoules"),
        )

    def to_row(self) -> list:
        """Sheet row in ACTIVITY_HEADERS column order."""
        row = [_blank_if_none(value) for value in astuple(self)]
        row[3] = _fixed(self.distance_km, 2)
        row[4] = _fixed(self.duration_min, 2)
        row[8] = _fixed(self.avg_speed_kmh, 1)
        row[9] = _fixed(self.max_speed_kmh, 1)
        return row


def _blank_if_none(value):
    return "" if value is None else value


def _fixed(value: Optional[float], digits: int) -> str:
    if value is None:
        return ""
    return f"{value:.{digits}f}"
