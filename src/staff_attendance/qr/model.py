from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.constants import (
    DEFAULT_GEOFENCE_RADIUS_METERS,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
)


@dataclass(frozen=True)
class QRAttendanceConfig:
    """Organization-wide QR attendance settings (singleton row)."""

    config_id: int
    organization_name: str
    qr_code_prefix: str
    work_start_time: Optional[time] = None
    work_end_time: Optional[time] = None
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES
    location_validation_enabled: bool = False
    allowed_latitude: Optional[float] = DEFAULT_LATITUDE
    allowed_longitude: Optional[float] = DEFAULT_LONGITUDE
    geofence_radius_meters: int = DEFAULT_GEOFENCE_RADIUS_METERS
    access_pin_hash: Optional[str] = None


@dataclass(frozen=True)
class QRConfigUpdate:
    """Validated form values for an update of the singleton."""

    organization_name: str
    qr_code_prefix: str
    work_start_time: Optional[time]
    work_end_time: Optional[time]
    late_threshold_minutes: int
    location_validation_enabled: bool
    allowed_latitude: float
    allowed_longitude: float
    geofence_radius_meters: int
