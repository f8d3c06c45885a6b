from __future__ import annotations

import hashlib
import hmac
import io
from datetime import date
from typing import Mapping, Optional

import qrcode
from werkzeug.security import check_password_hash

from ..common.datetime_utils import parse_clock
from ..common.validators import require_float_in_range, require_int_in_range, require_non_empty
from ..core.constants import DAILY_CODE_TOKEN_LENGTH
from ..core.exceptions import NotFoundError, ValidationError
from .model import QRAttendanceConfig, QRConfigUpdate
from .repository import QRConfigRepository

DEFAULT_PREFIX = "ATT"


class QRCodeService:
    """Daily attendance code, code validation and the QR page PIN.

    The daily code is ``{prefix}-{YYYYMMDD}-{token}`` where the token is an
    HMAC of prefix and date, so a code is only valid on the day it encodes.
    """

    def __init__(self, configs: QRConfigRepository, *, secret: str):
        if not secret:
            raise ValueError("QR secret must not be empty")
        self._configs = configs
        self._secret = secret.encode("utf-8")

    def _prefix(self) -> str:
        config = self._configs.get_config()
        return config.qr_code_prefix if config else DEFAULT_PREFIX

    def _token(self, prefix: str, day: date) -> str:
        message = f"{prefix}|{day:%Y%m%d}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()[:DAILY_CODE_TOKEN_LENGTH]

    def get_daily_code(self, today: date) -> str:
        prefix = self._prefix()
        return f"{prefix}-{today:%Y%m%d}-{self._token(prefix, today)}"

    def validate_code(self, code: str, today: date) -> bool:
        candidate = (code or "").strip()
        if not candidate:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self.get_daily_code(today).encode("utf-8"))

    def verify_access_pin(self, pin: str) -> bool:
        config = self._configs.get_config()
        if not config or not config.access_pin_hash or not pin:
            return False
        try:
            return check_password_hash(config.access_pin_hash, pin)
        except ValueError:
            return False

    @staticmethod
    def render_png(text: str) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=2,
        )
        qr.add_data(text)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()


class QRConfigService:
    """Use cases: view and edit the organization QR configuration."""

    def __init__(self, configs: QRConfigRepository):
        self._configs = configs

    def get_config(self) -> QRAttendanceConfig:
        config = self._configs.get_config()
        if not config:
            raise NotFoundError("No configuration found")
        return config

    def find_config(self) -> Optional[QRAttendanceConfig]:
        return self._configs.get_config()

    @staticmethod
    def parse_form(form: Mapping[str, str]) -> QRConfigUpdate:
        try:
            start = parse_clock(form.get("work_start_time", ""))
            end = parse_clock(form.get("work_end_time", ""))
        except ValueError:
            raise ValidationError("Work times must use HH:MM")

        if start and end and end <= start:
            raise ValidationError("Work end time must be after work start time")

        enabled = str(form.get("location_validation_enabled", "")).lower() in {"1", "true", "on", "yes"}

        return QRConfigUpdate(
            organization_name=require_non_empty(form.get("organization_name", ""), "Organization name"),
            qr_code_prefix=require_non_empty(form.get("qr_code_prefix", ""), "QR code prefix"),
            work_start_time=start,
            work_end_time=end,
            late_threshold_minutes=require_int_in_range(
                form.get("late_threshold_minutes", ""), "Late threshold", 0, 60
            ),
            location_validation_enabled=enabled,
            allowed_latitude=require_float_in_range(form.get("allowed_latitude", ""), "Latitude", -90, 90),
            allowed_longitude=require_float_in_range(form.get("allowed_longitude", ""), "Longitude", -180, 180),
            geofence_radius_meters=require_int_in_range(
                form.get("geofence_radius_meters", ""), "Geofence radius", 10, 1000
            ),
        )

    def update_config(self, form: Mapping[str, str]) -> QRAttendanceConfig:
        config = self.get_config()
        update = self.parse_form(form)
        if not self._configs.update_config(config.config_id, update):
            raise ValidationError("Failed to update configuration")
        return self.get_config()

    def capture_location(self, *, latitude, longitude) -> QRAttendanceConfig:
        """Store the device's current coordinates as the geofence center."""
        config = self.get_config()
        lat = require_float_in_range(latitude, "Latitude", -90, 90)
        lng = require_float_in_range(longitude, "Longitude", -180, 180)
        if not self._configs.update_location(config.config_id, latitude=lat, longitude=lng):
            raise ValidationError("Failed to update location")
        return self.get_config()
