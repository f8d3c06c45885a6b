from __future__ import annotations

from typing import Optional, Protocol

from .model import QRAttendanceConfig, QRConfigUpdate


class QRConfigRepository(Protocol):
    def get_config(self) -> Optional[QRAttendanceConfig]:
        raise NotImplementedError

    def update_config(self, config_id: int, update: QRConfigUpdate) -> bool:
        raise NotImplementedError

    def update_location(self, config_id: int, *, latitude: float, longitude: float) -> bool:
        raise NotImplementedError
