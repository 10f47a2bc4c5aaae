"""Device fingerprint used as key material for URL encryption."""

import locale
import platform
import time
from datetime import datetime
from typing import Protocol

from pydantic import BaseModel
from tzlocal import get_localzone_name

from busical.config import BusiCalConfig

FINGERPRINT_SEPARATOR = "|"


class DeviceCharacteristics(BaseModel):
    """Stable, readily available characteristics of the local device."""

    user_agent: str
    language: str
    screen_width: int = 0
    screen_height: int = 0
    color_depth: int = 0
    # Minutes behind UTC (UTC+1 is -60)
    timezone_offset: int = 0
    timezone_name: str = ""

    def fingerprint(self) -> str:
        """Build the deterministic fingerprint string for this device."""
        components = [
            self.user_agent,
            self.language,
            str(self.screen_width),
            str(self.screen_height),
            str(self.color_depth),
            str(self.timezone_offset),
            self.timezone_name,
        ]
        return FINGERPRINT_SEPARATOR.join(components)


class DeviceProfile(Protocol):
    """Protocol for sources of device characteristics."""

    def characteristics(self) -> DeviceCharacteristics:
        ...


class StaticDeviceProfile:
    """Device profile with fixed characteristics."""

    def __init__(self, characteristics: DeviceCharacteristics):
        self._characteristics = characteristics

    def characteristics(self) -> DeviceCharacteristics:
        return self._characteristics


class LocalDeviceProfile:
    """Device profile read from the running interpreter and OS.

    Screen geometry cannot be detected by a headless process and comes from
    configuration.
    """

    def __init__(self, config: BusiCalConfig | None = None):
        self.config = config or BusiCalConfig()

    def characteristics(self) -> DeviceCharacteristics:
        offset = datetime.now().astimezone().utcoffset()
        offset_minutes = int(offset.total_seconds() // 60) if offset else 0

        return DeviceCharacteristics(
            user_agent=self._user_agent(),
            language=locale.getlocale()[0] or "",
            screen_width=self.config.screen_width,
            screen_height=self.config.screen_height,
            color_depth=self.config.color_depth,
            timezone_offset=-offset_minutes,
            timezone_name=get_localzone_name() or time.tzname[0],
        )

    @staticmethod
    def _user_agent() -> str:
        return (
            f"Python/{platform.python_version()} "
            f"({platform.system()} {platform.release()}; {platform.machine()})"
        )
