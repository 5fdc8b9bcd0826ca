"""
Irradiance providers.

The engine has no weather-data source of its own; the caller supplies the
irradiance for a session through an IrradianceProvider. StaticIrradianceProvider
serves fixed values (from settings by default).
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Callable, Optional, Protocol

from ..core.config import settings
from ..core.models import IrradianceInput

logger = logging.getLogger(__name__)


class IrradianceProvider(Protocol):
    """Anything that can supply the irradiance for the current session."""

    def current(self) -> IrradianceInput: ...


class StaticIrradianceProvider:
    """
    Serve a fixed irradiance value.

    Usage:
        provider = StaticIrradianceProvider(ghi_w_m2=850.0)
        irradiance = provider.current()
    """

    def __init__(
        self,
        ghi_w_m2: Optional[float] = None,
        on_date: Optional[date] = None,
        time_of_day: Optional[time] = None,
    ):
        self.ghi_w_m2 = settings.default_ghi_w_m2 if ghi_w_m2 is None else ghi_w_m2
        self.on_date = on_date if on_date is not None else settings.default_irradiance_date
        self.time_of_day = time_of_day if time_of_day is not None else settings.default_time_of_day

    def current(self) -> IrradianceInput:
        on_date = self.on_date or datetime.now(timezone.utc).date()
        return IrradianceInput(
            date=on_date,
            time_of_day=self.time_of_day,
            ghi_w_m2=self.ghi_w_m2,
        )


class CallableIrradianceProvider:
    """Adapt a plain function returning a GHI value into a provider."""

    def __init__(self, fetch_ghi: Callable[[datetime], float]):
        self.fetch_ghi = fetch_ghi

    def current(self) -> IrradianceInput:
        now = datetime.now(timezone.utc)
        ghi = self.fetch_ghi(now)
        logger.debug(f"Irradiance provider returned {ghi} W/m² for {now.isoformat()}")
        return IrradianceInput(
            date=now.date(),
            time_of_day=now.time().replace(microsecond=0),
            ghi_w_m2=ghi,
        )
