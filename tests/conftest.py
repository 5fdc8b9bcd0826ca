"""
Pytest configuration and fixtures for the scoring engine tests.

Provides reusable test fixtures for:
- Building feature accessors and tiles
- Fixed sun positions and irradiance
- Scoring sessions pinned to a known sun elevation
"""

import pytest
from datetime import date, datetime, time, timezone
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from bipv.core.config import settings
from bipv.core.models import IrradianceInput, SunPosition
from bipv.core.session import ScoringSession
from bipv.ingest.events import Event
from bipv.ingest.geojson_tileset import DictFeature, GridTile, TileContent
from bipv.solar.irradiance import StaticIrradianceProvider


# =============================================================================
# HELPERS
# =============================================================================

class FixedSolarModel:
    """Solar model stand-in returning a fixed elevation."""

    def __init__(self, elevation_deg: float, azimuth_deg: float = 180.0):
        self.elevation_deg = elevation_deg
        self.azimuth_deg = azimuth_deg
        self.calls = 0

    def compute_sun_position(self, timestamp):
        self.calls += 1
        return SunPosition(
            azimuth_deg=self.azimuth_deg,
            elevation_deg=self.elevation_deg,
            timestamp=timestamp,
        )


def make_building(
    feature_id="b1",
    longitude=-75.1644,
    latitude=39.9534,
    height=12.0,
) -> DictFeature:
    """Building accessor with 3D Tiles style property names; None omits a property."""
    props = {}
    if longitude is not None:
        props[settings.longitude_property] = longitude
    if latitude is not None:
        props[settings.latitude_property] = latitude
    if height is not None:
        props[settings.height_property] = height
    return DictFeature(properties=props, feature_id=feature_id)


def make_tile(features, tile_id="t0") -> GridTile:
    return GridTile(tile_id=tile_id, content=TileContent(features=list(features)))


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def utc_noon() -> datetime:
    return datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def irradiance() -> IrradianceInput:
    return IrradianceInput(date=date(2024, 6, 21), time_of_day=time(12, 0), ghi_w_m2=1000.0)


@pytest.fixture
def high_sun() -> SunPosition:
    return SunPosition(azimuth_deg=180.0, elevation_deg=60.0)


@pytest.fixture
def event() -> Event:
    return Event()


@pytest.fixture
def session_at():
    """Factory: refreshed session pinned to an elevation and GHI."""
    def _make(elevation_deg: float, ghi_w_m2: float = 1000.0) -> ScoringSession:
        session = ScoringSession(
            provider=StaticIrradianceProvider(ghi_w_m2=ghi_w_m2, on_date=date(2024, 6, 21)),
            solar_model=FixedSolarModel(elevation_deg),
        )
        session.refresh(datetime(2024, 6, 21, 12, 0, tzinfo=timezone.utc))
        return session
    return _make
