"""
Configuration management for the BIPV scoring engine.
"""

from datetime import date, time
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Can be configured via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BIPV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Irradiance placeholder (no weather-data source yet)
    default_ghi_w_m2: float = Field(default=1000.0, ge=0, description="Global horizontal irradiance (W/m²)")
    default_irradiance_date: Optional[date] = Field(default=None, description="Irradiance date (None = today, UTC)")
    default_time_of_day: time = Field(default=time(12, 0), description="Irradiance time of day (UTC)")

    # Classification bands
    high_threshold: float = Field(default=100.0, description="Minimum potential for the 'high' band")
    medium_threshold: float = Field(default=50.0, description="Minimum potential for the 'medium' band")
    high_color: str = Field(default="green")
    medium_color: str = Field(default="yellow")
    low_color: str = Field(default="red")

    # Feature property names (3D Tiles OSM buildings conventions)
    longitude_property: str = Field(default="cesium#longitude")
    latitude_property: str = Field(default="cesium#latitude")
    height_property: str = Field(default="cesium#estimatedHeight")
    id_property: str = Field(default="elementId")
    potential_property: str = Field(default="bipvPotential")
    band_property: str = Field(default="bipvBand")

    # Solar ephemeris validity window (years, inclusive)
    ephemeris_min_year: int = Field(default=1900)
    ephemeris_max_year: int = Field(default=2100)

    # Pipeline
    dedupe_features: bool = Field(default=False, description="Skip features already scored this session")

    # GeoJSON tileset adapter
    tile_size_deg: float = Field(default=0.01, gt=0, description="Grid tile edge length in degrees")

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.medium_threshold >= self.high_threshold:
            raise ValueError("medium_threshold must be below high_threshold")
        if self.ephemeris_min_year > self.ephemeris_max_year:
            raise ValueError("ephemeris_min_year must not exceed ephemeris_max_year")
        return self


# Global settings instance
settings = Settings()
