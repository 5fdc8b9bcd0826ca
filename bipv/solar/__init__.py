"""
Solar Module - Sun direction and irradiance inputs for a scoring pass.
"""

from .position import SolarPositionModel, compute_sun_position
from .irradiance import (
    CallableIrradianceProvider,
    IrradianceProvider,
    StaticIrradianceProvider,
)

__all__ = [
    'SolarPositionModel',
    'compute_sun_position',
    'IrradianceProvider',
    'StaticIrradianceProvider',
    'CallableIrradianceProvider',
]
