"""
Geometry Module - Per-building potential from sun geometry and irradiance.
"""

from .pv_potential import PotentialScorer, incident_potential

__all__ = [
    'PotentialScorer',
    'incident_potential',
]
