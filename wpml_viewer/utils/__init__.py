"""
Utility modules
"""

from .geo import to_local, from_local, haversine_distance, turn_angle_deg
from .logger import setup_logging

__all__ = ['to_local', 'from_local', 'haversine_distance', 'turn_angle_deg',
           'setup_logging']
