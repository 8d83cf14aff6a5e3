"""
WPML Viewer

Parser and flight path reconstruction for DJI waypoint missions.
"""

__version__ = "0.1.0"
