"""
Mission module

Mission model, document parser, storage and map projection.
"""

from .models import (
    DroneInfo,
    Mission,
    MissionConfig,
    Poi,
    ValidationError,
    Waypoint,
)
from .parser import (
    DocumentReadError,
    MalformedXmlError,
    MissionParser,
    ParseError,
    demo_mission,
    find_mission_document,
    parse_mission,
)
from .store import MissionStore, export_json, load_json
from .projection import build_map_payload

__all__ = [
    # Models
    'DroneInfo',
    'Mission',
    'MissionConfig',
    'Poi',
    'ValidationError',
    'Waypoint',
    # Parser
    'DocumentReadError',
    'MalformedXmlError',
    'MissionParser',
    'ParseError',
    'demo_mission',
    'find_mission_document',
    'parse_mission',
    # Store
    'MissionStore',
    'export_json',
    'load_json',
    # Projection
    'build_map_payload',
]
