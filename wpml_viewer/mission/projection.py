"""
Map projection

JSON-ready view of a mission for a map front-end. Keys are camelCase;
a waypoint without a (resolvable) POI carries poiIndex -1.
"""

from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from .models import Mission

if TYPE_CHECKING:
    from ..navigation.path_builder import PathSegment


def waypoints_for_map(mission: Mission) -> List[Dict[str, Any]]:
    """Waypoint markers"""
    result = []
    for wp in mission.waypoints:
        poi = mission.get_poi(wp.poi_index)
        result.append({
            "index": wp.index,
            "lat": wp.lat,
            "lon": wp.lon,
            "executeHeight": wp.execute_height,
            "speed": wp.speed,
            "useStraightLine": wp.use_straight_line,
            "turnDampingDist": wp.turn_damping_dist,
            "actions": list(wp.actions),
            "poiIndex": poi.index if poi is not None else -1,
        })
    return result


def pois_for_map(mission: Mission) -> List[Dict[str, Any]]:
    """POI markers"""
    return [
        {"index": poi.index, "lat": poi.lat, "lon": poi.lon, "alt": poi.alt}
        for poi in mission.pois
    ]


def segments_for_map(segments: Sequence['PathSegment']) -> List[Dict[str, Any]]:
    """Flight path polylines, points as [lat, lon]"""
    return [
        {
            "style": segment.style.value,
            "fallback": segment.fallback,
            "fromIndex": segment.from_index,
            "toIndex": segment.to_index,
            "points": [[lat, lon] for lat, lon in segment.points],
        }
        for segment in segments
    ]


def build_map_payload(mission: Mission,
                      segments: Optional[Sequence['PathSegment']] = None,
                      show_pois: bool = True) -> Dict[str, Any]:
    """
    Everything a map front-end needs to draw a mission

    Args:
        mission: Parsed mission
        segments: Flight path segments, omitted from the payload if None
        show_pois: Whether standalone POI markers should be drawn
    """
    payload: Dict[str, Any] = {
        "waypoints": waypoints_for_map(mission),
        "pois": pois_for_map(mission),
        "showPois": show_pois,
    }
    if segments is not None:
        payload["segments"] = segments_for_map(segments)
    return payload
