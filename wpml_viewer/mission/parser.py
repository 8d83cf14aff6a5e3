"""
Mission document parser

Reads a WPML/KML mission document (the XML found inside DJI .kmz
packages) and reconstructs waypoints, points of interest and the
mission configuration.

Field-level problems never abort a parse: every optional value has a
default, so partial exports from older controller firmware still
produce something to render. Only an unreadable or malformed document
raises.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..config import ParserConfig, get_config
from .models import Mission, MissionConfig, Poi, Waypoint

logger = logging.getLogger(__name__)

Source = Union[str, bytes, Path]

# Preferred document names inside an extracted mission package
DOCUMENT_PATTERNS = ("waylines.wpml", "*.wpml", "*.kml")


class ParseError(Exception):
    """Base class for mission documents that cannot be parsed"""
    pass


class DocumentReadError(ParseError):
    """Mission document does not exist or cannot be read"""
    pass


class MalformedXmlError(ParseError):
    """Mission document is not well-formed XML"""
    pass


def parse_float(text: Optional[str]) -> float:
    """
    Parse a decimal number independently of the host locale

    A period is the only decimal separator. Missing or unparsable
    values give 0.0.
    """
    if text is None or "_" in text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def parse_int(text: Optional[str]) -> Optional[int]:
    """Parse an integer, None if missing or unparsable"""
    if text is None or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def split_coordinates(text: Optional[str]) -> List[str]:
    """Split "a,b[,c]" into trimmed, non-empty tokens"""
    if not text:
        return []
    return [token.strip() for token in text.split(",") if token.strip()]


def find_mission_document(directory: Union[str, Path]) -> Path:
    """
    Locate the mission document inside an extracted mission package

    Looks for waylines.wpml first, then any .wpml, then any .kml file.

    Raises:
        DocumentReadError: If the directory holds no mission document
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise DocumentReadError(f"Not a directory: {directory}")

    for pattern in DOCUMENT_PATTERNS:
        matches = sorted(directory.rglob(pattern))
        if matches:
            logger.debug(f"Mission document found: {matches[0]}")
            return matches[0]

    raise DocumentReadError(f"No waylines.wpml or KML file found in {directory}")


def demo_mission() -> Mission:
    """
    Fixed demonstration mission (Amsterdam)

    Three waypoints and one POI referenced by the second waypoint.
    """
    waypoints = [
        Waypoint(index=1, lat=52.3676, lon=4.9041, execute_height=50.0,
                 speed=5.0, use_straight_line=True),
        Waypoint(index=2, lat=52.3686, lon=4.9051, execute_height=50.0,
                 speed=5.0, use_straight_line=False, poi_index=1),
        Waypoint(index=3, lat=52.3696, lon=4.9061, execute_height=50.0,
                 speed=5.0, use_straight_line=True),
    ]
    pois = [Poi(index=1, lat=52.3691, lon=4.9046, alt=0.0)]
    return Mission(waypoints=waypoints, pois=pois, is_demo=True)


@dataclass
class _ParseState:
    """Per-call parse state, one instance per document"""
    mission: Mission
    next_poi_index: int = 1

    def allocate_poi_index(self) -> int:
        index = self.next_poi_index
        self.next_poi_index += 1
        return index


class MissionParser:
    """
    Parses mission documents into Mission instances

    Instances hold configuration only; all state of a parse lives in a
    _ParseState created per call, so one parser can be shared between
    threads.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        if config is None:
            config = get_config().parser

        self.kml_ns = config.kml_namespace
        self.wpml_ns = config.wpml_namespace
        self.demo_fallback = config.demo_fallback

    def parse(self, source: Source) -> Mission:
        """
        Parse a mission document

        Args:
            source: Path to a document or to an extracted package
                directory, or the XML content itself (bytes, or a str
                starting with "<")

        Returns:
            Mission instance

        Raises:
            DocumentReadError: If the document cannot be read
            MalformedXmlError: If the document is not well-formed XML
        """
        root = self._load(source)
        state = _ParseState(mission=Mission())

        config_el = root.find(f".//{self._wpml('missionConfig')}")
        if config_el is not None:
            state.mission.config = self._parse_config(config_el)

        placemarks = root.findall(f".//{self._kml('Placemark')}")
        logger.debug(f"Found {len(placemarks)} placemarks in mission document")

        for pm in placemarks:
            waypoint = self._parse_placemark(pm, state)
            if waypoint is not None:
                state.mission.waypoints.append(waypoint)

        # sorted() is stable: equal indices keep document order
        state.mission.waypoints = sorted(state.mission.waypoints, key=lambda w: w.index)

        mission = state.mission
        if not mission.waypoints:
            logger.warning("No waypoints parsed from mission document")
            if self.demo_fallback:
                logger.warning("Substituting demo mission")
                return demo_mission()
            return mission

        summary = mission.get_summary()
        logger.info(
            f"Mission parsed: {summary['waypoint_count']} waypoints "
            f"({summary['straight_count']} straight, {summary['curved_count']} curved), "
            f"{summary['poi_count']} POIs, {summary['waypoints_with_poi']} waypoints with POI"
        )
        return mission

    # ==================== Document loading ====================

    def _load(self, source: Source) -> ET.Element:
        if isinstance(source, bytes):
            return self._from_string(source)
        if isinstance(source, str):
            if not source.strip():
                # Path("") would silently mean the current directory
                raise DocumentReadError("Empty mission document source")
            if source.lstrip().startswith("<"):
                return self._from_string(source)

        path = Path(source)
        if path.is_dir():
            path = find_mission_document(path)

        try:
            tree = ET.parse(path)
        except ET.ParseError as e:
            raise MalformedXmlError(f"{path}: {e}") from e
        except OSError as e:
            raise DocumentReadError(f"Cannot read mission document {path}: {e}") from e

        logger.debug(f"Loaded mission document {path}")
        return tree.getroot()

    @staticmethod
    def _from_string(content: Union[str, bytes]) -> ET.Element:
        try:
            return ET.fromstring(content)
        except ET.ParseError as e:
            raise MalformedXmlError(str(e)) from e

    # ==================== Element helpers ====================

    def _kml(self, name: str) -> str:
        return self._qualify(self.kml_ns, name)

    def _wpml(self, name: str) -> str:
        return self._qualify(self.wpml_ns, name)

    @staticmethod
    def _qualify(namespace: str, name: str) -> str:
        if not namespace:
            return name
        return f"{{{namespace}}}{name}"

    def _child_text(self, parent: Optional[ET.Element], name: str) -> Optional[str]:
        """Full text of a direct WPML child, None if the child is missing"""
        if parent is None:
            return None
        child = parent.find(self._wpml(name))
        if child is None:
            return None
        return "".join(child.itertext())

    # ==================== Sections ====================

    def _parse_config(self, el: ET.Element) -> MissionConfig:
        config = MissionConfig(
            fly_to_wayline_mode=self._child_text(el, "flyToWaylineMode") or "",
            finish_action=self._child_text(el, "finishAction") or "",
            exit_on_rc_lost=self._child_text(el, "exitOnRCLost") or "",
            execute_rc_lost_action=self._child_text(el, "executeRCLostAction") or "",
            global_transitional_speed=parse_float(
                self._child_text(el, "globalTransitionalSpeed")),
        )

        drone_el = el.find(self._wpml("droneInfo"))
        if drone_el is not None:
            drone_enum = parse_int(self._child_text(drone_el, "droneEnumValue"))
            drone_sub_enum = parse_int(self._child_text(drone_el, "droneSubEnumValue"))
            if drone_enum is not None:
                config.drone_info.drone_enum_value = drone_enum
            if drone_sub_enum is not None:
                config.drone_info.drone_sub_enum_value = drone_sub_enum

        logger.debug(
            f"Mission config: fly to wayline={config.fly_to_wayline_mode!r}, "
            f"finish={config.finish_action!r}, rc lost={config.execute_rc_lost_action!r}, "
            f"speed={config.global_transitional_speed} m/s, "
            f"drone={config.drone_info.drone_model}"
        )
        return config

    def _parse_placemark(self, pm: ET.Element, state: _ParseState) -> Optional[Waypoint]:
        coords_el = pm.find(f".//{self._kml('coordinates')}")
        coord_text = "".join(coords_el.itertext()) if coords_el is not None else ""
        parts = split_coordinates(coord_text)

        if len(parts) < 2:
            logger.debug("Skipping placemark - insufficient coordinate parts")
            return None

        # Placemark coordinates are lon,lat[,alt]
        lon = parse_float(parts[0])
        lat = parse_float(parts[1])

        if lat == 0 and lon == 0:
            logger.debug("Skipping placemark - zero coordinates")
            return None

        index = parse_int(self._child_text(pm, "index"))
        if index is None:
            index = 0

        heading_el = pm.find(self._wpml("waypointHeadingParam"))
        heading_angle = self._optional_nonzero(
            self._child_text(heading_el, "waypointHeadingAngle"))
        heading_mode = self._child_text(heading_el, "waypointHeadingMode") or ""

        turn_el = pm.find(self._wpml("waypointTurnParam"))
        turn_damping = self._optional_nonzero(
            self._child_text(turn_el, "waypointTurnDampingDist"))

        # Only the literal "1" enables a straight segment
        use_straight_line = self._child_text(pm, "useStraightLine") == "1"

        waypoint = Waypoint(
            index=index,
            lat=lat,
            lon=lon,
            execute_height=parse_float(self._child_text(pm, "executeHeight")),
            speed=parse_float(self._child_text(pm, "waypointSpeed")),
            use_straight_line=use_straight_line,
            heading_angle=heading_angle,
            heading_mode=heading_mode,
            turn_damping_dist=turn_damping,
        )

        for group in pm.findall(self._wpml("actionGroup")):
            for action in group.findall(self._wpml("action")):
                func = self._child_text(action, "actionActuatorFunc")
                if func:
                    waypoint.actions.append(func)

        self._attach_poi(waypoint, self._child_text(heading_el, "waypointPoiPoint"), state)

        logger.debug(
            f"Waypoint {index}: [{lat:.6f}, {lon:.6f}], straight={use_straight_line}, "
            f"heading={heading_angle}, damping={turn_damping}, poi={waypoint.poi_index}"
        )
        return waypoint

    @staticmethod
    def _optional_nonzero(text: Optional[str]) -> Optional[float]:
        if not text:
            return None
        value = parse_float(text)
        return value if value != 0 else None

    @staticmethod
    def _attach_poi(waypoint: Waypoint, poi_text: Optional[str], state: _ParseState):
        if poi_text is None or not poi_text.strip():
            return

        parts = split_coordinates(poi_text)
        if len(parts) < 2:
            logger.debug(f"Invalid POI for waypoint {waypoint.index}: {poi_text!r}")
            return

        # Unlike placemark coordinates, the POI point is lat,lon[,alt]
        poi_lat = parse_float(parts[0])
        poi_lon = parse_float(parts[1])
        poi_alt = parse_float(parts[2]) if len(parts) > 2 else 0.0

        if poi_lat == 0 and poi_lon == 0:
            logger.debug(f"Skipped POI for waypoint {waypoint.index} - zero coordinates")
            return

        poi = Poi(index=state.allocate_poi_index(), lat=poi_lat, lon=poi_lon, alt=poi_alt)
        state.mission.pois.append(poi)
        waypoint.poi_index = poi.index
        logger.debug(f"Created POI {poi.index} at [{poi_lat:.6f}, {poi_lon:.6f}] "
                     f"for waypoint {waypoint.index}")


def parse_mission(source: Source, config: Optional[ParserConfig] = None) -> Mission:
    """Parse a mission document with a one-off MissionParser"""
    return MissionParser(config).parse(source)
