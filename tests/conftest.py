"""
Pytest configuration and fixtures
"""

import pytest
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wpml_viewer.config import Config, set_config

KML_NS = "http://www.opengis.net/kml/2.2"
WPML_NS = "http://www.uav.com/wpmz/1.0.2"


def _element(name: str, value) -> str:
    if value is None:
        return ""
    return f"<wpml:{name}>{value}</wpml:{name}>"


def build_placemark(lon=None, lat=None, index=None, straight=None,
                    height=None, speed=None, heading_angle=None,
                    heading_mode=None, poi=None, damping=None,
                    actions: Optional[List[List[str]]] = None,
                    coordinates: Optional[str] = None) -> str:
    """One <Placemark>; every argument left as None is omitted"""
    if coordinates is None and lon is not None:
        coordinates = f"{lon},{lat}"
    coords = ""
    if coordinates is not None:
        coords = f"<Point><coordinates>\n          {coordinates}\n        </coordinates></Point>"

    heading = ""
    if heading_angle is not None or heading_mode is not None or poi is not None:
        heading = ("<wpml:waypointHeadingParam>"
                   + _element("waypointHeadingMode", heading_mode)
                   + _element("waypointHeadingAngle", heading_angle)
                   + _element("waypointPoiPoint", poi)
                   + "</wpml:waypointHeadingParam>")

    turn = ""
    if damping is not None:
        turn = ("<wpml:waypointTurnParam>"
                + _element("waypointTurnDampingDist", damping)
                + "</wpml:waypointTurnParam>")

    groups = ""
    for group in actions or []:
        groups += "<wpml:actionGroup>"
        for func in group:
            groups += f"<wpml:action>{_element('actionActuatorFunc', func)}</wpml:action>"
        groups += "</wpml:actionGroup>"

    return (
        "<Placemark>"
        + coords
        + _element("index", index)
        + _element("executeHeight", height)
        + _element("waypointSpeed", speed)
        + heading
        + turn
        + _element("useStraightLine", straight)
        + groups
        + "</Placemark>"
    )


def build_mission_config(fly_to="safely", finish="goHome", exit_on_rc_lost="executeLostAction",
                         rc_lost="goBack", speed="10.5", drone_enum="68", drone_sub_enum="0") -> str:
    drone = ""
    if drone_enum is not None or drone_sub_enum is not None:
        drone = ("<wpml:droneInfo>"
                 + _element("droneEnumValue", drone_enum)
                 + _element("droneSubEnumValue", drone_sub_enum)
                 + "</wpml:droneInfo>")
    return (
        "<wpml:missionConfig>"
        + _element("flyToWaylineMode", fly_to)
        + _element("finishAction", finish)
        + _element("exitOnRCLost", exit_on_rc_lost)
        + _element("executeRCLostAction", rc_lost)
        + _element("globalTransitionalSpeed", speed)
        + drone
        + "</wpml:missionConfig>"
    )


def build_document(*placemarks: str, mission_config: str = "",
                   wpml_ns: str = WPML_NS) -> str:
    """Complete mission document around the given placemarks"""
    return (
        f'<kml xmlns="{KML_NS}" xmlns:wpml="{wpml_ns}">\n'
        "  <Document>\n"
        f"    {mission_config}\n"
        "    <Folder>\n"
        + "\n".join(f"      {pm}" for pm in placemarks)
        + "\n    </Folder>\n"
        "  </Document>\n"
        "</kml>\n"
    )


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from built-in defaults, not the YAML/env config"""
    set_config(Config())
    yield
    set_config(None)


@pytest.fixture
def placemark():
    """Factory for <Placemark> XML snippets"""
    return build_placemark


@pytest.fixture
def mission_config_xml():
    """Factory for <wpml:missionConfig> XML snippets"""
    return build_mission_config


@pytest.fixture
def wpml_document():
    """Factory for complete mission documents"""
    return build_document


@pytest.fixture
def scenario_document():
    """Three waypoints near Amsterdam, POI on the second one"""
    return build_document(
        build_placemark(4.9041, 52.3676, index=1, straight="1", height=50, speed=5,
                        actions=[["takePhoto"]]),
        build_placemark(4.9051, 52.3686, index=2, straight="0", height=50, speed=5,
                        poi="52.3691,4.9046,0"),
        build_placemark(4.9061, 52.3696, index=3, straight="1", height=50, speed=5),
        mission_config=build_mission_config(),
    )


@pytest.fixture
def scenario_file(tmp_path, scenario_document):
    """Scenario document written to waylines.wpml"""
    path = tmp_path / "waylines.wpml"
    path.write_text('<?xml version="1.0" encoding="UTF-8"?>\n' + scenario_document,
                    encoding="utf-8")
    return path


@pytest.fixture
def turning_waypoints():
    """North leg, east leg, north leg (about 110-140 m each), all curved"""
    from wpml_viewer.mission.models import Waypoint

    return [
        Waypoint(index=1, lat=52.3676, lon=4.9041),
        Waypoint(index=2, lat=52.3686, lon=4.9041),
        Waypoint(index=3, lat=52.3686, lon=4.9061),
        Waypoint(index=4, lat=52.3696, lon=4.9061),
    ]
