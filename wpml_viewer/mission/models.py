"""
Mission models

Waypoints, points of interest and mission-wide settings reconstructed
from a WPML mission document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


class ValidationError(Exception):
    """Raised when serialized mission data is invalid"""
    pass


# droneEnumValue -> model name
DRONE_MODELS: Dict[int, str] = {
    60: "DJI Mini 2",
    61: "DJI Air 2S",
    67: "DJI Mini 3",
    68: "DJI Mini 3 Pro",
    69: "DJI Air 3",
    70: "DJI Mavic 3",
    71: "DJI Mavic 3 Classic",
    72: "DJI Mavic 3 Pro",
    73: "DJI Mini 4 Pro",
}


def drone_model_name(enum_value: int, sub_enum_value: int) -> str:
    """Human-readable drone model for a droneEnumValue/droneSubEnumValue pair"""
    name = DRONE_MODELS.get(enum_value)
    if name is None:
        return f"Unknown Drone (Code: {enum_value}/{sub_enum_value})"
    return name


@dataclass
class DroneInfo:
    """Aircraft the mission was planned for"""
    drone_enum_value: int = 0
    drone_sub_enum_value: int = 0

    @property
    def drone_model(self) -> str:
        return drone_model_name(self.drone_enum_value, self.drone_sub_enum_value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "drone_enum_value": self.drone_enum_value,
            "drone_sub_enum_value": self.drone_sub_enum_value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DroneInfo':
        return cls(
            drone_enum_value=int(data.get("drone_enum_value", 0)),
            drone_sub_enum_value=int(data.get("drone_sub_enum_value", 0)),
        )


@dataclass
class MissionConfig:
    """Mission-wide settings (missionConfig element)"""
    fly_to_wayline_mode: str = ""
    finish_action: str = ""
    exit_on_rc_lost: str = ""
    execute_rc_lost_action: str = ""
    global_transitional_speed: float = 0.0  # m/s
    drone_info: DroneInfo = field(default_factory=DroneInfo)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fly_to_wayline_mode": self.fly_to_wayline_mode,
            "finish_action": self.finish_action,
            "exit_on_rc_lost": self.exit_on_rc_lost,
            "execute_rc_lost_action": self.execute_rc_lost_action,
            "global_transitional_speed": self.global_transitional_speed,
            "drone_info": self.drone_info.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MissionConfig':
        return cls(
            fly_to_wayline_mode=str(data.get("fly_to_wayline_mode", "")),
            finish_action=str(data.get("finish_action", "")),
            exit_on_rc_lost=str(data.get("exit_on_rc_lost", "")),
            execute_rc_lost_action=str(data.get("execute_rc_lost_action", "")),
            global_transitional_speed=float(data.get("global_transitional_speed", 0.0)),
            drone_info=DroneInfo.from_dict(data.get("drone_info", {})),
        )


@dataclass
class Poi:
    """Point of interest tracked by one or more waypoints"""
    index: int
    lat: float
    lon: float
    alt: float = 0.0  # meters

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "lat": self.lat, "lon": self.lon, "alt": self.alt}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Poi':
        return cls(
            index=int(data["index"]),
            lat=float(data["lat"]),
            lon=float(data["lon"]),
            alt=float(data.get("alt", 0.0)),
        )


@dataclass
class Waypoint:
    """Single waypoint (one Placemark of the mission document)"""
    index: int
    lat: float
    lon: float
    execute_height: float = 0.0             # meters
    speed: float = 0.0                      # m/s
    use_straight_line: bool = False         # Governs the segment ending here
    poi_index: Optional[int] = None         # Key into Mission.pois
    heading_angle: Optional[float] = None   # degrees, None = not set
    heading_mode: str = ""
    actions: List[str] = field(default_factory=list)
    turn_damping_dist: Optional[float] = None  # meters, None = not set

    @property
    def position(self) -> Tuple[float, float]:
        """(lat, lon) tuple"""
        return self.lat, self.lon

    @property
    def actions_text(self) -> str:
        return ", ".join(self.actions)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "index": self.index,
            "lat": self.lat,
            "lon": self.lon,
            "execute_height": self.execute_height,
            "speed": self.speed,
            "use_straight_line": self.use_straight_line,
            "heading_mode": self.heading_mode,
            "actions": list(self.actions),
        }
        # Optional fields are left out when unset
        if self.poi_index is not None:
            d["poi_index"] = self.poi_index
        if self.heading_angle is not None:
            d["heading_angle"] = self.heading_angle
        if self.turn_damping_dist is not None:
            d["turn_damping_dist"] = self.turn_damping_dist
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Waypoint':
        poi_index = data.get("poi_index")
        heading_angle = data.get("heading_angle")
        turn_damping = data.get("turn_damping_dist")

        return cls(
            index=int(data.get("index", 0)),
            lat=float(data["lat"]),
            lon=float(data["lon"]),
            execute_height=float(data.get("execute_height", 0.0)),
            speed=float(data.get("speed", 0.0)),
            use_straight_line=bool(data.get("use_straight_line", False)),
            poi_index=int(poi_index) if poi_index is not None else None,
            heading_angle=float(heading_angle) if heading_angle is not None else None,
            heading_mode=str(data.get("heading_mode", "")),
            actions=[str(a) for a in data.get("actions", [])],
            turn_damping_dist=float(turn_damping) if turn_damping is not None else None,
        )


@dataclass
class Mission:
    """
    Complete mission reconstructed from a mission document

    Waypoints are kept sorted by their document index, POIs in the order
    they were discovered while walking the waypoints.
    """
    waypoints: List[Waypoint] = field(default_factory=list)
    pois: List[Poi] = field(default_factory=list)
    config: MissionConfig = field(default_factory=MissionConfig)
    is_demo: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Mission':
        """
        Create mission from dictionary (JSON data)

        Args:
            data: Mission data dictionary as produced by to_dict()

        Returns:
            Mission instance

        Raises:
            ValidationError: If mission data is invalid
        """
        if not isinstance(data, dict):
            raise ValidationError("Mission data must be an object")

        waypoints_data = data.get("waypoints", [])
        pois_data = data.get("pois", [])
        if not isinstance(waypoints_data, list):
            raise ValidationError("Mission waypoints must be a list")
        if not isinstance(pois_data, list):
            raise ValidationError("Mission pois must be a list")

        waypoints: List[Waypoint] = []
        for i, wp_data in enumerate(waypoints_data):
            try:
                waypoints.append(Waypoint.from_dict(wp_data))
            except KeyError as e:
                raise ValidationError(f"Waypoint {i}: missing required field {e}")
            except (AttributeError, TypeError, ValueError) as e:
                raise ValidationError(f"Waypoint {i}: {e}")

        pois: List[Poi] = []
        for i, poi_data in enumerate(pois_data):
            try:
                pois.append(Poi.from_dict(poi_data))
            except KeyError as e:
                raise ValidationError(f"POI {i}: missing required field {e}")
            except (AttributeError, TypeError, ValueError) as e:
                raise ValidationError(f"POI {i}: {e}")

        try:
            config = MissionConfig.from_dict(data.get("config", {}))
        except (AttributeError, TypeError, ValueError) as e:
            raise ValidationError(f"Mission config: {e}")

        mission = cls(
            waypoints=waypoints,
            pois=pois,
            config=config,
            is_demo=bool(data.get("is_demo", False)),
        )

        errors = mission.validate()
        if errors:
            raise ValidationError(f"Mission validation failed: {'; '.join(errors)}")

        return mission

    def to_dict(self) -> Dict[str, Any]:
        """Convert mission to dictionary (for JSON serialization)"""
        return {
            "waypoints": [wp.to_dict() for wp in self.waypoints],
            "pois": [poi.to_dict() for poi in self.pois],
            "config": self.config.to_dict(),
            "is_demo": self.is_demo,
        }

    def validate(self) -> List[str]:
        """
        Check the structural invariants of a mission

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        for wp in self.waypoints:
            if wp.lat == 0 and wp.lon == 0:
                errors.append(f"Waypoint {wp.index}: zero coordinates")

        for i in range(len(self.waypoints) - 1):
            if self.waypoints[i].index > self.waypoints[i + 1].index:
                errors.append("Waypoints must be sorted by index")
                break

        seen = set()
        for poi in self.pois:
            if poi.index in seen:
                errors.append(f"POI {poi.index}: duplicate index")
            seen.add(poi.index)
            if poi.lat == 0 and poi.lon == 0:
                errors.append(f"POI {poi.index}: zero coordinates")

        return errors

    def get_poi(self, index: Optional[int]) -> Optional[Poi]:
        """Look up a POI by its index"""
        if index is None:
            return None
        for poi in self.pois:
            if poi.index == index:
                return poi
        return None

    @property
    def waypoint_count(self) -> int:
        return len(self.waypoints)

    @property
    def poi_count(self) -> int:
        return len(self.pois)

    def get_summary(self) -> Dict[str, Any]:
        """Get mission summary for listings"""
        straight = sum(1 for wp in self.waypoints if wp.use_straight_line)
        return {
            "waypoint_count": self.waypoint_count,
            "poi_count": self.poi_count,
            "straight_count": straight,
            "curved_count": self.waypoint_count - straight,
            "waypoints_with_poi": sum(1 for wp in self.waypoints if wp.poi_index is not None),
            "drone_model": self.config.drone_info.drone_model,
            "is_demo": self.is_demo,
        }
