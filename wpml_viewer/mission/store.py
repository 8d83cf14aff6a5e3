"""
Mission Store

Handles persistent storage of parsed missions as JSON files.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .models import Mission, ValidationError

logger = logging.getLogger(__name__)


def safe_name(name: str) -> str:
    """File-system friendly version of a mission name"""
    cleaned = "".join(c if c.isalnum() or c in "-_" else "_" for c in name.strip())
    return cleaned or "mission"


def export_json(mission: Mission, path: Union[str, Path]):
    """Write a mission to a single JSON file"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(mission.to_dict(), f, indent=2)


def load_json(path: Union[str, Path]) -> Mission:
    """
    Read a mission from a JSON file written by export_json

    Raises:
        ValidationError: If the file is not valid mission JSON
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError(f"{path}: invalid JSON ({e})") from e

    return Mission.from_dict(data)


class MissionStore:
    """
    Persistent storage for missions

    Stores missions as JSON files in a directory, one file per mission
    named after the (sanitized) mission name.
    """

    def __init__(self, missions_dir: str = "~/.wpml_viewer/missions"):
        """
        Initialize mission store

        Args:
            missions_dir: Directory to store mission files
        """
        self.missions_dir = Path(missions_dir).expanduser()
        self._ensure_directory()

        # Cache of loaded missions (name -> Mission)
        self._cache: Dict[str, Mission] = {}

    def _ensure_directory(self):
        """Create missions directory if it doesn't exist"""
        self.missions_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Mission store initialized at {self.missions_dir}")

    def _get_mission_path(self, name: str) -> Path:
        """Get file path for a mission name"""
        return self.missions_dir / f"{safe_name(name)}.json"

    def save(self, mission: Mission, name: str) -> Path:
        """
        Save a mission, replacing any mission stored under the same name

        Args:
            mission: Mission to store
            name: Mission name

        Returns:
            Path of the written file
        """
        key = safe_name(name)
        mission_path = self._get_mission_path(key)
        export_json(mission, mission_path)

        self._cache[key] = mission

        logger.info(f"Saved mission '{key}' ({mission.waypoint_count} waypoints)")
        return mission_path

    def get(self, name: str) -> Optional[Mission]:
        """
        Get a mission by name

        Returns:
            Mission instance or None if not found or unreadable
        """
        key = safe_name(name)
        if key in self._cache:
            return self._cache[key]

        mission_path = self._get_mission_path(key)
        if not mission_path.exists():
            return None

        return self._load(mission_path, key)

    def _load(self, mission_path: Path, key: str) -> Optional[Mission]:
        """Load and cache one mission file, None if it is unreadable"""
        try:
            mission = load_json(mission_path)
        except ValidationError as e:
            logger.error(f"Failed to load mission {key}: {e}")
            return None

        self._cache[key] = mission
        return mission

    def list_all(self) -> List[Dict]:
        """
        List all stored missions

        Returns:
            List of mission summaries, each with its name
        """
        missions = []

        for path in sorted(self.missions_dir.glob("*.json")):
            # Files are read by their actual name, which may not be a safe_name
            mission = self._cache.get(path.stem)
            if mission is None:
                mission = self._load(path, path.stem)
            if mission is not None:
                summary = mission.get_summary()
                summary["name"] = path.stem
                missions.append(summary)

        return missions

    def delete(self, name: str) -> bool:
        """
        Delete a mission

        Returns:
            True if deleted, False if not found
        """
        key = safe_name(name)
        mission_path = self._get_mission_path(key)

        if not mission_path.exists():
            return False

        self._cache.pop(key, None)

        mission_path.unlink()
        logger.info(f"Deleted mission {key}")

        return True

    def clear_cache(self):
        """Clear the mission cache"""
        self._cache.clear()

    def get_count(self) -> int:
        """Get total number of stored missions"""
        return len(list(self.missions_dir.glob("*.json")))
