"""
Configuration management for WPML Viewer

All parameters are configurable and can be overridden via:
1. config/default.yaml
2. Environment variables (prefixed with WPVIEW_)
3. Command line arguments
"""

import logging
import os
import yaml
from dataclasses import dataclass, field, fields
from typing import Optional
from pathlib import Path

logger = logging.getLogger(__name__)


def _convert(value: str, current_value):
    """Convert an environment string to the type of the current setting"""
    if isinstance(current_value, bool):
        return value.lower() in ('true', '1', 'yes')
    if isinstance(current_value, int):
        return int(value)
    if isinstance(current_value, float):
        return float(value)
    return value


@dataclass
class ParserConfig:
    """Mission document parser configuration"""
    kml_namespace: str = "http://www.opengis.net/kml/2.2"

    # "*" matches any namespace (uav.com and dji.com WPML exports differ)
    wpml_namespace: str = "*"

    # Substitute the built-in demo mission when no waypoint was parsed
    demo_fallback: bool = False


@dataclass
class PathConfig:
    """Flight path reconstruction parameters"""

    # Bezier spline
    spline_sharpness: float = 0.85      # 0 = polyline, 1 = loosest curve
    samples_per_leg: int = 100          # Spline samples between two waypoints

    # Spline slicing
    match_threshold_m: float = 10.0     # Max distance sample <-> waypoint
    matcher: str = "threshold"          # "threshold" or "knot"


@dataclass
class StoreConfig:
    """Exported mission storage"""
    missions_dir: str = "~/.wpml_viewer/missions"


@dataclass
class LoggingConfig:
    """Logging output"""
    level: str = "INFO"
    file: str = ""                      # Empty = console only


@dataclass
class Config:
    """Main configuration container"""

    parser: ParserConfig = field(default_factory=ParserConfig)
    path: PathConfig = field(default_factory=PathConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """Load configuration from YAML file and environment"""
        config = cls()

        # Load from file if exists
        if config_path is None:
            config_path = Path(__file__).parent.parent / "config" / "default.yaml"

        if Path(config_path).exists():
            with open(config_path, 'r') as f:
                yaml_config = yaml.safe_load(f)
                if yaml_config:
                    config._update_from_dict(yaml_config)

        # Override from environment variables
        config._update_from_env()

        return config

    def _update_from_dict(self, d: dict):
        """Update config from dictionary (e.g., YAML)"""
        for section_name, section_data in d.items():
            if hasattr(self, section_name) and isinstance(section_data, dict):
                section = getattr(self, section_name)
                for key, value in section_data.items():
                    if hasattr(section, key):
                        setattr(section, key, value)

    def _update_from_env(self):
        """Override config from environment variables"""
        prefix = "WPVIEW_"
        for key, value in os.environ.items():
            if key.startswith(prefix):
                # Parse WPVIEW_SECTION_KEY format
                parts = key[len(prefix):].lower().split("_", 1)
                if len(parts) == 2:
                    section_name, param_name = parts
                    if hasattr(self, section_name):
                        section = getattr(self, section_name)
                        if hasattr(section, param_name):
                            # Type conversion
                            current_value = getattr(section, param_name)
                            try:
                                setattr(section, param_name, _convert(value, current_value))
                            except ValueError:
                                logger.warning(f"Ignoring {key}={value!r}: expected "
                                               f"{type(current_value).__name__}, "
                                               f"keeping {current_value!r}")

    def to_dict(self) -> dict:
        """Nested dictionary of all sections"""
        return {
            f.name: dict(getattr(self, f.name).__dict__)
            for f in fields(self)
        }

    def save(self, config_path: str):
        """Save current configuration to YAML file"""
        with open(config_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def set_config(config: Optional[Config]):
    """Set the global configuration instance (None resets to defaults)"""
    global _config
    _config = config
