"""
Flight Path Builder

Turns an ordered waypoint list into drawable path segments:
- Straight chords where the destination waypoint asks for a straight line
- Slices of one global Bezier spline elsewhere, approximating the arc
  the aircraft actually flies through a coordinated turn

The spline is computed once per path over all waypoints, so consecutive
curved segments join into one coherent curve.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..config import PathConfig, get_config
from ..mission.models import Waypoint
from ..utils.geo import bearing, haversine_distance, turn_angle_deg
from .spline import BezierSpline, SampledCurve

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


class SegmentStyle(Enum):
    """How a segment between two waypoints is drawn"""
    STRAIGHT = "straight"
    CURVED = "curved"


@dataclass
class PathSegment:
    """Drawable connector between two consecutive waypoints"""
    style: SegmentStyle
    points: List[LatLon]            # (lat, lon), at least two
    from_index: int                 # Waypoint index of the origin
    to_index: int                   # Waypoint index of the destination
    fallback: bool = False          # Straight because no curve slice matched

    @property
    def start(self) -> LatLon:
        return self.points[0]

    @property
    def end(self) -> LatLon:
        return self.points[-1]


@dataclass
class LegInfo:
    """Geometry of the leg between two consecutive waypoints"""
    from_index: int
    to_index: int
    distance_m: float
    bearing_deg: float              # 0-360, 0 = North
    turn_angle_deg: Optional[float]  # Turn at the destination, None for the last leg
    style: SegmentStyle = SegmentStyle.CURVED


def segment_style(p0: Waypoint, p1: Waypoint) -> SegmentStyle:
    """
    Style of the segment p0 -> p1

    The destination's flag governs: use_straight_line on a waypoint
    describes how the aircraft arrives there, not how it leaves.
    """
    return SegmentStyle.STRAIGHT if p1.use_straight_line else SegmentStyle.CURVED


class SegmentMatcher(ABC):
    """Extracts the part of the global curve that belongs to one segment"""

    @abstractmethod
    def extract(self, curve: SampledCurve, segment: int,
                p0: Waypoint, p1: Waypoint) -> Optional[List[LatLon]]:
        """
        Args:
            curve: Sampled global spline, points in (lon, lat) order
            segment: Position of p0 in the waypoint list
            p0, p1: Segment end points

        Returns:
            (lat, lon) polyline, or None if no slice of at least two
            points was found
        """
        pass


class ThresholdSegmentMatcher(SegmentMatcher):
    """
    Slice by distance to the end points

    Starts at the first sample within the threshold of p0 and stops at
    the first later sample within the threshold of p1. The scan begins
    at p0's own sample, so earlier legs passing near p0 are never part
    of the slice. With waypoints closer than the threshold the slice
    degenerates and the caller falls back to a straight segment.
    """

    def __init__(self, threshold_m: float = 10.0):
        self.threshold_m = threshold_m

    def extract(self, curve: SampledCurve, segment: int,
                p0: Waypoint, p1: Waypoint) -> Optional[List[LatLon]]:
        run: List[LatLon] = []
        started = False

        first = 0
        if segment < len(curve.knot_indices):
            first = curve.knot_indices[segment]

        for lon, lat in curve.points[first:]:
            if not started:
                if haversine_distance(p0.lat, p0.lon, lat, lon) < self.threshold_m:
                    started = True

            if started:
                run.append((float(lat), float(lon)))
                if haversine_distance(p1.lat, p1.lon, lat, lon) < self.threshold_m:
                    break

        if len(run) < 2:
            return None
        return run


class KnotSegmentMatcher(SegmentMatcher):
    """Slice by the sample indices of the waypoints themselves"""

    def extract(self, curve: SampledCurve, segment: int,
                p0: Waypoint, p1: Waypoint) -> Optional[List[LatLon]]:
        if segment + 1 >= len(curve.knot_indices):
            return None

        start = curve.knot_indices[segment]
        end = curve.knot_indices[segment + 1]
        run = [(float(lat), float(lon)) for lon, lat in curve.points[start:end + 1]]

        if len(run) < 2:
            return None
        return run


def create_matcher(config: PathConfig) -> SegmentMatcher:
    """Segment matcher selected by configuration"""
    if config.matcher == "knot":
        return KnotSegmentMatcher()
    if config.matcher != "threshold":
        logger.warning(f"Unknown segment matcher '{config.matcher}', using threshold")
    return ThresholdSegmentMatcher(config.match_threshold_m)


class FlightPathBuilder:
    """
    Builds drawable path segments for a waypoint sequence

    Building is total: every pair of distinct consecutive waypoints
    yields exactly one segment, curved if a spline slice is found and
    straight otherwise.
    """

    def __init__(self, config: Optional[PathConfig] = None,
                 matcher: Optional[SegmentMatcher] = None):
        if config is None:
            config = get_config().path

        self.sharpness = config.spline_sharpness
        self.samples_per_leg = config.samples_per_leg
        self.matcher = matcher if matcher is not None else create_matcher(config)

        # Global curve of the last build, kept for inspection
        self.curve: Optional[SampledCurve] = None

    def build(self, waypoints: Sequence[Waypoint]) -> List[PathSegment]:
        """
        Build path segments

        Args:
            waypoints: Waypoints in flight order

        Returns:
            Segments in waypoint order, empty for fewer than two waypoints
        """
        self.curve = None
        if len(waypoints) < 2:
            return []

        spline = BezierSpline([(wp.lon, wp.lat) for wp in waypoints], self.sharpness)
        self.curve = spline.sample(self.samples_per_leg)

        segments: List[PathSegment] = []
        fallbacks = 0

        for i in range(len(waypoints) - 1):
            p0 = waypoints[i]
            p1 = waypoints[i + 1]

            # Nothing to draw between identical points
            if p0.position == p1.position:
                logger.debug(f"Segment {p0.index} -> {p1.index}: identical points, skipped")
                continue

            if segment_style(p0, p1) == SegmentStyle.STRAIGHT:
                segment = self._straight(p0, p1)
            else:
                run = self.matcher.extract(self.curve, i, p0, p1)
                if run is not None:
                    segment = PathSegment(
                        style=SegmentStyle.CURVED,
                        points=run,
                        from_index=p0.index,
                        to_index=p1.index,
                    )
                else:
                    logger.debug(f"Segment {p0.index} -> {p1.index}: "
                                 f"no spline slice found, falling back to straight")
                    segment = self._straight(p0, p1, fallback=True)
                    fallbacks += 1

            segments.append(segment)

        logger.debug(f"Built {len(segments)} segments for {len(waypoints)} waypoints "
                     f"({fallbacks} straight fallbacks)")
        return segments

    @staticmethod
    def _straight(p0: Waypoint, p1: Waypoint,
                  fallback: bool = False) -> PathSegment:
        return PathSegment(
            style=SegmentStyle.STRAIGHT,
            points=[p0.position, p1.position],
            from_index=p0.index,
            to_index=p1.index,
            fallback=fallback,
        )


def build_path(waypoints: Sequence[Waypoint],
               config: Optional[PathConfig] = None) -> List[PathSegment]:
    """Build path segments with a one-off FlightPathBuilder"""
    return FlightPathBuilder(config).build(waypoints)


def describe_legs(waypoints: Sequence[Waypoint]) -> List[LegInfo]:
    """
    Distance, bearing and turn angle of every leg

    The turn angle belongs to the destination waypoint of a leg and is
    measured in its local tangent plane.
    """
    legs: List[LegInfo] = []

    for i in range(len(waypoints) - 1):
        p0 = waypoints[i]
        p1 = waypoints[i + 1]

        turn = None
        if i + 2 < len(waypoints):
            turn = turn_angle_deg(p0.position, p1.position, waypoints[i + 2].position)

        legs.append(LegInfo(
            from_index=p0.index,
            to_index=p1.index,
            distance_m=haversine_distance(p0.lat, p0.lon, p1.lat, p1.lon),
            bearing_deg=bearing(p0.lat, p0.lon, p1.lat, p1.lon),
            turn_angle_deg=turn,
            style=segment_style(p0, p1),
        ))

    return legs
