"""
Flight path reconstruction
"""

from .spline import BezierSpline, SampledCurve
from .path_builder import (
    FlightPathBuilder,
    KnotSegmentMatcher,
    LegInfo,
    PathSegment,
    SegmentMatcher,
    SegmentStyle,
    ThresholdSegmentMatcher,
    build_path,
    describe_legs,
    segment_style,
)

__all__ = [
    'BezierSpline',
    'SampledCurve',
    'FlightPathBuilder',
    'KnotSegmentMatcher',
    'LegInfo',
    'PathSegment',
    'SegmentMatcher',
    'SegmentStyle',
    'ThresholdSegmentMatcher',
    'build_path',
    'describe_legs',
    'segment_style',
]
