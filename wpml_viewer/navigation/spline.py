"""
Bezier spline

Smooth curve through an ordered list of 2D points. Between two
consecutive points the curve is a cubic Bezier whose control points are
derived from the neighbouring chord midpoints; `sharpness` scales how
far the controls are pulled away from the points (0 gives the plain
polyline).
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np


@dataclass
class SampledCurve:
    """
    Dense samples of a spline

    Attributes:
        points: (N, 2) array of samples in the input coordinate order
        knot_indices: Sample index of every input point, points[knot_indices[i]]
            is exactly the i-th input point
    """
    points: np.ndarray
    knot_indices: List[int]

    def __len__(self) -> int:
        return len(self.points)


class BezierSpline:
    """
    Piecewise cubic Bezier spline through all input points

    The curve passes through every input point; piece i runs from
    point i to point i + 1.
    """

    def __init__(self, points: Sequence[Tuple[float, float]], sharpness: float = 0.85):
        """
        Args:
            points: Ordered (x, y) points, at least one
            sharpness: Control point pull, 0-1
        """
        self.points = np.asarray(points, dtype=float).reshape(-1, 2)
        if len(self.points) == 0:
            raise ValueError("BezierSpline needs at least one point")

        self.sharpness = sharpness
        self._controls = self._compute_controls()

    @property
    def piece_count(self) -> int:
        return max(len(self.points) - 1, 0)

    def _compute_controls(self) -> np.ndarray:
        """
        Control point pairs, shape (len(points), 2, 2)

        controls[i][0] is the control entering point i, controls[i][1] the
        one leaving it. End points use themselves as controls.
        """
        pts = self.points
        n = len(pts)
        controls = np.empty((n, 2, 2))
        controls[0] = [pts[0], pts[0]]
        controls[n - 1] = [pts[n - 1], pts[n - 1]]

        if n < 3:
            return controls

        centers = (pts[:-1] + pts[1:]) / 2.0
        inner = pts[1:-1]
        # Shift both neighbouring chord midpoints so their mean lands on the point
        shift = inner - (centers[:-1] + centers[1:]) / 2.0
        s = self.sharpness

        controls[1:-1, 0] = (1.0 - s) * inner + s * (centers[:-1] + shift)
        controls[1:-1, 1] = (1.0 - s) * inner + s * (centers[1:] + shift)

        return controls

    def piece(self, i: int, t: np.ndarray) -> np.ndarray:
        """
        Evaluate piece i at local parameters t in [0, 1]

        Returns:
            (len(t), 2) array
        """
        t = np.asarray(t, dtype=float).reshape(-1, 1)
        p0 = self.points[i]
        c0 = self._controls[i][1]
        c1 = self._controls[i + 1][0]
        p1 = self.points[i + 1]

        u = 1.0 - t
        return (u ** 3) * p0 + 3 * (u ** 2) * t * c0 + 3 * u * (t ** 2) * c1 + (t ** 3) * p1

    def sample(self, samples_per_piece: int = 100) -> SampledCurve:
        """
        Sample the whole curve

        Every input point is itself one of the samples, so slicing the
        curve between two input points never misses an endpoint.

        Args:
            samples_per_piece: Number of samples per piece, excluding
                the piece's end point

        Returns:
            SampledCurve
        """
        samples_per_piece = max(int(samples_per_piece), 1)

        if self.piece_count == 0:
            return SampledCurve(points=self.points.copy(), knot_indices=[0])

        t = np.linspace(0.0, 1.0, samples_per_piece, endpoint=False)
        chunks = [self.piece(i, t) for i in range(self.piece_count)]
        chunks.append(self.points[-1:])

        knots = [i * samples_per_piece for i in range(len(self.points))]
        return SampledCurve(points=np.vstack(chunks), knot_indices=knots)
