"""
CurveModel - The four control points of the single cubic Bezier curve.
"""

import numpy as np

# Hit radius in preview units, large enough for a fingertip
HIT_RADIUS = 22

# Default layout as fractions of the canvas size: P0, P1, P2, P3
DEFAULT_LAYOUT = (
    (0.15, 0.25),
    (0.75, 0.15),
    (0.25, 0.85),
    (0.85, 0.75),
)


class CurveModel:
    """
    Holds the control points P0..P3 of one cubic Bezier curve.

    P0 and P3 are the end points, P1 and P2 the handles. Points are (x, y)
    float tuples in whatever coordinate space the owner works in (preview
    space for the interactive curve).
    """

    def __init__(self, points=None, hit_radius=HIT_RADIUS):
        """
        Initialize the curve.

        Args:
            points: Four (x, y) pairs, or None for an all-zero curve
            hit_radius: Maximum distance for hit_test to pick a point
        """
        if points is None:
            points = [(0.0, 0.0)] * 4
        if len(points) != 4:
            raise ValueError("A cubic Bezier curve needs exactly 4 points")

        self.points = [(float(x), float(y)) for x, y in points]
        self.hit_radius = hit_radius

    def __eq__(self, other):
        if not isinstance(other, CurveModel):
            return NotImplemented
        return self.points == other.points

    def __repr__(self):
        return f"CurveModel({self.points!r})"

    def get_points(self):
        """Get a copy of the four control points"""
        return list(self.points)

    def copy(self):
        """Return an independent copy of this curve"""
        return CurveModel(self.points, hit_radius=self.hit_radius)

    def reset(self, width, height):
        """
        Place the points at the default layout for a canvas of the given size.

        Args:
            width: Canvas width
            height: Canvas height
        """
        self.points = [(fx * width, fy * height) for fx, fy in DEFAULT_LAYOUT]

    def hit_test(self, x, y):
        """
        Find the control point under the given position.

        Points are checked in index order, so the lowest index wins when
        several are within reach.

        Args:
            x: X coordinate to check
            y: Y coordinate to check

        Returns:
            int: Index of the point, or None if no point is within hit_radius
        """
        for i, (px, py) in enumerate(self.points):
            distance = np.sqrt((x - px)**2 + (y - py)**2)
            if distance <= self.hit_radius:
                return i
        return None

    def move_point(self, index, x, y, bounds):
        """
        Move a control point, clamping it into the bounds.

        Args:
            index: Point index (0-3)
            x: New X coordinate
            y: New Y coordinate
            bounds: (width, height) of the canvas

        Returns:
            bool: True if the point was moved, False for an invalid index
        """
        if index is None or not 0 <= index < len(self.points):
            return False

        bounds_w, bounds_h = bounds
        x = min(max(float(x), 0.0), float(bounds_w))
        y = min(max(float(y), 0.0), float(bounds_h))
        self.points[index] = (x, y)
        return True

    def scaled_by(self, sx, sy):
        """
        Return a new curve with every x multiplied by sx and y by sy.

        Used to carry the preview curve into export space.
        """
        return CurveModel([(x * sx, y * sy) for x, y in self.points],
                          hit_radius=self.hit_radius)

    def as_array(self):
        """Get the control points as a (4, 2) float array"""
        return np.array(self.points, dtype=np.float64)

    def evaluate(self, t):
        """
        Evaluate the curve at one or more parameter values.

        The cubic Bernstein blend is expanded around P0, so a coordinate
        shared by all four points comes back unchanged.

        Args:
            t: Scalar or array of parameter values in [0, 1]

        Returns:
            tuple: (x, y) as floats or arrays matching the shape of t
        """
        t = np.asarray(t, dtype=np.float64)
        pts = self.as_array()
        p0, p1, p2, p3 = pts[0], pts[1], pts[2], pts[3]

        c1 = 3.0 * (p1 - p0)
        c2 = 3.0 * (p2 - 2.0 * p1 + p0)
        c3 = p3 - 3.0 * p2 + 3.0 * p1 - p0

        tt = t[..., np.newaxis]
        xy = p0 + tt * (c1 + tt * (c2 + tt * c3))
        if t.ndim == 0:
            return float(xy[0]), float(xy[1])
        return xy[..., 0], xy[..., 1]

    def curve_points(self, segments=100):
        """
        Sample the curve as a polyline for drawing.

        Args:
            segments: Number of line segments

        Returns:
            numpy array of shape (segments + 1, 2)
        """
        t = np.arange(segments + 1) / segments
        x, y = self.evaluate(t)
        return np.stack([x, y], axis=1)
