import math
from dataclasses import dataclass

from shewchuk import incircle_test, orientation

from delaunay2d.utils import Vec2d


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __post_init__(self) -> None:
        # numpy scalars would leak into every derived value
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def mag(self) -> float:
        """Squared magnitude."""
        return self.x * self.x + self.y * self.y

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def of(cls, p: "Vec2d | Point") -> "Point":
        if isinstance(p, Point):
            return p
        return cls(p[0], p[1])


def circumcircle(a: Point, b: Point, c: Point) -> tuple[Point, float]:
    """
    Circumcenter and squared circumradius of the triangle (a, b, c).

    Works in coordinates relative to `a`. Collinear input yields a NaN
    center and an infinite radius, which the caller must reject.
    """
    ba = b - a
    ca = c - a
    # squared lengths of the edges incident to a
    ba_length = ba.mag()
    ca_length = ca.mag()

    cross = ba.x * ca.y - ba.y * ca.x
    if cross == 0.0:
        return Point(math.nan, math.nan), math.inf
    denominator = 0.5 / cross

    relative = Point(
        (ca.y * ba_length - ba.y * ca_length) * denominator,
        (ba.x * ca_length - ca.x * ba_length) * denominator,
    )
    return a + relative, relative.mag()


def in_circle_fast(center: Point, radius_sq: float, p: Point) -> bool:
    """
    Cached-circle test: True if p is inside or on the circle.

    Not robust. Points within a few ulps of the circle may land on either
    side, see `incircle` for the exact version.
    """
    return (center - p).mag() <= radius_sq


def orient2d(a: Point, b: Point, c: Point) -> int:
    """
    Orientation of the triple (a, b, c), computed exactly.

    Returns +1 if counterclockwise, -1 if clockwise and 0 if collinear.
    """
    return orientation(*a, *b, *c)


def incircle(a: Point, b: Point, c: Point, d: Point) -> int:
    """
    Location of d relative to the circle through a, b and c, computed exactly.

    For a counterclockwise triangle (a, b, c) returns +1 if d lies inside
    the circle, -1 if outside and 0 if exactly on it. The sign flips for a
    clockwise triangle.
    """
    # incircle_test is negative for a point inside a counterclockwise triangle
    return -incircle_test(*a, *b, *c, *d)


def is_inside_square(center: Point, radius: float, p: Point) -> bool:
    # strict: points on the square's edges would be collinear with two corners
    return abs(p.x - center.x) < radius and abs(p.y - center.y) < radius

