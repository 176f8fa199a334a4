from collections.abc import Iterable, Sequence

import numpy as np
from numpy.typing import NDArray
from loguru import logger

from delaunay2d.build import initialize_mesh, insert_point
from delaunay2d.config import TriangulatorConfig
from delaunay2d.geometry import Point
from delaunay2d.mesh import Triangle, TNeighbours
from delaunay2d.query import point_adjacency
from delaunay2d.topology import validate_mesh
from delaunay2d.utils import Coords, Vec2d
from delaunay2d.voronoi import export_voronoi_regions, voronoi_cell_polygons


class Delaunay2D:
    """
    Incremental Delaunay triangulation of points inside a bounding square.

    All points added to the triangulator must fall strictly within the
    square centered at `center` and extending `radius` in each direction.
    The square's 4 corners are kept as hidden vertices: every index handed
    out or accepted by this class counts inserted points only, starting at 0.

    An instance is not thread-safe. `insert` needs exclusive access; the
    export methods only read and may run concurrently with each other.
    """

    def __init__(
        self,
        center: Vec2d = (0.0, 0.0),
        radius: float = 1.0,
        config: TriangulatorConfig | None = None,
    ) -> None:
        self.config = config or TriangulatorConfig()
        self.mesh = initialize_mesh(Point.of(center), float(radius))

    def __len__(self) -> int:
        return len(self.mesh.points) - self.mesh.n_bounding

    def __repr__(self) -> str:
        return (
            f"Delaunay2D(center={tuple(self.mesh.center)}, radius={self.mesh.radius}, "
            f"points={len(self)}, triangles={self.triangle_count})"
        )

    @property
    def triangle_count(self) -> int:
        """Number of live triangles, those touching the bounding square included."""
        return len(self.mesh)

    def insert(self, point: Vec2d) -> int:
        """
        Add a point to the triangulation.

        :return: external index of the new point
        :raises PointOutOfBoundsError: the point is not strictly inside the square
        :raises DegenerateInputError: duplicate or numerically degenerate point;
            the triangulation is left unchanged
        :raises MeshConsistencyError: the mesh is corrupted
        """
        idx = insert_point(self.mesh, Point.of(point), self.config)
        return idx - self.mesh.n_bounding

    add_point = insert

    def insert_many(self, points: Iterable[Vec2d]) -> list[int]:
        return [self.insert(p) for p in points]

    def export_triangles(self) -> list[Triangle]:
        """
        Triangles not touching the bounding square, as counterclockwise triples
        of external point indices, sorted.
        """
        mesh = self.mesh
        return sorted(
            mesh.to_external(record.vertices)
            for record in mesh
            if not mesh.is_bounding_triangle(record.vertices)
        )

    def export_points(self) -> list[Coords]:
        """The points added to the triangulation, in insertion order."""
        return [(p.x, p.y) for p in self.mesh.points[self.mesh.n_bounding :]]

    def get_adjacent(self, t: Triangle | Sequence[int]) -> TNeighbours | None:
        """
        Neighbours of an exported triangle. The first neighbour is adjacent to
        the edge opposite the first vertex, etc. Neighbours touching the
        bounding square are reported as None.

        :return: None if the triangle is not part of the triangulation, or is
            not a triple of integer indices
        """
        if len(t) != 3 or not all(isinstance(v, (int, np.integer)) for v in t):
            return None
        internal = self.mesh.to_internal(Triangle(*(int(v) for v in t)))
        if any(self.mesh.is_bounding_vertex(v) for v in internal):
            return None
        return self.mesh.external_neighbors(internal)

    def export_voronoi_regions(self) -> tuple[list[Coords], list[list[int]]]:
        """
        Vertices of the Voronoi regions, and for every point (in insertion
        order) the counterclockwise indices of the vertices forming its region.
        """
        return export_voronoi_regions(self.mesh)

    def export_voronoi_cells(self) -> list[list[Coords]]:
        """Voronoi cell polygon of every point, in insertion order."""
        return voronoi_cell_polygons(*self.export_voronoi_regions())

    def point_neighbors(self) -> list[list[int]]:
        """Sorted Delaunay neighbours of every point, bounding corners excluded."""
        return point_adjacency(self.export_triangles(), len(self))

    def validate(self) -> None:
        """
        Check every mesh invariant, raising MeshConsistencyError on the first
        violation. Quadratic in the number of points.
        """
        validate_mesh(self.mesh, exact=self.config.robust_predicates)

    def plot(self, **kwargs):
        """Plot the triangulation; see `debug_utils.plot_triangulation`."""
        from delaunay2d.debug_utils import plot_triangulation

        return plot_triangulation(self, **kwargs)


def bounding_square(
    points: NDArray[np.floating],
    center: Vec2d | None = None,
    margin: float = 0.1,
) -> tuple[tuple[float, float], float]:
    """
    Axis-aligned square around `points`, grown by `margin` (relative to its
    half side) so that every point lies strictly inside.

    :param center: keep this center instead of the middle of the points' bounding box
    """
    if len(points) == 0:
        center = (0.0, 0.0) if center is None else center
        return (float(center[0]), float(center[1])), 1.0
    if center is None:
        center = (np.min(points, axis=0) + np.max(points, axis=0)) / 2
    center = np.asarray(center, dtype=float)
    half = float(np.max(np.abs(points - center)))
    if half == 0.0:
        half = 1.0
    return (float(center[0]), float(center[1])), half * (1.0 + margin)


def triangulate(
    points: NDArray[np.floating] | Sequence[Vec2d],
    center: Vec2d | None = None,
    radius: float | None = None,
    margin: float = 0.1,
    config: TriangulatorConfig | None = None,
) -> Delaunay2D:
    """
    Delaunay triangulation of a batch of points, inserted in the given order.

    :param points: (n, 2) array or sequence of (x, y) pairs
    :param center: center of the bounding square; derived from the points if omitted
    :param radius: half side of the bounding square; derived from the points if omitted
    :param margin: relative margin used when deriving the bounding square
    :param config: insertion settings
    :return: the triangulation, external indices matching the input order
    """
    points = np.asarray(points, dtype=float)
    if points.size == 0:
        points = points.reshape(0, 2)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"Expected an (n, 2) array of points, got shape {points.shape}")
    if margin <= 0:
        raise ValueError(f"Margin must be positive, got {margin}")

    if radius is None:
        center, radius = bounding_square(points, center, margin)
    elif center is None:
        center, _ = bounding_square(points, None, margin)

    dt = Delaunay2D(center, radius, config=config)
    logger.debug(f"Triangulating {len(points)} points in {dt!r}")
    for point in points:
        dt.insert(point)
    return dt
