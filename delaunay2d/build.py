import math
from dataclasses import dataclass

from loguru import logger

from delaunay2d.config import TriangulatorConfig
from delaunay2d.errors import (
    DegenerateInputError,
    DelaunayError,
    MeshConsistencyError,
    PointOutOfBoundsError,
)
from delaunay2d.geometry import (
    Point,
    circumcircle,
    in_circle_fast,
    incircle,
    is_inside_square,
    orient2d,
)
from delaunay2d.mesh import Triangle, TriangleMesh
from delaunay2d.topology import (
    edge_opposite,
    find_back_reference,
    slot_across_edge,
    validate_mesh,
)
from delaunay2d.utils import N_BOUNDING_POINTS, next_slot


@dataclass(frozen=True)
class BoundaryEdge:
    """
    One counterclockwise edge of the cavity, with the handle of the
    surviving triangle on its far side (None on the mesh border).
    """

    start: int
    end: int
    outside: int | None


@dataclass(frozen=True)
class StagedTriangle:
    vertices: Triangle
    center: Point
    radius_sq: float
    outside: int | None
    outside_slot: int | None


@dataclass(frozen=True)
class InsertionPlan:
    """Everything needed to commit one insertion, computed without mutating the mesh."""

    point: Point
    point_idx: int
    bad: tuple[int, ...]
    new_triangles: tuple[StagedTriangle, ...]


def initialize_mesh(center: Point, radius: float) -> TriangleMesh:
    """
    Initialize the mesh with a bounding square split along one diagonal.

    :param center: center of the square
    :param radius: half the side; every inserted point must lie strictly inside
    :return: mesh holding the 4 corners and 2 triangles
    """
    if not center.is_finite():
        raise ValueError(f"Center must be finite, got {center}")
    if not (math.isfinite(radius) and radius > 0):
        raise ValueError(f"Radius must be positive and finite, got {radius}")

    corners = [
        Point(center.x - radius, center.y - radius),
        Point(center.x + radius, center.y - radius),
        Point(center.x + radius, center.y + radius),
        Point(center.x - radius, center.y + radius),
    ]
    mesh = TriangleMesh(
        points=corners,
        center=center,
        radius=radius,
        bounding_vertices=frozenset(range(N_BOUNDING_POINTS)),
    )

    t1 = Triangle(0, 1, 3)
    t2 = Triangle(2, 3, 1)
    r1 = mesh.add_triangle(t1, *circumcircle(*(corners[v] for v in t1)))
    r2 = mesh.add_triangle(t2, *circumcircle(*(corners[v] for v in t2)))
    # the diagonal (1, 3) is opposite vertex 0 in both
    r1.neighbors[0] = r2.handle
    r2.neighbors[0] = r1.handle
    return mesh


def find_bad_triangles(
    mesh: TriangleMesh, point: Point, config: TriangulatorConfig
) -> list[int]:
    """
    Handles of every triangle whose circumcircle contains `point` (boundary
    included), in creation order. Full scan.
    """
    if config.robust_predicates:
        points = mesh.points
        return [
            record.handle
            for record in mesh
            if incircle(*(points[v] for v in record.vertices), point) >= 0
        ]
    return [
        record.handle
        for record in mesh
        if in_circle_fast(record.center, record.radius_sq, point)
    ]


def walk_cavity_boundary(mesh: TriangleMesh, bad: list[int]) -> list[BoundaryEdge]:
    """
    Walk counterclockwise around the union of the bad triangles.

    Starts from the first bad triangle at slot 0. An edge whose far side is
    missing or not bad goes on the boundary; otherwise the walk hops into
    the far triangle and resumes at the slot after the one it came through.
    Each (triangle, slot) state is visited at most once on a valid mesh,
    so more than twice that many steps means the neighbor graph is broken.

    :return: closed cycle of boundary edges, each starting where the previous one ends
    """
    if not bad:
        raise MeshConsistencyError("Cannot walk the boundary of an empty cavity")

    bad_set = set(bad)
    handle = bad[0]
    slot = 0
    boundary: list[BoundaryEdge] = []
    max_steps = 6 * len(bad)

    for step in range(max_steps):
        record = mesh.record(handle)
        across = record.neighbors[slot]
        if across is None or across not in bad_set:
            start, end = edge_opposite(record.vertices, slot)
            if boundary and boundary[-1].end != start:
                raise MeshConsistencyError(
                    f"Cavity boundary is not connected: edge ({start}, {end}) "
                    f"does not continue from {boundary[-1].end}"
                )
            boundary.append(BoundaryEdge(start, end, across))
            logger.trace(f"Step {step}: boundary edge ({start}, {end}) -> {across}")
            slot = next_slot(slot)
            if boundary[0].start == boundary[-1].end:
                break
        else:
            # resume in the far triangle right after the edge we crossed
            back = find_back_reference(mesh.record(across), handle)
            logger.trace(f"Step {step}: hop {handle} -> {across}")
            handle = across
            slot = next_slot(back)
    else:
        raise MeshConsistencyError(
            f"Cavity boundary walk did not close after {max_steps} steps "
            f"({len(bad)} bad triangles, {len(boundary)} boundary edges)"
        )

    starts = [edge.start for edge in boundary]
    if len(set(starts)) != len(starts):
        raise MeshConsistencyError(f"Cavity boundary visits a vertex twice: {starts}")
    return boundary


def stage_insertion(
    mesh: TriangleMesh, point: Point, config: TriangulatorConfig
) -> InsertionPlan:
    """
    Compute and validate the retriangulation for `point` without touching
    the mesh. Raises before anything is committed.
    """
    if not point.is_finite() or not is_inside_square(mesh.center, mesh.radius, point):
        raise PointOutOfBoundsError(
            f"Point {tuple(point)} is not strictly inside the bounding square "
            f"centered at {tuple(mesh.center)} with radius {mesh.radius}"
        )
    for idx, existing in enumerate(mesh.points):
        if existing == point:
            raise DegenerateInputError(
                f"Point {tuple(point)} duplicates point {idx - mesh.n_bounding}"
            )

    bad = find_bad_triangles(mesh, point, config)
    if not bad:
        raise PointOutOfBoundsError(
            f"No circumcircle contains {tuple(point)}; the point is out of bounds"
        )

    boundary = walk_cavity_boundary(mesh, bad)
    bad_set = set(bad)
    point_idx = len(mesh.points)
    max_radius_sq = (config.max_circumradius_ratio * mesh.radius) ** 2

    staged = []
    for edge in boundary:
        a, b = mesh.point(edge.start), mesh.point(edge.end)
        vertices = Triangle(point_idx, edge.start, edge.end)
        if orient2d(point, a, b) <= 0:
            raise DegenerateInputError(
                f"Point {tuple(point)} is collinear with or behind edge "
                f"({edge.start}, {edge.end}); the new triangle would be flat or inverted"
            )
        center, radius_sq = circumcircle(point, a, b)
        if not math.isfinite(radius_sq) or radius_sq > max_radius_sq:
            raise DegenerateInputError(
                f"Triangle {vertices} has squared circumradius {radius_sq}, "
                f"limit is {max_radius_sq}"
            )

        outside_slot = None
        if edge.outside is not None:
            outside = mesh.record(edge.outside)
            outside_slot = slot_across_edge(outside.vertices, edge.start, edge.end)
            if outside_slot is None or outside.neighbors[outside_slot] not in bad_set:
                raise MeshConsistencyError(
                    f"Triangle {outside.vertices} does not link back into the cavity "
                    f"across edge ({edge.start}, {edge.end})"
                )
        staged.append(
            StagedTriangle(
                vertices=vertices,
                center=center,
                radius_sq=radius_sq,
                outside=edge.outside,
                outside_slot=outside_slot,
            )
        )

    return InsertionPlan(
        point=point, point_idx=point_idx, bad=tuple(bad), new_triangles=tuple(staged)
    )


def commit_insertion(mesh: TriangleMesh, plan: InsertionPlan) -> int:
    """Apply a staged insertion. Returns the internal index of the new point."""
    mesh.points.append(plan.point)
    for handle in plan.bad:
        mesh.remove_triangle(handle)

    new_handles = []
    for staged in plan.new_triangles:
        # the surviving triangle across the cavity edge sits opposite the new point
        record = mesh.add_triangle(
            staged.vertices,
            staged.center,
            staged.radius_sq,
            neighbors=[staged.outside, None, None],
        )
        if staged.outside is not None:
            mesh.records[staged.outside].neighbors[staged.outside_slot] = record.handle
        new_handles.append(record.handle)

    # link the fan: slot 1 faces the next triangle around the point, slot 2 the previous
    n = len(new_handles)
    for i, handle in enumerate(new_handles):
        neighbors = mesh.records[handle].neighbors
        neighbors[1] = new_handles[(i + 1) % n]
        neighbors[2] = new_handles[(i - 1) % n]

    return plan.point_idx


def insert_point(
    mesh: TriangleMesh, point: Point, config: TriangulatorConfig | None = None
) -> int:
    """
    Insert a point into the mesh (one Bowyer-Watson step).

    :param mesh: mesh to update in place
    :param point: coordinates of the new point
    :param config: predicate and validation settings
    :return: internal index of the inserted point
    :raises PointOutOfBoundsError: point outside the bounding square
    :raises DegenerateInputError: duplicate point or numerically flat triangle
    :raises MeshConsistencyError: the neighbor graph is broken
    """
    config = config or TriangulatorConfig()
    try:
        plan = stage_insertion(mesh, point, config)
    except DelaunayError as e:
        logger.warning(f"Rejected point {tuple(point)}: {e}")
        raise

    point_idx = commit_insertion(mesh, plan)
    logger.debug(
        f"Inserted point {point_idx}: removed {len(plan.bad)} triangles, "
        f"created {len(plan.new_triangles)}, mesh has {len(mesh)}"
    )

    if config.check_invariants:
        validate_mesh(mesh, exact=config.robust_predicates)
    return point_idx
