from collections import defaultdict

from loguru import logger

from delaunay2d.errors import MeshConsistencyError
from delaunay2d.geometry import incircle
from delaunay2d.mesh import Triangle, TriangleMesh, TriangleRecord
from delaunay2d.utils import next_slot, prev_slot


def edge_opposite(t: Triangle, slot: int) -> tuple[int, int]:
    """Counterclockwise edge of `t` opposite to vertex `slot`."""
    return t[next_slot(slot)], t[prev_slot(slot)]


def slot_across_edge(t: Triangle, e0: int, e1: int) -> int | None:
    """
    Slot k such that the edge opposite vertex k of `t` is {e0, e1}, in
    either direction. None if `t` does not have that edge.
    """
    if e0 == e1 or not t.has_edge(e0, e1):
        return None
    for k, v in enumerate(t):
        if v != e0 and v != e1:
            return k
    return None


def find_back_reference(record: TriangleRecord, neighbor_handle: int) -> int:
    """
    Find which slot (0, 1, or 2) of `record` points at the given neighbor.
    """
    for k, n in enumerate(record.neighbors):
        if n == neighbor_handle:
            return k
    raise MeshConsistencyError(
        f"Triangle {record.vertices} does not reference neighbor handle {neighbor_handle}"
    )



def check_neighbor_symmetry(mesh: TriangleMesh) -> None:
    """
    Every neighbor link must be mirrored across the same edge.
    """
    for record in mesh:
        for slot, n in enumerate(record.neighbors):
            if n is None:
                continue
            neighbor = mesh.record(n)
            e0, e1 = edge_opposite(record.vertices, slot)
            back_slot = slot_across_edge(neighbor.vertices, e0, e1)
            if back_slot is None:
                raise MeshConsistencyError(
                    f"{record.vertices} lists {neighbor.vertices} across ({e0}, {e1}), "
                    f"but they do not share that edge"
                )
            if neighbor.neighbors[back_slot] != record.handle:
                raise MeshConsistencyError(
                    f"{record.vertices} lists {neighbor.vertices} as neighbor across "
                    f"({e0}, {e1}), but the link is not mirrored"
                )


def check_manifold_edges(mesh: TriangleMesh) -> None:
    """
    No duplicate triangles, no edge bordering more than two triangles, and
    triangles on the two sides of an edge traverse it in opposite directions.
    """
    faces: set[frozenset[int]] = set()
    directed: dict[tuple[int, int], Triangle] = {}
    undirected: dict[frozenset[int], int] = defaultdict(int)
    for record in mesh:
        t = record.vertices
        face = frozenset(t)
        if len(face) != 3 or face in faces:
            raise MeshConsistencyError(f"Duplicate or degenerate triangle {t}")
        faces.add(face)
        for slot in range(3):
            edge = edge_opposite(t, slot)
            if edge in directed:
                raise MeshConsistencyError(
                    f"Edge {edge} traversed in the same direction by {directed[edge]} and {t}"
                )
            directed[edge] = t
            undirected[frozenset(edge)] += 1
            if undirected[frozenset(edge)] > 2:
                raise MeshConsistencyError(f"Edge {edge} borders more than two triangles")


def check_delaunay(mesh: TriangleMesh, exact: bool = True, rtol: float = 1e-9) -> None:
    """
    No point may lie strictly inside the circumcircle of a live triangle.

    :param exact: use the exact in-circle predicate; otherwise compare
        against the cached circle, allowing a relative slack of `rtol`
    """
    for record in mesh:
        a, b, c = (mesh.points[v] for v in record.vertices)
        for idx, p in enumerate(mesh.points):
            if idx in record.vertices:
                continue
            if exact:
                inside = incircle(a, b, c, p) > 0
            else:
                inside = (record.center - p).mag() < record.radius_sq * (1.0 - rtol)
            if inside:
                raise MeshConsistencyError(
                    f"Point {idx} lies inside the circumcircle of {record.vertices}"
                )


def validate_mesh(mesh: TriangleMesh, exact: bool = True) -> None:
    check_manifold_edges(mesh)
    check_neighbor_symmetry(mesh)
    check_delaunay(mesh, exact=exact)
    logger.trace(f"Mesh with {len(mesh)} triangles passed all invariant checks")
