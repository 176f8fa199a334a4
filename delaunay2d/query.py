"""Query functions over the live mesh and its exported triangles."""

from collections.abc import Iterable

from delaunay2d.errors import IndexOutOfRangeError
from delaunay2d.mesh import Triangle, TriangleMesh


def incident_triangles(mesh: TriangleMesh, v: int) -> list[Triangle]:
    """
    Live triangles having internal point `v` as a vertex, in creation order.
    Full scan.
    """
    mesh.point(v)
    return [record.vertices for record in mesh if v in record.vertices]


def point_adjacency(triangles: Iterable[Triangle], n_points: int) -> list[list[int]]:
    """
    Build the point-adjacency graph of a triangulation.

    Parameters
    ----------
    triangles : Iterable[Triangle]
        Triangles as index triples, e.g. the output of `export_triangles`
    n_points : int
        Number of points the indices refer to

    Returns
    -------
    list[list[int]]
        For every point, the sorted indices of the points sharing an edge with it
    """
    adjacency: list[set[int]] = [set() for _ in range(n_points)]
    for t in triangles:
        for v in t:
            if not 0 <= v < n_points:
                raise IndexOutOfRangeError(
                    f"Triangle {tuple(t)} references point {v} (valid range: 0-{n_points - 1})"
                )
        a, b, c = t
        adjacency[a].update((b, c))
        adjacency[b].update((c, a))
        adjacency[c].update((a, b))
    return [sorted(neighbors) for neighbors in adjacency]
