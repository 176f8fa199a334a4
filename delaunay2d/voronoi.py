"""Voronoi dual of the triangulation: one vertex per triangle circumcenter,
one counterclockwise cycle of vertices per inserted point."""

from collections import defaultdict

from loguru import logger

from delaunay2d.errors import MeshConsistencyError
from delaunay2d.mesh import Triangle, TriangleMesh
from delaunay2d.utils import Coords


def export_voronoi_regions(
    mesh: TriangleMesh,
) -> tuple[list[Coords], list[list[int]]]:
    """
    Voronoi vertices and, for every non-bounding point, the indices of the
    vertices bounding its cell.

    Every live triangle contributes its circumcenter, bounding triangles
    included, so the cells of points next to the square are closed by
    vertices at the periphery.

    Returns
    -------
    (list[tuple[float, float]], list[list[int]])
        - Voronoi vertices, indexed by enumeration order over the mesh
        - One counterclockwise region per point, in insertion order
    """
    vertices: list[Coords] = []
    # per point, its incident triangles rotated so the point comes last
    fans: dict[int, list[Triangle]] = defaultdict(list)
    index: dict[Triangle, int] = {}

    for tidx, record in enumerate(mesh):
        vertices.append((record.center.x, record.center.y))
        for v in record.vertices:
            rotated = record.vertices.rotated_to_end(v)
            fans[v].append(rotated)
            index[rotated] = tidx

    regions = []
    for v in mesh.external_vertices():
        fan = fans[v]
        by_first = {t.i0: t for t in fan}
        if not fan or len(by_first) != len(fan):
            raise MeshConsistencyError(
                f"Point {v} has a malformed triangle fan: {fan}"
            )

        exit_vertex = fan[0].i0
        region = []
        for _ in range(len(fan)):
            # the next triangle around v starts where the current one leaves
            t = by_first.get(exit_vertex)
            if t is None:
                raise MeshConsistencyError(
                    f"Fan around point {v} is broken after vertex {exit_vertex}"
                )
            region.append(index[t])
            exit_vertex = t.i1
        if exit_vertex != fan[0].i0:
            raise MeshConsistencyError(f"Fan around point {v} does not close")
        regions.append(region)

    logger.debug(f"Extracted {len(regions)} Voronoi regions from {len(vertices)} vertices")
    return vertices, regions


def voronoi_cell_polygons(
    vertices: list[Coords], regions: list[list[int]]
) -> list[list[Coords]]:
    """Resolve region indices into polygon coordinates."""
    return [[vertices[i] for i in region] for region in regions]
