from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import NamedTuple

from delaunay2d.errors import IndexOutOfRangeError
from delaunay2d.geometry import Point


class Triangle(NamedTuple):
    """
    Three point indices in counterclockwise order.

    Equality is plain tuple equality, so rotations of the same face are
    different values. New faces always start with the inserted point.
    """

    i0: int
    i1: int
    i2: int

    def has_edge(self, e0: int, e1: int) -> bool:
        return e0 in self and e1 in self

    def rotated_to_end(self, v: int) -> "Triangle":
        """Rotate the triple (keeping its winding) so that v comes last."""
        a, b, c = self
        if v == c:
            return self
        if v == a:
            return Triangle(b, c, a)
        if v == b:
            return Triangle(c, a, b)
        raise ValueError(f"{v} is not a vertex of {self}")

    def offset(self, k: int) -> "Triangle":
        return Triangle(self.i0 + k, self.i1 + k, self.i2 + k)


class TNeighbours(NamedTuple):
    """The triangles opposite to each vertex, if any."""

    n0: Triangle | None
    n1: Triangle | None
    n2: Triangle | None


@dataclass(eq=False)
class TriangleRecord:
    handle: int
    vertices: Triangle
    center: Point
    radius_sq: float
    # neighbors[k] is the handle of the triangle across the edge opposite vertex k
    neighbors: list[int | None] = field(default_factory=lambda: [None, None, None])


@dataclass
class TriangleMesh:
    """
    Arena of live triangles addressed by stable integer handles.

    Handles are never reused and `records` keeps creation order, which is
    also the order every export enumerates triangles in. The circumcircle of
    a triangle lives in its record, so removing the record drops both.
    """

    points: list[Point]
    center: Point
    radius: float
    bounding_vertices: frozenset[int]
    records: dict[int, TriangleRecord] = field(default_factory=dict)
    by_vertices: dict[Triangle, int] = field(default_factory=dict)
    next_handle: int = 0

    @property
    def n_bounding(self) -> int:
        return len(self.bounding_vertices)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[TriangleRecord]:
        return iter(self.records.values())

    def is_bounding_vertex(self, v: int) -> bool:
        return v in self.bounding_vertices

    def is_bounding_triangle(self, t: Triangle) -> bool:
        return any(v in self.bounding_vertices for v in t)

    def external_vertices(self) -> range:
        return range(self.n_bounding, len(self.points))

    def point(self, v: int) -> Point:
        if not 0 <= v < len(self.points):
            raise IndexOutOfRangeError(
                f"Point {v} out of range (mesh has {len(self.points)} points)"
            )
        return self.points[v]

    def record(self, handle: int) -> TriangleRecord:
        try:
            return self.records[handle]
        except KeyError:
            raise IndexOutOfRangeError(f"No live triangle with handle {handle}") from None

    def find(self, t: Triangle) -> int | None:
        return self.by_vertices.get(t)

    def add_triangle(
        self,
        vertices: Triangle,
        center: Point,
        radius_sq: float,
        neighbors: list[int | None] | None = None,
    ) -> TriangleRecord:
        for v in vertices:
            self.point(v)
        handle = self.next_handle
        self.next_handle += 1
        record = TriangleRecord(
            handle=handle,
            vertices=vertices,
            center=center,
            radius_sq=radius_sq,
            neighbors=list(neighbors) if neighbors is not None else [None, None, None],
        )
        self.records[handle] = record
        self.by_vertices[vertices] = handle
        return record

    def remove_triangle(self, handle: int) -> TriangleRecord:
        record = self.record(handle)
        del self.records[handle]
        del self.by_vertices[record.vertices]
        return record

    def neighbors_of(self, t: Triangle) -> TNeighbours | None:
        """Neighbor record of an internal triangle, bounding triangles included."""
        handle = self.find(t)
        if handle is None:
            return None
        return TNeighbours(
            *(
                self.records[n].vertices if n is not None else None
                for n in self.records[handle].neighbors
            )
        )

    def to_external(self, t: Triangle) -> Triangle:
        return t.offset(-self.n_bounding)

    def to_internal(self, t: Triangle) -> Triangle:
        return t.offset(self.n_bounding)

    def external_neighbors(self, t: Triangle) -> TNeighbours | None:
        """
        Neighbor record of an internal triangle as seen from outside: bounding
        triangles become None and the remaining ones are re-indexed.
        """
        neighbours = self.neighbors_of(t)
        if neighbours is None:
            return None
        return TNeighbours(
            *(
                None
                if n is None or self.is_bounding_triangle(n)
                else self.to_external(n)
                for n in neighbours
            )
        )
