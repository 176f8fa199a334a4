"""Exceptions raised by the triangulator."""


class DelaunayError(Exception):
    """Base class for every error raised while building or querying a mesh."""


class PointOutOfBoundsError(DelaunayError, ValueError):
    """The point is not strictly inside the bounding square, or no
    circumcircle contains it."""


class DegenerateInputError(DelaunayError, ValueError):
    """The point would create a duplicate vertex, a flat or inverted
    triangle, or a circumcircle too large to compare against."""


class MeshConsistencyError(DelaunayError, RuntimeError):
    """The neighbor graph does not describe a valid triangulation."""


class IndexOutOfRangeError(MeshConsistencyError, IndexError):
    """A point index or triangle handle is not present in the mesh."""
