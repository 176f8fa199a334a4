from dataclasses import dataclass


@dataclass(frozen=True)
class TriangulatorConfig:
    """
    Knobs for point insertion.

    Attributes
    ----------
    robust_predicates : bool
        Use the exact in-circle determinant to find the triangles to remove.
        The default compares against the cached circumcircle in plain floats,
        which is fast but can misclassify points lying almost on a circle.
    max_circumradius_ratio : float
        Reject an insertion when one of the new triangles has a circumradius
        larger than this multiple of the bounding radius.
    check_invariants : bool
        Run the full (quadratic) invariant check after every insertion.
    """

    robust_predicates: bool = False
    max_circumradius_ratio: float = 1e6
    check_invariants: bool = False

    def __post_init__(self) -> None:
        if not self.max_circumradius_ratio > 0:
            raise ValueError(
                f"max_circumradius_ratio must be positive, got {self.max_circumradius_ratio}"
            )
