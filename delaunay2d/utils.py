from typing import TypeAlias
from numpy.typing import NDArray
import numpy as np

Vec2d: TypeAlias = tuple[float, float] | NDArray[np.floating]
Coords: TypeAlias = tuple[float, float]

# corners of the bounding square, stored ahead of every inserted point
N_BOUNDING_POINTS = 4


def next_slot(n: int) -> int:
    return n + 1 if n < 2 else 0


def prev_slot(n: int) -> int:
    return n - 1 if n > 0 else 2
