import matplotlib.pyplot as plt

from delaunay2d.config import TriangulatorConfig
from delaunay2d.delaunay import Delaunay2D
from delaunay2d.errors import DelaunayError


if __name__ == "__main__":
    dt = Delaunay2D(center=(0, 0), radius=50, config=TriangulatorConfig(check_invariants=True))
    points = [(13, 12), (18, 19), (21, 5), (37, -3), (13, 12), (-4, 30), (60, 0)]

    fig, axes = plt.subplots(2, 4, figsize=(16, 8))
    for ax, point in zip(axes.flat, points):
        try:
            idx = dt.insert(point)
            title = f"point {idx} at {point}"
        except DelaunayError as e:
            title = f"rejected {point}: {type(e).__name__}"
        dt.plot(ax=ax, include_bounding=True, title=title, fontsize=6)

    print(dt.export_triangles())
    print(dt.point_neighbors())
    plt.show()
