import numpy as np

from delaunay2d.delaunay import triangulate


if __name__ == "__main__":
    rng = np.random.default_rng(0)
    points = rng.uniform(0, 10, size=(40, 2))

    dt = triangulate(points)
    print(dt)
    dt.plot(show=True, point_labels=True)
