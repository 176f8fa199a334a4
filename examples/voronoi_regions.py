import numpy as np

from delaunay2d.delaunay import triangulate


if __name__ == "__main__":
    rng = np.random.default_rng(1)
    points = rng.normal(size=(25, 2))

    dt = triangulate(points, margin=0.5)
    vertices, regions = dt.export_voronoi_regions()
    for idx, region in enumerate(regions):
        print(idx, region)

    dt.plot(show=True, voronoi=True, title="Voronoi cells")
