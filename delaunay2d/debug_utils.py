import typing

import numpy as np

if typing.TYPE_CHECKING:
    from delaunay2d.delaunay import Delaunay2D


def plot_triangulation(
    dt: "Delaunay2D",
    ax=None,
    show: bool = False,
    title: str = "Triangulation",
    point_labels: bool = False,
    include_bounding: bool = False,
    voronoi: bool = False,
    fontsize: int = 7,
):
    """
    Plot the triangulation using matplotlib.

    :param dt: triangulation to draw
    :param ax: axes to draw on; a new figure is created if None
    :param show: Whether to call plt.show() after plotting
    :param title: Title of the plot
    :param point_labels: Whether to label points with their indices
    :param include_bounding: Whether to draw triangles touching the bounding square
    :param voronoi: Whether to overlay the Voronoi cells
    :param fontsize: Font size for labels
    :return: the axes drawn on
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _, ax = plt.subplots()

    mesh = dt.mesh
    all_points = np.array([tuple(p) for p in mesh.points])

    if include_bounding:
        triangles = [record.vertices for record in mesh]
    else:
        triangles = [
            record.vertices
            for record in mesh
            if not mesh.is_bounding_triangle(record.vertices)
        ]

    for tri in triangles:
        pts = all_points[list(tri)]
        tri_closed = np.vstack([pts, pts[0]])  # Close the triangle
        ax.plot(tri_closed[:, 0], tri_closed[:, 1], "b-", linewidth=1.0, alpha=0.6)

    if voronoi:
        for cell in dt.export_voronoi_cells():
            poly = np.array(cell + [cell[0]])
            ax.plot(poly[:, 0], poly[:, 1], "r-", linewidth=0.8, alpha=0.6)

    inserted = all_points[mesh.n_bounding :]
    if len(inserted):
        ax.plot(inserted[:, 0], inserted[:, 1], "ko", markersize=4, zorder=11)

    if point_labels:
        offset = 0.01 * mesh.radius
        for idx, (x, y) in enumerate(inserted):
            ax.text(
                x + offset,
                y + offset,
                str(idx),
                fontsize=fontsize,
                ha="left",
                va="bottom",
                color="darkgreen",
            )

    if not include_bounding:
        # the Voronoi periphery reaches far beyond the points
        cx, cy = mesh.center
        ax.set_xlim(cx - mesh.radius, cx + mesh.radius)
        ax.set_ylim(cy - mesh.radius, cy + mesh.radius)

    ax.set_aspect("equal")
    ax.set_title(title)

    if show:
        plt.show()
    return ax
