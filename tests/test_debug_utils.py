"""Smoke tests for plotting (delaunay2d/debug_utils.py)."""

import numpy as np
import pytest

from delaunay2d.delaunay import triangulate

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")


@pytest.fixture
def dt():
    rng = np.random.default_rng(0)
    return triangulate(rng.uniform(0, 1, size=(15, 2)))


def test_plot_returns_axes(dt):
    import matplotlib.pyplot as plt

    ax = dt.plot(voronoi=True, point_labels=True, title="Random points")
    assert ax.get_title() == "Random points"
    # one line per exported triangle plus the markers
    assert len(ax.lines) >= len(dt.export_triangles()) + 1
    plt.close("all")


def test_plot_on_given_axes(dt):
    import matplotlib.pyplot as plt

    _, ax = plt.subplots()
    assert dt.plot(ax=ax, include_bounding=True) is ax
    assert len(ax.lines) == dt.triangle_count + 1
    plt.close("all")
