import logging

import numpy as np
import svgwrite
from matplotlib.figure import Figure
from matplotlib.patches import Circle
from sklearn.utils import check_random_state

from kmeans2d.synthetic_data import HEIGHT, WIDTH

logger = logging.getLogger(__name__)

DEFAULT_PALETTE = [
    "#ef4444", "#faa31b", "#009f75",
    "#fff000", "#82c341", "#88c6ed",
    "#394ba0", "#d54799",
]
SCALE = 10
POINT_RADIUS = 3
CENTROID_RADIUS = 6

# one scaled data unit per pixel in the matplotlib preview
_DPI = 72


def cluster_colors(k, random_state=None):
    """
    One fill color per cluster index.

    The fixed palette covers the first 8 clusters; beyond that distinct
    random #rrggbb colors are drawn from `random_state`.
    """
    colors = DEFAULT_PALETTE[:k]
    if k <= len(DEFAULT_PALETTE):
        return colors

    rs = check_random_state(random_state)
    seen = set(colors)
    while len(colors) < k:
        color = "#%06x" % rs.randint(0xFFFFFF)
        if color not in seen:
            seen.add(color)
            colors.append(color)
    return colors


def cluster_circles(result, scale=SCALE, colors=None, random_state=None):
    """
    Circles for a ClusteringResult as (id, cx, cy, r, fill, stroke) tuples.

    Points come first as radius-3 circles without stroke, then centroids
    as radius-6 circles with a black stroke. Coordinates are scaled and
    truncated to integers; centroids with NaN coordinates are left out.
    """
    if colors is None:
        colors = cluster_colors(result.k, random_state)

    circles = []
    for i, p in enumerate(result.points):
        circles.append((
            f"point-{i}", int(p.x * scale), int(p.y * scale),
            POINT_RADIUS, colors[p.cluster], None,
        ))

    for c in result.centroids:
        if np.isnan(c.x) or np.isnan(c.y):
            logger.debug("Skipping centroid %d with undefined position", c.id)
            continue
        circles.append((
            f"centroid-{c.id}", int(c.x * scale), int(c.y * scale),
            CENTROID_RADIUS, colors[c.id], "black",
        ))
    return circles


def plot_clusters(
        result,
        width: int = WIDTH,
        height: int = HEIGHT,
        scale: int = SCALE,
        colors: list = None,
        random_state=None,
        savepath: str = None,
) -> Figure:
    """
    Raster preview of a ClusteringResult on a (width*scale, height*scale)
    pixel canvas.

    Args:
      result       : ClusteringResult from run_kmeans
      width/height : extent of the point space before scaling
      scale        : factor applied to every coordinate
      colors       : one color per cluster, defaults to cluster_colors()
      random_state : source for the extra colors when k > 8
      savepath     : if given, the figure is saved there

    Returns:
      fig : matplotlib Figure with one Circle patch per entry of
            cluster_circles(), gid set to the circle id.
    """
    w, h = width * scale, height * scale
    fig = Figure(figsize=(w / _DPI, h / _DPI), dpi=_DPI)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, w)
    # image coordinates grow downwards
    ax.set_ylim(h, 0)
    ax.set_axis_off()

    for gid, cx, cy, r, fill, stroke in cluster_circles(result, scale, colors, random_state):
        ax.add_patch(Circle(
            (cx, cy),
            radius=r,
            facecolor=fill,
            edgecolor=stroke or "none",
            linewidth=1,
            gid=gid,
        ))

    if savepath:
        fig.savefig(savepath)
        logger.info("Saved cluster plot to %s", savepath)
    return fig


def render_svg(result, width=WIDTH, height=HEIGHT, scale=SCALE, colors=None, random_state=None) -> str:
    """SVG markup, one <circle> element per entry of cluster_circles()."""
    dwg = svgwrite.Drawing(size=(width * scale, height * scale))
    for gid, cx, cy, r, fill, stroke in cluster_circles(result, scale, colors, random_state):
        extra = {"stroke": stroke} if stroke else {}
        dwg.add(dwg.circle(center=(cx, cy), r=r, fill=fill, id=gid, **extra))
    return dwg.tostring()
