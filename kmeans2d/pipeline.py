import logging

from sklearn.utils import check_random_state

from kmeans2d.clusterer import run_kmeans
from kmeans2d.metrics import summarize_clusters
from kmeans2d.plotter import cluster_colors, plot_clusters, render_svg
from kmeans2d.synthetic_data import generate_normal, generate_uniform

logger = logging.getLogger(__name__)

K_TOO_LARGE_MESSAGE = "<span style='color:red'><b>K needs to be <= number of points</b></span>"


def format_summary(result):
    return (
        f"<p>Found solution after <b>{result.iterations} iterations "
        f"({result.elapsed_ms:.3f} milliseconds)</b></p>"
    )


def generate_points(config, random_state=None):
    """Normal distribution when all four distribution parameters are set, else uniform."""
    if config.uses_normal:
        return generate_normal(
            config.points,
            config.devx, config.devy,
            config.meanx, config.meany,
            random_state=random_state,
        )
    return generate_uniform(config.points, config.width, config.height, random_state=random_state)


def cluster_request(config, random_state=None):
    """
    Generate points for `config` and cluster them. The config must ask for
    1 <= k <= points.

    Returns (result, random source); the same source is used for the
    point draws, the centroid seeding and any extra colors.
    """
    rs = check_random_state(random_state if random_state is not None else config.seed)
    points = generate_points(config, random_state=rs)
    return run_kmeans(points, config.k, config.limit, random_state=rs), rs


def run_request(config, random_state=None, stats=False, plot_path=None):
    """
    Run one request and return the markup shown to the user.

      - "" when k or points is missing, zero or negative (nothing is computed)
      - an error message when k > points
      - otherwise the iteration/timing summary followed by the SVG

    `plot_path` additionally saves a raster preview of the clustering.
    """
    if config.k <= 0 or config.points <= 0:
        logger.debug("Incomplete request (k=%d, points=%d), nothing to do", config.k, config.points)
        return ""
    if config.k > config.points:
        logger.warning("Rejected request: k=%d exceeds %d points", config.k, config.points)
        return K_TOO_LARGE_MESSAGE

    result, rs = cluster_request(config, random_state)
    if stats:
        logger.info("Cluster summary:\n%s", summarize_clusters(result).to_string())

    colors = cluster_colors(result.k, rs)
    if plot_path:
        plot_clusters(result, config.width, config.height, config.scale, colors=colors, savepath=plot_path)

    svg = render_svg(result, config.width, config.height, config.scale, colors=colors)
    return format_summary(result) + svg
