# run.py

import argparse
import logging
import os
import sys

from kmeans2d.config import DEFAULT_K, DEFAULT_POINTS, RunConfig
from kmeans2d.pipeline import run_request


def configure_logging():
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    # stdout carries the markup only
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="kmeans2d",
        description="2D K-means clustering of random points, printed as HTML + SVG",
    )
    parser.add_argument("--points", type=int, default=DEFAULT_POINTS, help="How many random points?")
    parser.add_argument("--k", type=int, default=DEFAULT_K, help="Which value for K?")
    parser.add_argument("--lim", type=int, default=0, help="Limit the number of iterations")
    parser.add_argument("--http", action="store_true", help="Run as HTTP service?")
    parser.add_argument("--devx", type=float, default=0.0, help="X deviation for the normal distribution")
    parser.add_argument("--devy", type=float, default=0.0, help="Y deviation for the normal distribution")
    parser.add_argument("--meanx", type=float, default=0.0, help="X mean for the normal distribution")
    parser.add_argument("--meany", type=float, default=0.0, help="Y mean for the normal distribution")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random source")
    parser.add_argument("--host", default="0.0.0.0", help="HTTP bind address")
    parser.add_argument("--port", type=int, default=8080, help="HTTP port")
    parser.add_argument("--stats", action="store_true", help="Log a per-cluster summary table")
    parser.add_argument("--plot", default=None, metavar="PATH", help="Also save a raster preview of the clustering")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging()

    seed = args.seed
    if seed is None and os.getenv("KMEANS2D_SEED"):
        seed = int(os.environ["KMEANS2D_SEED"])

    if args.http:
        # All run parameters come from the form in this mode.
        from kmeans2d.server import serve
        serve(host=args.host, port=args.port, seed=seed)
        return 0

    if args.lim < 0:
        build_parser().error("--lim must be >= 0")

    config = RunConfig(
        k=args.k,
        points=args.points,
        limit=args.lim,
        devx=args.devx,
        devy=args.devy,
        meanx=args.meanx,
        meany=args.meany,
        seed=seed,
    )
    out = run_request(config, stats=args.stats, plot_path=args.plot)
    if out:
        print(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
