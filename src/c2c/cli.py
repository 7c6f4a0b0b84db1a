# Authors: Isak Samsten
# License: BSD 3 clause
"""
Command line interface.

Usage:
    c2c INPUT [-o OUTPUT] [options]
    python -m c2c INPUT [-o OUTPUT] [options]

The input is a comma separated table with the dates in the header and one
time series per row, prefixed by its identifier. The output contains one
row per change.
"""

import argparse
import logging
import sys

from . import __version__
from .datasets import load_csv, save_csv
from .solver import C2cSolver

logger = logging.getLogger(__name__)


def _make_parser():
    parser = argparse.ArgumentParser(
        prog="c2c",
        description="Detect changes in annual time series using bottom-up "
        "segmentation.",
    )
    parser.add_argument("input", help="CSV file with one time series per row")
    parser.add_argument(
        "-o", "--output", help="CSV file for the changes (default: stdout)"
    )
    parser.add_argument(
        "--max-error",
        type=float,
        default=75,
        help="Maximum error (RMSE) allowed to remove points and construct segments.",
    )
    parser.add_argument(
        "--max-segments",
        type=int,
        default=6,
        help="Maximum number of segments to be fitted on the time series.",
    )
    parser.add_argument(
        "--start-year",
        type=int,
        default=1984,
        help="Year of the first image in the output image collection.",
    )
    parser.add_argument(
        "--end-year",
        type=int,
        default=2019,
        help="Year of the last image in the output image collection.",
    )
    parser.add_argument(
        "--no-infill",
        dest="infill",
        action="store_false",
        help="Do not apply the pre-infill process.",
    )
    parser.add_argument(
        "--spikes-tolerance",
        type=float,
        default=0.85,
        help="Tolerance of spikes in the time series. "
        "A value of 1 indicates no spike removal.",
    )
    parser.add_argument(
        "--revert-band",
        action="store_true",
        help="Invert the sign of the band.",
    )
    parser.add_argument(
        "--negative-magnitude-only",
        action="store_true",
        help="Filter out changes having a non-negative magnitude.",
    )
    parser.add_argument(
        "--no-post-metrics",
        dest="post_metrics",
        action="store_false",
        help="Exclude the post metrics (postMagnitude, postDuration, postRate).",
    )
    parser.add_argument(
        "--regrowth-metrics",
        action="store_true",
        help="Include the regrowth metrics "
        "(indexRegrowth, recoveryIndicator, y2r60, y2r80, y2r100).",
    )
    parser.add_argument(
        "--interpolate",
        action="store_true",
        help="Interpolate the time series before computing metrics.",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=None,
        help="Number of parallel jobs.",
    )
    parser.add_argument(
        "--logs",
        action="store_true",
        help="Log additional information while processing.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def main(argv=None):
    parser = _make_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.logs else logging.WARNING,
        format="# %(message)s",
        stream=sys.stderr,
    )

    solver = C2cSolver(
        max_error=args.max_error,
        max_segments=args.max_segments,
        start_year=args.start_year,
        end_year=args.end_year,
        infill=args.infill,
        spikes_tolerance=args.spikes_tolerance,
        revert_band=args.revert_band,
        negative_magnitude_only=args.negative_magnitude_only,
        post_metrics=args.post_metrics,
        regrowth_metrics=args.regrowth_metrics,
        interpolate=args.interpolate,
        n_jobs=args.n_jobs,
    )
    try:
        ids, dates, X = load_csv(args.input)
        headers, rows = solver.solve_table(dates, X, ids=ids)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    logger.debug("Found %d changes in %d time series", rows.shape[0], X.shape[0])
    save_csv(args.output if args.output is not None else sys.stdout, headers, rows)
    return 0
