"""
Command-line entry point: run CASH subspace clustering on a numeric data file.

The file is read with numpy (one point per row). Parameters not given on the
command line come from CASH_* variables in .env / the environment.

Usage:
    correlation-mining data.csv --delimiter , --min-pts 20 --max-level 6 --jitter 0.2
    correlation-mining data.txt --label-column -1 --output result.json
"""

import argparse
import json
import sys
from pathlib import Path

import numpy as np

from .algorithms import adjusted_rand_index, cluster_map_labels, run_cash
from .config import config
from .utils import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run CASH subspace clustering")
    parser.add_argument("data", type=Path, help="Numeric data file, one point per row")
    parser.add_argument("--delimiter", default=None, help="Column delimiter (default: whitespace)")
    parser.add_argument("--skip-rows", type=int, default=0, help="Header rows to skip")
    parser.add_argument(
        "--label-column",
        type=int,
        default=None,
        help="Column holding reference labels; excluded from clustering and used for ARI",
    )
    parser.add_argument("--min-pts", type=int, default=None, help="Minimum points per cluster")
    parser.add_argument("--max-level", type=int, default=None, help="Maximum split level")
    parser.add_argument("--min-dim", type=int, default=None, help="Minimum subspace dimensionality")
    parser.add_argument("--jitter", type=float, default=None, help="Distance bucket width")
    parser.add_argument(
        "--adjust",
        action="store_true",
        default=None,
        help="Refine subspaces with the dependency derivator",
    )
    parser.add_argument("--max-heap-size", type=int, default=None, help="Heap size safety cutoff")
    parser.add_argument("--output", type=Path, default=None, help="Write the cluster map as JSON")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level or config.log_level, config.log_file)

    try:
        cfg = config.cash_defaults(
            min_pts=args.min_pts,
            max_level=args.max_level,
            min_dim=args.min_dim,
            jitter=args.jitter,
            adjust=args.adjust,
            max_heap_size=args.max_heap_size,
        )
    except ValueError as e:
        print(f"ERROR: invalid configuration: {e}")
        sys.exit(2)

    raw = np.loadtxt(args.data, delimiter=args.delimiter, skiprows=args.skip_rows, ndmin=2)
    labels = None
    if args.label_column is not None:
        labels = raw[:, args.label_column]
        raw = np.delete(raw, args.label_column, axis=1)

    logger.info("Loaded %d points with %d dimensions from %s", raw.shape[0], raw.shape[1], args.data)
    try:
        result = run_cash(raw, cfg)
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(2)
    cluster_map = result.cluster_map

    print(f"Points: {result.n_points}  dimensionality: {result.noise_dim}")
    for subspace_dim, sizes in cluster_map.summary().items():
        print(f"  subspace dim {subspace_dim}: {len(sizes)} cluster(s) {sizes}")
    print(f"  noise: {len(cluster_map.noise)}")
    if result.metadata["heap_aborts"]:
        print(f"  heap aborts: {result.metadata['heap_aborts']}")

    if labels is not None:
        predicted = cluster_map_labels(cluster_map, range(result.n_points))
        print(f"ARI vs. reference labels: {adjusted_rand_index(labels, predicted):.4f}")

    if args.output is not None:
        payload = {"metadata": result.metadata, **cluster_map.as_dict()}
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote {args.output}")


if __name__ == "__main__":
    main()
