#!/usr/bin/env python
"""Entry point for the Dash upset explorer.

Usage
-----
    python run_app.py --patterns path/to/patterns.csv [--marginals path/to/marginals.csv]

Without ``--marginals`` the per-code counts are derived from the patterns.
"""

from __future__ import annotations

import argparse
import logging

from upset_explorer.io import load_marginals, load_patterns, marginals_from_patterns
from upset_explorer.models import DEFAULT_MIN_SET_SIZE, DEFAULT_MSG_LOC


def main() -> None:
    parser = argparse.ArgumentParser(description="Launch the upset explorer web app")
    parser.add_argument(
        "--patterns", required=True,
        help="Path to a CSV/JSON/JSONL table of patterns (pattern, size, count, pointEst, lower, upper, num_snp)",
    )
    parser.add_argument(
        "--marginals", default=None,
        help="Optional path to a table of per-code counts (code, count)",
    )
    parser.add_argument(
        "--min-set-size", type=float, default=DEFAULT_MIN_SET_SIZE,
        help=f"Starting minimum pattern count (default: {DEFAULT_MIN_SET_SIZE})",
    )
    parser.add_argument(
        "--msg-loc", default=DEFAULT_MSG_LOC,
        help="Id of the store that receives highlight messages",
    )
    parser.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port", type=int, default=8050,
        help="Port to serve on (default: 8050)",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Run Dash in debug mode",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load data
    print(f"Loading patterns from {args.patterns}...")
    patterns = load_patterns(args.patterns)
    print(f"  Loaded {len(patterns):,} patterns")

    if args.marginals:
        print(f"Loading marginal counts from {args.marginals}...")
        marginals = load_marginals(args.marginals)
    else:
        print("Deriving marginal counts from patterns...")
        marginals = marginals_from_patterns(patterns)
    print(f"  {len(marginals):,} codes")

    options = {
        "min_set_size": args.min_set_size,
        "marginalData": marginals,
        "msg_loc": args.msg_loc,
    }

    print(f"Starting Dash app on http://{args.host}:{args.port}/")

    from upset_explorer.app import create_app
    app = create_app(patterns, options)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
