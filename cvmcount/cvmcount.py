#!/usr/bin/env python
from __future__ import annotations
import sys
import os
import gzip
import argparse
from typing import Dict, Iterator, List, Any, Optional, TextIO
import numpy as np # type: ignore
from cvmcount.lib.elementset import HashElementSet, ListElementSet, FingerprintElementSet
from cvmcount.lib.errors import CountError, WrongInitialization
from cvmcount.lib.estimator import StreamCountEstimator

CONTAINERS = {
    'hash': HashElementSet,
    'list': ListElementSet,
    'fingerprint': FingerprintElementSet,
}

# Used for the capacity formula when --stream-length is not given
DEFAULT_STREAM_LENGTH = 1_000_000

COLUMNS = ['file', 'estimate', 'sampling_round', 'retained', 'capacity']


def read_lines(filename: str) -> Iterator[str]:
    """Yield the non-empty lines of a file, without trailing newlines.

    '-' reads from stdin; names ending in .gz are decompressed on the fly.
    """
    if filename == '-':
        for line in sys.stdin:
            line = line.rstrip('\r\n')
            if line:
                yield line
        return

    opener = gzip.open if filename.endswith(".gz") else open
    with opener(filename, "rt") as f:
        for line in f:
            line = line.rstrip('\r\n')
            if line:
                yield line


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    arg_parser = argparse.ArgumentParser(
        description="""Estimate the number of distinct lines in each input file in a single pass.

        Every non-empty line is one stream element. The estimate is within a relative
        error of EPSILON of the true count with probability at least 1 - DELTA, provided
        the file has at most STREAM_LENGTH lines.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    arg_parser.add_argument('files', nargs='+',
                            help="Input files ('-' for stdin, .gz files are decompressed)")
    arg_parser.add_argument("--epsilon", "-e", type=float, default=0.1,
                            help="Relative error bound (0 to 1)")
    arg_parser.add_argument("--delta", "-d", type=float, default=0.05,
                            help="Failure probability (0 to 1)")
    arg_parser.add_argument("--stream-length", "-n", type=int, default=DEFAULT_STREAM_LENGTH,
                            dest='stream_length',
                            help="Upper bound on the number of lines per file")
    arg_parser.add_argument("--capacity", "-c", type=int, default=None,
                            help="Explicit retained-set size (overrides epsilon, delta and stream length)")
    arg_parser.add_argument("--container", choices=sorted(CONTAINERS), default='hash',
                            help="Container for retained elements")
    arg_parser.add_argument("--seed", type=int, default=None,
                            help="Random seed for reproducible estimates")
    arg_parser.add_argument('--output', '-o', type=str, default=None,
                            help='Output file (default: stdout)')
    arg_parser.add_argument("--verbose", action="store_true", help="Print verbose output")
    arg_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    return arg_parser.parse_args(argv)


def build_estimator(args, rng: np.random.Generator) -> StreamCountEstimator:
    """Create an estimator from parsed command line arguments."""
    element_set = CONTAINERS[args.container]
    if args.capacity is not None:
        return StreamCountEstimator(args.capacity, element_set=element_set,
                                    rng=rng, debug=args.debug)
    return StreamCountEstimator.from_accuracy(args.epsilon, args.delta, args.stream_length,
                                              element_set=element_set,
                                              rng=rng, debug=args.debug)


def estimate_file(filename: str, args, rng: np.random.Generator) -> Dict[str, Any]:
    """Run one estimator over the lines of a file."""
    estimator = build_estimator(args, rng)
    estimate = estimator.add_batch(read_lines(filename))
    if args.verbose:
        print(f"{filename}: estimate={estimate} after {estimator.rounds} rebalances "
              f"({estimator.retries} rejected)", file=sys.stderr)
    return {
        'file': filename,
        'estimate': estimate,
        'sampling_round': estimator.sampling_round,
        'retained': len(estimator.elements),
        'capacity': estimator.capacity,
    }


def write_results(results: List[Dict[str, Any]], out: TextIO) -> None:
    """Write estimation results as a tab-separated table.

    Args:
        results: One dictionary per input file
        out: Open text stream to write to
    """
    out.write('\t'.join(COLUMNS) + '\n')
    for result in results:
        out.write('\t'.join(str(result[col]) for col in COLUMNS) + '\n')


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for cvmcount."""
    args = parse_args(argv)

    for filename in args.files:
        if filename != '-' and not os.path.exists(filename):
            print(f"Error: File {filename} does not exist", file=sys.stderr)
            sys.exit(2)

    if args.capacity is not None and args.capacity < 0:
        print("Error: --capacity must be non-negative", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        if args.capacity is not None:
            print(f"Using explicit capacity {args.capacity} with {args.container} container", file=sys.stderr)
        else:
            print(f"Using epsilon={args.epsilon}, delta={args.delta}, "
                  f"stream_length={args.stream_length} with {args.container} container", file=sys.stderr)

    # One generator for the whole run keeps seeded runs reproducible
    rng = np.random.default_rng(args.seed)

    results = []
    for filename in args.files:
        try:
            results.append(estimate_file(filename, args, rng))
        except WrongInitialization as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except CountError as e:
            print(f"Error processing {filename}: {e}", file=sys.stderr)
            sys.exit(1)

    if args.output:
        with open(args.output, 'w') as f:
            write_results(results, f)
        if args.verbose:
            print(f"Results written to {args.output}", file=sys.stderr)
    else:
        write_results(results, sys.stdout)
    return 0


if __name__ == "__main__":
    main()
