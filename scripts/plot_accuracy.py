#!/usr/bin/env python3
"""
Plot the relative error of the stream count estimator against the true number
of distinct elements.

For each distinct count, runs repeated trials with a fixed (epsilon, delta,
stream_length) capacity and draws the mean and maximum relative error, the
epsilon bound, and the fraction of trials that stayed within it.
"""

import argparse
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from cvmcount.lib.simulation import accuracy_sweep


def parse_args():
    parser = argparse.ArgumentParser(description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--epsilon", type=float, default=0.5, help="Relative error bound")
    parser.add_argument("--delta", type=float, default=0.1, help="Failure probability")
    parser.add_argument("--max-distinct", type=int, default=20000, dest='max_distinct',
                        help="Largest true distinct count")
    parser.add_argument("--points", type=int, default=10, help="Number of distinct counts")
    parser.add_argument("--trials", type=int, default=50, help="Trials per distinct count")
    parser.add_argument("--repeats", type=int, default=1,
                        help="Occurrences of each distinct value in the stream")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--output", "-o", default="accuracy.png", help="Output image")
    return parser.parse_args()


def plot_sweep(reports, epsilon, delta, output):
    """Draw error and coverage curves for a list of AccuracyReports."""
    counts = [r.true_distinct for r in reports]
    mean_err = [float(np.mean(r.relative_errors)) for r in reports]
    max_err = [float(np.max(r.relative_errors)) for r in reports]
    coverage = [r.fraction_within for r in reports]

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5))

    ax1.plot(counts, mean_err, 'o-', label='Mean relative error')
    ax1.plot(counts, max_err, 's--', label='Max relative error')
    ax1.axhline(epsilon, color='red', linestyle=':', label=f'epsilon = {epsilon}')
    ax1.set_xlabel('True distinct count')
    ax1.set_ylabel('Relative error')
    ax1.set_title(f'Capacity {reports[0].capacity}')
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    ax2.plot(counts, coverage, 'o-', label='Fraction within epsilon')
    ax2.fill_between(counts,
                     [r.confidence_interval[0] for r in reports],
                     [r.confidence_interval[1] for r in reports],
                     alpha=0.2, label='95% CI')
    ax2.axhline(1 - delta, color='red', linestyle=':', label=f'1 - delta = {1 - delta}')
    ax2.set_xlabel('True distinct count')
    ax2.set_ylabel('Fraction of trials')
    ax2.set_ylim(0, 1.05)
    ax2.legend()
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output)
    plt.close(fig)


def main():
    args = parse_args()
    counts = np.linspace(args.max_distinct / args.points, args.max_distinct,
                         args.points).astype(int).tolist()
    stream_length = args.max_distinct * args.repeats

    reports = accuracy_sweep(counts, args.epsilon, args.delta, trials=args.trials,
                             stream_length=stream_length, seed=args.seed,
                             repeats=args.repeats)
    for report in reports:
        summary = report.summary()
        print(f"n={summary['true_distinct']}: mean error {summary['mean_relative_error']:.4f}, "
              f"within epsilon {summary['fraction_within_epsilon']:.2%}")

    plot_sweep(reports, args.epsilon, args.delta, args.output)
    print(f"Plot saved to {args.output}")


if __name__ == "__main__":
    main()
