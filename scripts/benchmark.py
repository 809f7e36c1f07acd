#!/usr/bin/env python3
"""Benchmark tree filtering and flattening.

Measures:
- Tree generation rate
- flatten_tree / filter_tree time on wide trees
- Both on a single deep chain (no recursion limit)

Usage:
    python scripts/benchmark.py
    python scripts/benchmark.py --scale 50000 --depth 6
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from coa_engine.generators import AccountTreeGenerator
from coa_engine.tree import count_nodes, filter_tree, flatten_tree, max_depth

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

QUERIES = ["kas", "beban", "1-01", "zzz-no-match"]


def timed(label: str, func, *args, repeat: int = 5):
    """Run ``func`` ``repeat`` times and print the best wall time."""
    best = float("inf")
    result = None
    for _ in range(repeat):
        t0 = time.perf_counter()
        result = func(*args)
        best = min(best, time.perf_counter() - t0)
    print(f"  {label:<28} {best * 1000:>9.2f} ms")
    return result


def benchmark_wide(scale: int, depth: int, seed: int) -> None:
    gen = AccountTreeGenerator(seed=seed)

    t0 = time.perf_counter()
    tree = gen.generate(num_accounts=scale, max_depth=depth)
    elapsed = time.perf_counter() - t0
    print(f"  Generated {count_nodes(tree):,} accounts, {max_depth(tree)} levels "
          f"in {elapsed:.2f}s ({scale / elapsed:,.0f}/sec)")

    flat = timed("flatten_tree", flatten_tree, tree)
    assert len(flat) == scale
    timed("flatten_tree(strip)", flatten_tree, tree, True)

    for query in QUERIES:
        result = timed(f"filter_tree({query!r})", filter_tree, tree, query)
        logger.debug("%s kept %d accounts", query, count_nodes(result))


def benchmark_deep(depth: int, seed: int) -> None:
    gen = AccountTreeGenerator(seed=seed)
    tree = gen.deep_chain(depth)
    print(f"  Chain of {count_nodes(tree):,} accounts")

    timed("flatten_tree", flatten_tree, tree)
    leaf_code = flatten_tree(tree)[-1].code
    result = timed("filter_tree(leaf code)", filter_tree, tree, leaf_code)
    assert count_nodes(result) == depth


def main() -> None:
    """Run benchmarks."""
    parser = argparse.ArgumentParser(description="Benchmark coa-engine tree operations")
    parser.add_argument("--scale", type=int, default=10000, help="Accounts in the wide tree (default: 10000)")
    parser.add_argument("--depth", type=int, default=5, help="Max levels in the wide tree (default: 5)")
    parser.add_argument("--chain", type=int, default=5000, help="Length of the deep chain (default: 5000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    print("=" * 60)
    print(f"  coa-engine Benchmark  |  scale={args.scale:,}  seed={args.seed}")
    print("=" * 60)

    print("\n[1] Wide tree")
    benchmark_wide(args.scale, args.depth, args.seed)

    print("\n[2] Deep chain")
    benchmark_deep(args.chain, args.seed)

    print("\n" + "=" * 60)
    print("  Benchmark complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
