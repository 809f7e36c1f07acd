#!/usr/bin/env python3
"""Generate a sample chart-of-accounts tree as JSON.

The output has the same shape as ``GET /coa`` and can be served by a stub
API or loaded with ``coa_engine.serialization.tree_from_payload``.

Usage:
    python scripts/generate_sample_coa.py
    python scripts/generate_sample_coa.py --accounts 200 --output local/coa.json
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from coa_engine.generators import AccountTreeGenerator
from coa_engine.serialization import node_to_dict
from coa_engine.tree import check_tree, count_nodes


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample COA tree")
    parser.add_argument("--accounts", type=int, default=60, help="Number of accounts (default: 60)")
    parser.add_argument("--depth", type=int, default=4, help="Max levels (default: 4)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--output", type=Path, default=Path("local/coa.json"), help="Output file")
    args = parser.parse_args()

    tree = AccountTreeGenerator(seed=args.seed).generate(args.accounts, args.depth)
    check_tree(tree)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump([node_to_dict(node) for node in tree], f, indent=2, ensure_ascii=False)
    print(f"Saved {count_nodes(tree)} accounts to {args.output}")


if __name__ == "__main__":
    main()
