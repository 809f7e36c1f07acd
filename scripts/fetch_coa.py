#!/usr/bin/env python3
"""Print a tenant's chart of accounts, optionally filtered, and export it.

Reads connection settings from the environment (``COA_API_URL``,
``COA_TENANT_ID``, ``LOG_LEVEL``, ...).

Usage:
    COA_TENANT_ID=acme python scripts/fetch_coa.py
    COA_TENANT_ID=acme python scripts/fetch_coa.py --search kas
    COA_TENANT_ID=acme python scripts/fetch_coa.py --export exports/
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from coa_engine.config import EngineConfig
from coa_engine.engine import CoaTreeEngine
from coa_engine.exceptions import ConfigurationError
from coa_engine.logging import setup_logging
from coa_engine.tree import iter_tree


async def run(args: argparse.Namespace, config: EngineConfig) -> int:
    async with CoaTreeEngine.from_config(config) as engine:
        if not await engine.refresh():
            return 1

        engine.search = args.search
        empty = engine.empty_state()
        if empty is not None:
            print(f"{empty.title}. {empty.hint}")
        for node, depth in iter_tree(engine.visible_tree):
            marker = "+" if node.is_header else "-"
            print(f"{'  ' * depth}{marker} {node.code:<16} {node.name:<40} {node.balance:>18,}")

        if args.export is not None:
            path = await engine.export_accounts(args.export)
            if path is None:
                return 1
            print(f"Exported to {path}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Show a tenant's chart of accounts")
    parser.add_argument("--search", default="", help="Filter by code or name")
    parser.add_argument("--export", type=Path, default=None, help="Save the spreadsheet export here")
    args = parser.parse_args()

    try:
        config = EngineConfig.from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)
    setup_logging(config.log_level, config.log_format)

    try:
        sys.exit(asyncio.run(run(args, config)))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
