from __future__ import annotations

import argparse
import asyncio
import logging

from suidex.api.deps import get_export_snapshot_use_case
from suidex.application.dto.export_snapshot import ExportSnapshotInput


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run one forced pool aggregation and write it as a JSON snapshot.",
    )
    parser.add_argument("--mode", default=None, help="defillama, graphql or sdk (default: configured mode)")
    parser.add_argument("--output", default=None, help="snapshot path (default: SNAPSHOT_PATH)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    use_case = get_export_snapshot_use_case(args.output)
    output = asyncio.run(use_case.execute(ExportSnapshotInput(mode=args.mode)))
    logger.info(
        "export_snapshot: done location=%s mode=%s pools=%s fetch_status=%s",
        output.location,
        output.mode,
        output.total_pools,
        output.fetch_status,
    )
    return 0 if output.total_pools > 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
