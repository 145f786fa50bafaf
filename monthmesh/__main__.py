#!/usr/bin/env python3
"""
MonthMesh HTTP service.

Usage:
    python -m monthmesh

    # Or with overrides
    MONTHMESH_PARTITION_DIR=/var/lib/monthmesh python -m monthmesh --port 9000
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import uvicorn

from monthmesh.api.app import create_app
from monthmesh.core.config import MonthMeshConfig
from monthmesh.observability.logging import LogLevel, setup_logging


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="monthmesh",
        description="Serve users stored in monthly DuckDB partitions.",
    )
    parser.add_argument("--host", help="bind address (default 127.0.0.1)")
    parser.add_argument("--port", type=int, help="bind port (default 8080)")
    parser.add_argument(
        "--partition-dir",
        type=Path,
        help="directory holding YYYYMM.db partition files (default ./repositories)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    config_result = MonthMeshConfig.from_env()
    if config_result.is_err():
        print(config_result.error, file=sys.stderr)
        return 1

    config = config_result.unwrap().with_overrides(
        host=args.host,
        port=args.port,
        partition_dir=args.partition_dir,
    )
    validation = config.validate()
    if validation.is_err():
        print(validation.error, file=sys.stderr)
        return 1

    setup_logging(
        LogLevel.parse(config.observability.log_level),
        json_output=config.observability.log_json,
    )

    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
