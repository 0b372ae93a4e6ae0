"""Command line interface for cleaning and probing service databases."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .config import load_config
from .errors import ServiceDatabaseError
from .provisioner import Provisioner

LOG = logging.getLogger(__name__)

EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="servicedb", description="Provision per-service databases.")
    parser.add_argument("--package", help="Resource package holding services.xml and DDL scripts.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every executed statement.")
    commands = parser.add_subparsers(dest="command", required=True)

    clean = commands.add_parser("clean", help="Drop and recreate one service database, or all of them.")
    clean.add_argument("service", nargs="?", help="Service name; omit to clean every configured service.")

    exists = commands.add_parser("exists", help="Check that a row exists in a service database.")
    exists.add_argument("service")
    exists.add_argument("table")
    exists.add_argument("column")
    exists.add_argument("value", help="Value to match; numeric values are bound as integers unless --text is given.")
    exists.add_argument("--text", action="store_true", help="Bind VALUE as text, for text columns.")

    commands.add_parser("validate", help="Validate services.xml and list the configured services.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()
    if args.package:
        config = config.with_resource_package(args.package)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    provisioner = Provisioner(config=config)
    try:
        if args.command == "clean":
            if args.service:
                provisioner.clean(args.service)
            else:
                provisioner.clean_all()
            return 0
        if args.command == "exists":
            value = args.value if args.text else _coerce_value(args.value)
            found = provisioner.exists(args.service, args.table, args.column, value)
            print("true" if found else "false")
            return 0 if found else 1
        for name in provisioner.registry.names():
            print(name)
        return 0
    except ServiceDatabaseError as exc:
        LOG.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


def _coerce_value(raw: str) -> object:
    try:
        return int(raw)
    except ValueError:
        return raw


__all__ = ["build_parser", "main"]
