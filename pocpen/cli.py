"""Command-line arguments."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

_VERSION = "0.4.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pocpen",
        description="A terminal-based creature virtual pet",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Path to config file")
    parser.add_argument(
        "-n",
        "--creature",
        default=None,
        help="Quick override: show only this creature (by name)",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments into ``config`` and ``creature``."""
    return _build_parser().parse_args(argv)