"""Helpers shared by the weaver sub-command modules."""

from __future__ import annotations

import argparse
from typing import List, Optional

from weaver.operations import OperationContext, serve
from weaver.process_supervisor import ProcessResult


def _tag(level: str) -> str:
    return f"[{level}]"


def print_status(level: str, message: str) -> None:
    print(f"{_tag(level)} {message}")


def csv_list(value: str) -> List[str]:
    """argparse type for comma separated values."""
    return [item.strip() for item in value.split(",") if item.strip()]


def add_flag(parser: argparse.ArgumentParser, *names: str, help: Optional[str] = None) -> None:
    """Boolean flag that stays ``None`` when absent so templates keep their value."""
    parser.add_argument(*names, action="store_true", default=None, help=help)


async def serve_until_exit(ctx: OperationContext, result: ProcessResult, name: str) -> int:
    print_status("OK", f"{name} is ready (pid {result.process.pid if result.process else '?'})")
    code = await serve(ctx, result)
    if ctx.cancel.cancelled:
        print_status("OK", f"{name} stopped")
        return 0
    if code:
        print_status("ERROR", f"{name} exited with code {code}")
        return 1
    return 0
