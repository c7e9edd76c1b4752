"""weaver CLI entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from weaver.config import WeaverSettings, load_settings
from weaver.errors import ProcessExitError, WeaverError
from weaver.logging_utils import configure_logging
from weaver.operations import OperationContext
from weaver_cli import ca, chaincode, orderer, peer, tools
from weaver_cli.common import print_status

logger = logging.getLogger("weaver.cli")

# Sub-command groups in the order they appear in --help.
COMMAND_GROUPS: Tuple[Tuple[str, Callable[[argparse._SubParsersAction], None]], ...] = (
    ("ca", ca.register),
    ("orderer", orderer.register),
    ("peer", peer.register),
    ("chaincode", chaincode.register),
    ("tools", tools.register),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weaver", description="Fabric node configuration and orchestration.")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("--env-file", type=Path, help="Load settings from this .env file.")
    parser.add_argument("--bin-dir", type=Path, help="Directory holding the Fabric binaries.")
    subparsers = parser.add_subparsers(dest="command", required=True)
    for _name, register in COMMAND_GROUPS:
        register(subparsers)
    return parser


def _report_error(error: WeaverError) -> None:
    print_status("ERROR", error.message)
    logger.error(f"{error.code}: {error.message}")
    if error.details:
        logger.debug(f"Details: {error.details}")
    if isinstance(error, ProcessExitError):
        if error.stdout:
            logger.error(f"Stdout:\n{error.stdout.rstrip()}")
        if error.stderr:
            logger.error(f"Stderr:\n{error.stderr.rstrip()}")


async def _dispatch(args: argparse.Namespace, settings: WeaverSettings) -> int:
    ctx = OperationContext(settings=settings)
    loop = asyncio.get_running_loop()
    if sys.platform != "win32":
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, ctx.cancel.cancel, f"received {sig.name}")
    return await args.func(args, ctx)


def main(args: argparse.Namespace) -> int:
    try:
        settings = load_settings(args.env_file)
    except WeaverError as e:
        configure_logging(logging.INFO)
        _report_error(e)
        return 1
    if args.bin_dir is not None:
        settings = settings.model_copy(update={"bin_dir": args.bin_dir})
    configure_logging("DEBUG" if args.debug else settings.log_level, settings.log_dir)
    logger.debug(f"Settings: {settings.model_dump()}")

    try:
        return asyncio.run(_dispatch(args, settings))
    except WeaverError as e:
        _report_error(e)
        return 1
    except KeyboardInterrupt:
        print_status("WARN", "Interrupted")
        return 130


def run(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    exit_code = main(args)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    run()
