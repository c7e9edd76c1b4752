"""Shared runtime for operations: settings, supervisor and cancellation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from weaver.cancellation import CancellationToken
from weaver.config import WeaverSettings
from weaver.config_tree import ConfigTree, load_template
from weaver.process_supervisor import BinaryResolver, ProcessResult, ProcessSupervisor

logger = logging.getLogger("weaver.operations")


@dataclass
class OperationContext:
    """
    Everything an operation needs besides its own options.

    The supervisor defaults to one resolving binaries from
    ``settings.bin_dir``.
    """
    settings: WeaverSettings = field(default_factory=WeaverSettings)
    supervisor: Optional[ProcessSupervisor] = None
    cancel: CancellationToken = field(default_factory=CancellationToken)

    def __post_init__(self):
        if self.supervisor is None:
            self.supervisor = ProcessSupervisor(BinaryResolver(self.settings.bin_dir))

    def template(self, name_or_path: Union[str, Path]) -> ConfigTree:
        return load_template(name_or_path, self.settings.template_dir)


async def serve(ctx: OperationContext, result: ProcessResult) -> Optional[int]:
    """
    Keep a server started in readiness mode in the foreground.

    Returns the child's exit code once it exits on its own, or after it has
    been stopped because the context was cancelled.
    """
    if result.process is None or not result.running:
        return result.exit_code
    exit_task = asyncio.create_task(result.process.wait())
    cancel_task = asyncio.create_task(ctx.cancel.wait())
    done, pending = await asyncio.wait({exit_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
    for task in pending:
        task.cancel()

    if exit_task not in done:
        logger.info(f"Stopping pid {result.process.pid}: {ctx.cancel.reason}")
        return await ctx.supervisor.stop(result)

    await asyncio.gather(*result.pumps, return_exceptions=True)
    result.exit_code = result.process.returncode
    logger.info(f"pid {result.process.pid} exited with code {result.exit_code}")
    return result.exit_code
