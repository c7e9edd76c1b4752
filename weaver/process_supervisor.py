"""
Supervision of external Fabric binaries.

Two completion modes:
- one-shot: wait for exit; nonzero exit raises ProcessExitError
- readiness: resolve on the first output line matching a pattern and leave
  the child running; exit before a match raises ProcessExitError

Child output is echoed line by line to the parent's stdout/stderr while it
is accumulated. There is no timeout; a CancellationToken stops a wait and
terminates the child.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Dict, List, Mapping, Optional, Pattern, Sequence, Union

from weaver.cancellation import CancellationToken
from weaver.errors import OperationCancelled, ProcessExitError, ProcessSpawnError

logger = logging.getLogger("weaver.supervisor")

STREAM_LIMIT = 1024 * 1024
STOP_TIMEOUT = 10.0


class BinaryResolver:
    """Maps a binary name to an executable path without touching PATH."""

    def __init__(self, bin_dir: Optional[Union[str, Path]] = None):
        self.bin_dir = Path(bin_dir) if bin_dir else None

    def resolve(self, binary: str) -> str:
        if os.path.isabs(binary):
            return binary
        if self.bin_dir is not None:
            candidate = self.bin_dir / binary
            if candidate.exists():
                return str(candidate)
        found = shutil.which(binary)
        return found or binary

    def is_available(self, binary: str) -> bool:
        resolved = self.resolve(binary)
        return os.path.isfile(resolved) and os.access(resolved, os.X_OK)


@dataclass
class ProcessResult:
    """Outcome of one supervised invocation."""
    command: List[str]
    exit_code: Optional[int]
    stdout: str
    stderr: str
    ready_observed: bool = False
    process: Optional[asyncio.subprocess.Process] = field(default=None, repr=False, compare=False)
    pumps: List[asyncio.Task] = field(default_factory=list, repr=False, compare=False)

    @property
    def running(self) -> bool:
        return self.process is not None and self.process.returncode is None


@dataclass
class _OutputSession:
    pattern: Optional[Pattern[str]]
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)
    ready: asyncio.Event = field(default_factory=asyncio.Event)


class ProcessSupervisor:
    """Runs binaries resolved through a BinaryResolver and supervises their output."""

    def __init__(
        self,
        resolver: Optional[BinaryResolver] = None,
        stream_output: bool = True,
        stdout: Optional[IO[str]] = None,
        stderr: Optional[IO[str]] = None,
    ):
        self.resolver = resolver or BinaryResolver()
        self.stream_output = stream_output
        self._stdout = stdout
        self._stderr = stderr

    def _sink(self, name: str) -> IO[str]:
        if name == "stdout":
            return self._stdout if self._stdout is not None else sys.stdout
        return self._stderr if self._stderr is not None else sys.stderr

    async def execute(
        self,
        binary: str,
        args: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        ready_pattern: Optional[Union[str, Pattern[str]]] = None,
        cancel: Optional[CancellationToken] = None,
        echo: Optional[bool] = None,
    ) -> ProcessResult:
        """
        Run ``binary`` with ``args``.

        Args:
            binary: Binary name, resolved through the resolver.
            args: Arguments after the binary.
            env: Extra environment variables for this child only.
            ready_pattern: Regex that marks a server as ready.
            cancel: Token that terminates the child when cancelled.
            echo: Override ``stream_output`` for this call.

        Raises:
            ProcessSpawnError: the binary could not be launched.
            ProcessExitError: nonzero exit, or exit before readiness.
            OperationCancelled: the token was cancelled first.
        """
        if cancel is not None:
            cancel.raise_if_cancelled()
        executable = self.resolver.resolve(binary)
        command = [executable, *[str(a) for a in args]]
        pattern = re.compile(ready_pattern) if isinstance(ready_pattern, str) else ready_pattern
        echo = self.stream_output if echo is None else echo

        child_env: Optional[Dict[str, str]] = None
        if env:
            child_env = dict(os.environ)
            child_env.update({k: str(v) for k, v in env.items()})
            logger.debug(f"Child environment overrides: {', '.join(env)}")

        logger.info(f"Executing: {' '.join([binary, *command[1:]])}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=child_env,
                limit=STREAM_LIMIT,
            )
        except OSError as e:
            raise ProcessSpawnError(f"Could not launch {binary}: {e}", binary=executable) from e

        session = _OutputSession(pattern)
        pumps = [
            asyncio.create_task(self._pump(proc.stdout, session.stdout, "stdout", echo, session)),
            asyncio.create_task(self._pump(proc.stderr, session.stderr, "stderr", echo, session)),
        ]

        try:
            outcome = await self._wait_first(proc, session, cancel)
        except asyncio.CancelledError:
            logger.warning(f"Task awaiting {binary} was cancelled, stopping pid {proc.pid}")
            await self._terminate(proc, pumps)
            raise

        if outcome == "cancel":
            await self._terminate(proc, pumps)
            raise OperationCancelled(f"Cancelled while running {binary}", {"command": command})

        if outcome == "ready":
            logger.info(f"{binary} reported ready (pid {proc.pid})")
            return ProcessResult(
                command=command,
                exit_code=proc.returncode,
                stdout="".join(session.stdout),
                stderr="".join(session.stderr),
                ready_observed=True,
                process=proc,
                pumps=pumps,
            )

        await asyncio.gather(*pumps)
        result = ProcessResult(
            command=command,
            exit_code=proc.returncode,
            stdout="".join(session.stdout),
            stderr="".join(session.stderr),
            ready_observed=session.ready.is_set(),
            process=proc,
        )

        if pattern is not None and result.ready_observed:
            logger.info(f"{binary} reported ready before exiting with code {proc.returncode}")
            return result
        if pattern is not None:
            raise ProcessExitError(
                f"Process exited with code {proc.returncode} before becoming ready",
                exit_code=proc.returncode, stdout=result.stdout, stderr=result.stderr, command=command,
            )
        if proc.returncode != 0:
            raise ProcessExitError(
                f"Process exited with code {proc.returncode}",
                exit_code=proc.returncode, stdout=result.stdout, stderr=result.stderr, command=command,
            )
        logger.debug(f"{binary} exited cleanly")
        return result

    async def _wait_first(
        self,
        proc: asyncio.subprocess.Process,
        session: _OutputSession,
        cancel: Optional[CancellationToken],
    ) -> str:
        exit_task = asyncio.create_task(proc.wait())
        waiters = {exit_task}
        ready_task = None
        cancel_task = None
        if session.pattern is not None:
            ready_task = asyncio.create_task(session.ready.wait())
            waiters.add(ready_task)
        if cancel is not None:
            cancel_task = asyncio.create_task(cancel.wait())
            waiters.add(cancel_task)

        try:
            done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in waiters:
                if not task.done():
                    task.cancel()

        if ready_task is not None and ready_task in done:
            return "ready"
        if exit_task in done:
            return "exit"
        return "cancel"

    async def _pump(
        self,
        stream: asyncio.StreamReader,
        sink: List[str],
        name: str,
        echo: bool,
        session: _OutputSession,
    ) -> None:
        while True:
            line = await self._read_chunk(stream)
            if not line:
                break
            text = line.decode("utf-8", errors="replace")
            sink.append(text)
            if echo:
                out = self._sink(name)
                out.write(text)
                out.flush()
            if (
                session.pattern is not None
                and not session.ready.is_set()
                and session.pattern.search(text)
            ):
                session.ready.set()

    @staticmethod
    async def _read_chunk(stream: asyncio.StreamReader) -> bytes:
        """Next line, or the next STREAM_LIMIT bytes of a line longer than that."""
        try:
            return await stream.readuntil(b"\n")
        except asyncio.IncompleteReadError as e:
            return e.partial
        except asyncio.LimitOverrunError:
            return await stream.read(STREAM_LIMIT)

    async def _terminate(self, proc: asyncio.subprocess.Process, pumps: List[asyncio.Task], timeout: float = STOP_TIMEOUT) -> None:
        if proc.returncode is None:
            proc.terminate()
            try:
                await asyncio.wait_for(proc.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning(f"pid {proc.pid} ignored SIGTERM, killing")
                proc.kill()
                await proc.wait()
        await asyncio.gather(*pumps, return_exceptions=True)

    async def stop(self, result: ProcessResult, timeout: float = STOP_TIMEOUT) -> Optional[int]:
        """Terminate a server left running by readiness mode and return its exit code."""
        if result.process is None:
            return result.exit_code
        await self._terminate(result.process, result.pumps, timeout)
        result.exit_code = result.process.returncode
        logger.info(f"Stopped pid {result.process.pid} (exit {result.exit_code})")
        return result.exit_code
