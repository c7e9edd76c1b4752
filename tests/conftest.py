"""
weaver test configuration

Shared fixtures: settings pointing at the packaged templates, a recording
fake supervisor for operation tests, and a real supervisor that runs
Python children.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import List, Optional

import pytest

from weaver.config import PACKAGE_TEMPLATE_DIR, WeaverSettings
from weaver.operations import OperationContext
from weaver.process_supervisor import BinaryResolver, ProcessResult, ProcessSupervisor


class FakeSupervisor:
    """Records every execute() call and replays queued results or errors."""

    def __init__(self):
        self.resolver = BinaryResolver()
        self.calls: List[SimpleNamespace] = []
        self._queue: list = []
        self.stopped: List[ProcessResult] = []

    def queue(self, stdout: str = "", exit_code: int = 0, error: Optional[Exception] = None) -> None:
        self._queue.append(error if error is not None else (stdout, exit_code))

    async def execute(self, binary, args, env=None, ready_pattern=None, cancel=None, echo=None):
        self.calls.append(
            SimpleNamespace(
                binary=binary, args=list(args), env=env, ready_pattern=ready_pattern, cancel=cancel, echo=echo,
            )
        )
        stdout, exit_code = "", 0
        if self._queue:
            item = self._queue.pop(0)
            if isinstance(item, Exception):
                raise item
            stdout, exit_code = item
        return ProcessResult(
            command=[binary, *args],
            exit_code=exit_code,
            stdout=stdout,
            stderr="",
            ready_observed=ready_pattern is not None,
        )

    async def stop(self, result, timeout=None):
        self.stopped.append(result)
        return result.exit_code

    @property
    def commands(self) -> List[List[str]]:
        return [[call.binary, *call.args] for call in self.calls]


@pytest.fixture
def settings() -> WeaverSettings:
    return WeaverSettings(template_dir=PACKAGE_TEMPLATE_DIR, poll_interval=0.01, poll_max_attempts=5)


@pytest.fixture
def fake_supervisor() -> FakeSupervisor:
    return FakeSupervisor()


@pytest.fixture
def ctx(settings, fake_supervisor) -> OperationContext:
    return OperationContext(settings=settings, supervisor=fake_supervisor)


@pytest.fixture
def python_supervisor() -> ProcessSupervisor:
    """Supervisor that runs ``sys.executable`` and keeps output off the console."""
    return ProcessSupervisor(stream_output=False)


@pytest.fixture
def python_exe() -> str:
    return sys.executable


@pytest.fixture
def template_dir() -> Path:
    return PACKAGE_TEMPLATE_DIR
