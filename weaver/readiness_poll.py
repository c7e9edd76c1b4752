"""
Quorum-gated polling before a chaincode commit.

The poll runs a status check, commits once a strict majority of
organisations approve, and otherwise waits ``interval`` seconds and checks
again. Attempts and total duration are bounded; a CancellationToken stops
the wait at any point.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, Generic, Optional, Tuple, Type, TypeVar

from weaver.cancellation import CancellationToken
from weaver.errors import (
    OperationCancelled,
    ProcessExitError,
    QuorumNotReached,
    StatusParseError,
)

logger = logging.getLogger("weaver.poll")

T = TypeVar("T")

DEFAULT_INTERVAL = 30.0


class PollState(Enum):
    POLLING = "polling"
    DONE = "done"


def has_quorum(approved: int, total: int) -> bool:
    """Strict majority: 2 of 4 is not enough, 2 of 3 is."""
    return approved > total / 2


@dataclass
class ApprovalStatus:
    """Organisation id -> approved."""
    approvals: Dict[str, bool] = field(default_factory=dict)

    @property
    def approved(self) -> int:
        return sum(1 for value in self.approvals.values() if value is True)

    @property
    def total(self) -> int:
        return len(self.approvals)

    @property
    def has_quorum(self) -> bool:
        return has_quorum(self.approved, self.total)

    def pending(self) -> list:
        return [org for org, value in self.approvals.items() if value is not True]

    def __str__(self) -> str:
        return f"{self.approved}/{self.total} approvals"


def parse_approval_status(payload: str) -> ApprovalStatus:
    """Parse ``{"approvals": {"Org1MSP": true, ...}}``."""
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise StatusParseError(f"Status payload is not valid JSON: {e}", payload=payload or "") from e
    approvals = data.get("approvals") if isinstance(data, dict) else None
    if not isinstance(approvals, dict):
        raise StatusParseError("Status payload has no 'approvals' object", payload=payload)
    for org, value in approvals.items():
        if not isinstance(value, bool):
            raise StatusParseError(f"Approval for {org} is not a boolean", payload=payload)
    return ApprovalStatus(dict(approvals))


class ReadinessPoll(Generic[T]):
    """
    ``POLLING -> DONE`` loop around a status check and a commit action.

    Args:
        status_check: Coroutine function returning the current ApprovalStatus.
        commit: Coroutine function run once quorum is reached; its result is
            returned from ``run()``.
        interval: Seconds between checks.
        max_attempts: Maximum number of status checks, None for no limit.
        max_duration: Maximum seconds spent polling, None for no limit.
        cancel: Token that stops the poll.
        retryable: Exceptions from the status check that count as
            "not yet approved" instead of aborting.
    """

    def __init__(
        self,
        status_check: Callable[[], Awaitable[ApprovalStatus]],
        commit: Callable[[], Awaitable[T]],
        interval: float = DEFAULT_INTERVAL,
        max_attempts: Optional[int] = None,
        max_duration: Optional[float] = None,
        cancel: Optional[CancellationToken] = None,
        retryable: Tuple[Type[Exception], ...] = (ProcessExitError,),
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.status_check = status_check
        self.commit = commit
        self.interval = interval
        self.max_attempts = max_attempts
        self.max_duration = max_duration
        self.token = cancel or CancellationToken()
        self.retryable = retryable
        self.state = PollState.POLLING
        self.attempts = 0
        self.last_status: Optional[ApprovalStatus] = None
        self.last_error: Optional[Exception] = None

    def cancel(self, reason: str = "poll stopped") -> None:
        self.token.cancel(reason)

    def _give_up(self, why: str) -> QuorumNotReached:
        approvals = self.last_status.approvals if self.last_status else {}
        message = f"Quorum not reached after {self.attempts} check(s): {why}"
        if self.last_status is not None:
            message += f" (last status {self.last_status})"
        return QuorumNotReached(message, attempts=self.attempts, approvals=approvals)

    async def _check_once(self) -> Optional[ApprovalStatus]:
        try:
            status = await self.status_check()
        except self.retryable as e:
            self.last_error = e
            logger.warning(f"Status check {self.attempts} failed, will retry: {e.__class__.__name__}")
            return None
        self.last_status = status
        logger.info(f"Commit readiness check {self.attempts}: {status} {json.dumps(status.approvals)}")
        return status

    async def run(self) -> T:
        loop = asyncio.get_running_loop()
        started = loop.time()
        while True:
            self.token.raise_if_cancelled()
            self.attempts += 1
            status = await self._check_once()
            if status is not None and status.has_quorum:
                self.state = PollState.DONE
                logger.info(f"Quorum reached ({status}), committing")
                return await self.commit()

            if self.max_attempts is not None and self.attempts >= self.max_attempts:
                raise self._give_up(f"max_attempts={self.max_attempts}")
            delay = self.interval
            if self.max_duration is not None:
                remaining = self.max_duration - (loop.time() - started)
                if remaining <= 0:
                    raise self._give_up(f"max_duration={self.max_duration}s")
                delay = min(delay, remaining)

            if status is not None:
                logger.info(f"Chaincode not ready, waiting {delay:g}s (pending: {', '.join(status.pending()) or 'none'})")
            if await self.token.sleep(delay):
                raise OperationCancelled(
                    f"Readiness poll cancelled after {self.attempts} check(s): {self.token.reason}",
                    {"attempts": self.attempts},
                )
