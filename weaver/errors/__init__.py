"""
Error classes for weaver.

Builders and the process supervisor raise these and never catch them;
the CLI layer decides whether to log-and-exit.
"""

from weaver.errors.exceptions import (
    WeaverError, ConfigurationError, ConfigWriteError, InvalidCommandState,
    ProcessSpawnError, ProcessExitError, StatusParseError, QuorumNotReached,
    OperationCancelled,
)

__all__ = [
    "WeaverError", "ConfigurationError", "ConfigWriteError", "InvalidCommandState",
    "ProcessSpawnError", "ProcessExitError", "StatusParseError", "QuorumNotReached",
    "OperationCancelled",
]
