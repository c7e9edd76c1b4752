"""Custom exception hierarchy."""
from typing import Any, Dict, List, Optional, Sequence


class WeaverError(Exception):
    """Base exception for all weaver errors."""
    code: str = "SYS_001"

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class ConfigurationError(WeaverError):
    """Settings or template could not be loaded."""
    code = "CFG_001"


class ConfigWriteError(WeaverError):
    """Config directory creation or file write failed."""
    code = "CFG_002"

    def __init__(self, message: str, path: str = None):
        super().__init__(message, {"path": path})
        self.path = path


class InvalidCommandState(WeaverError):
    """A setter was used while an incompatible command is selected."""
    code = "CMD_001"

    def __init__(self, message: str, active: Sequence[str] = (), allowed: Sequence[str] = ()):
        super().__init__(message, {"active": list(active), "allowed": list(allowed)})
        self.active = list(active)
        self.allowed = list(allowed)


class ProcessSpawnError(WeaverError):
    """The target binary could not be launched."""
    code = "PROC_001"

    def __init__(self, message: str, binary: str = None):
        super().__init__(message, {"binary": binary})
        self.binary = binary


class ProcessExitError(WeaverError):
    """Process exited nonzero, or exited before its readiness line."""
    code = "PROC_002"

    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
        command: Optional[List[str]] = None,
    ):
        super().__init__(message, {"exit_code": exit_code, "command": command or []})
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.command = command or []

    def __str__(self) -> str:
        return f"{self.message}\nStdout: {self.stdout}\nStderr: {self.stderr}"


class StatusParseError(WeaverError):
    """A status payload could not be parsed."""
    code = "STAT_001"

    def __init__(self, message: str, payload: str = ""):
        super().__init__(message, {"payload": payload[:500]})
        self.payload = payload


class QuorumNotReached(WeaverError):
    """Polling bounds were exhausted before a majority approved."""
    code = "POLL_001"

    def __init__(self, message: str, attempts: int = 0, approvals: Dict[str, bool] = None):
        super().__init__(message, {"attempts": attempts, "approvals": approvals or {}})
        self.attempts = attempts
        self.approvals = approvals or {}


class OperationCancelled(WeaverError):
    """A cancellation token stopped a wait."""
    code = "SYS_002"
