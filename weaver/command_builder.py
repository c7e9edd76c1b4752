"""
Generic fluent builder for one external command invocation.

Subclasses declare the binary, its command enum, the options they accept
and, for server commands, the readiness pattern. Every setter funnels into
``_set`` which ignores ``None`` and enforces command restrictions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple, Type, Union

from weaver.arg_vector import ArgValue, serialize_pairs
from weaver.cancellation import CancellationToken
from weaver.config_tree import ConfigTree
from weaver.errors import InvalidCommandState
from weaver.options import Option, SettingsStore
from weaver.process_supervisor import ProcessResult, ProcessSupervisor


@dataclass(frozen=True)
class CommandSpec:
    """Complete description of one command line."""
    binary: str
    command: Tuple[str, ...]
    subcommand: Optional[str]
    positional_args: Tuple[str, ...]
    flags: Tuple[str, ...]
    repeated_flags: Tuple[str, ...] = ()

    @property
    def args(self) -> List[str]:
        tokens = list(self.command)
        if self.subcommand:
            tokens.append(self.subcommand)
        return tokens + list(self.positional_args) + list(self.flags) + list(self.repeated_flags)

    def tokens(self) -> List[str]:
        return [self.binary, *self.args]

    def __str__(self) -> str:
        return " ".join(self.tokens())


class CommandBuilder:
    """Base class for binary-specific builders."""

    binary: ClassVar[str] = ""
    commands: ClassVar[Optional[Type[Enum]]] = None
    command_prefix: ClassVar[Tuple[str, ...]] = ()
    config_filename: ClassVar[Optional[str]] = None
    ready_pattern: ClassVar[Optional[str]] = None
    flag_prefix: ClassVar[str] = "--"
    inline_flags: ClassVar[bool] = False

    def __init__(
        self,
        template: Optional[Union[ConfigTree, Mapping[str, Any]]] = None,
        supervisor: Optional[ProcessSupervisor] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if isinstance(template, ConfigTree):
            self._base = template.copy()
        else:
            self._base = ConfigTree(template, self.config_filename or "config.yaml")
        self.supervisor = supervisor
        self.log = logger or logging.getLogger(f"weaver.builder.{type(self).__name__}")
        self.settings = SettingsStore()
        self._command: Optional[Enum] = None
        self._subcommand: Optional[str] = None
        self._positional: List[str] = []
        self._repeated: List[Tuple[str, ArgValue]] = []
        self._environment: Dict[str, str] = {}

    # ------------------------------------------------------------------
    # Command selection
    # ------------------------------------------------------------------

    @property
    def command(self) -> Optional[Enum]:
        return self._command

    def set_command(self, command: Optional[Union[str, Enum]], subcommand: Optional[str] = None):
        if command is None:
            return self
        if self.commands is None:
            raise InvalidCommandState(f"{self.binary} takes no command")
        try:
            resolved = self.commands(command.value if isinstance(command, Enum) else command)
        except ValueError:
            allowed = [c.value for c in self.commands]
            raise InvalidCommandState(
                f"Unknown {self.binary} command: {command}", active=[str(command)], allowed=allowed,
            ) from None
        self.log.debug(f"Setting command: {resolved.value}")
        previous, self._command = self._command, resolved
        try:
            for option, _ in self.settings:
                self.assert_command(*option.commands)
        except InvalidCommandState:
            self._command = previous
            raise
        if subcommand is not None:
            self._subcommand = subcommand
        return self

    def assert_command(self, *allowed: Union[str, Enum]) -> None:
        """Raise InvalidCommandState unless no command or one of ``allowed`` is active."""
        if not allowed or self._command is None:
            return
        names = [a.value if isinstance(a, Enum) else a for a in allowed]
        if self._command.value not in names:
            raise InvalidCommandState(
                f"Option not valid for '{self._command.value}' (allowed: {', '.join(names)})",
                active=[self._command.value],
                allowed=names,
            )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _set(self, option: Option, value: Any):
        if value is None:
            return self
        self.assert_command(*option.commands)
        if isinstance(value, Enum):
            value = value.value
        self.log.debug(f"Setting {option.name}: {value}")
        self.settings.set(option, value)
        return self

    def add_positional(self, value: Optional[Any]):
        if value is None or value == "":
            return self
        self.log.debug(f"Adding positional argument: {value}")
        self._positional.append(str(value))
        return self

    def add_repeated(self, pairs: Sequence[Tuple[str, Optional[ArgValue]]]):
        for key, value in pairs:
            if value is not None:
                self._repeated.append((key, value))
        return self

    def remove_config_field(self, dot_path: Optional[str]):
        if dot_path is None:
            return self
        self.log.debug(f"Removing config field: {dot_path}")
        self.settings.delete_path(dot_path)
        return self

    def merge_config(self, override: Optional[Mapping[str, Any]]):
        if override:
            self._base.merge(override)
        return self

    def set_environment(self, key: str, value: Optional[Any]):
        if value is None:
            return self
        self.log.debug(f"Setting environment {key}={value}")
        self._environment[key] = str(value)
        return self

    @property
    def environment(self) -> Dict[str, str]:
        return dict(self._environment)

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def command_tokens(self) -> Tuple[str, ...]:
        if self.commands is None:
            return self.command_prefix
        if self._command is None:
            raise InvalidCommandState(f"No command selected for {self.binary}")
        return (*self.command_prefix, self._command.value)

    def spec(self) -> CommandSpec:
        flags = self.settings.to_args(self.flag_prefix, self.inline_flags).serialize()
        repeated = serialize_pairs(self._repeated, self.flag_prefix, self.inline_flags)
        return CommandSpec(
            binary=self.binary,
            command=self.command_tokens(),
            subcommand=self._subcommand,
            positional_args=tuple(self._positional),
            flags=tuple(flags),
            repeated_flags=tuple(repeated),
        )

    def build(self) -> List[str]:
        tokens = self.spec().tokens()
        self.log.debug(f"Built command: {' '.join(tokens)}")
        return tokens

    def config(self) -> ConfigTree:
        return self.settings.to_config(self._base)

    def save(self, path: Optional[Union[str, Path]]):
        """Write the projected config tree; ``path`` may be a directory or a YAML file."""
        if path is None:
            return self
        self.config().save(path)
        return self

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(
        self,
        wait_for_ready: bool = False,
        env: Optional[Mapping[str, str]] = None,
        cancel: Optional[CancellationToken] = None,
        echo: Optional[bool] = None,
    ) -> ProcessResult:
        if self.supervisor is None:
            self.supervisor = ProcessSupervisor()
        if wait_for_ready and not self.ready_pattern:
            raise InvalidCommandState(f"{self.binary} has no readiness pattern")
        spec = self.spec()
        merged_env = {**self._environment, **(env or {})}
        return await self.supervisor.execute(
            spec.binary,
            spec.args,
            env=merged_env or None,
            ready_pattern=self.ready_pattern if wait_for_ready else None,
            cancel=cancel,
            echo=echo,
        )
