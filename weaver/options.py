"""
Option declarations and the settings store behind every builder.

An Option names where one logical value goes: a CLI flag, a config
dot-path, or both. The store keeps each value once; the flag list and the
config tree are projections of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from weaver.arg_vector import ArgVector
from weaver.config_tree import ConfigTree


@dataclass(frozen=True)
class Option:
    """One settable value of a builder."""
    name: str
    flag: Optional[str] = None
    path: Optional[str] = None
    commands: Tuple[str, ...] = ()

    @property
    def restricted(self) -> bool:
        return bool(self.commands)


@dataclass
class SettingsStore:
    """Insertion-ordered option values with flag and config projections."""
    _values: Dict[str, Tuple[Option, Any]] = field(default_factory=dict)
    _deleted: List[str] = field(default_factory=list)

    def set(self, option: Option, value: Any) -> None:
        if value is None:
            return
        # re-setting keeps the original position
        self._values[option.name] = (option, value)

    def get(self, name: str, default: Any = None) -> Any:
        entry = self._values.get(name)
        return entry[1] if entry else default

    def delete_path(self, dot_path: str) -> None:
        self._deleted.append(dot_path)
        prefix = dot_path + "."
        for name, (option, _) in list(self._values.items()):
            if option.path and (option.path == dot_path or option.path.startswith(prefix)):
                del self._values[name]

    def __iter__(self) -> Iterator[Tuple[Option, Any]]:
        return iter(self._values.values())

    def __len__(self) -> int:
        return len(self._values)

    def to_args(self, prefix: str = "--", inline: bool = False) -> ArgVector:
        vector = ArgVector(prefix=prefix, inline=inline)
        for option, value in self:
            if option.flag:
                vector.set(option.flag, value)
        return vector

    def to_config(self, base: ConfigTree) -> ConfigTree:
        tree = base.copy()
        for dot_path in self._deleted:
            tree.delete_field(dot_path)
        for option, value in self:
            if option.path:
                tree.set_path(option.path, value)
        return tree
