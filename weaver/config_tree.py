"""
In-memory YAML configuration documents.

A ConfigTree is seeded from a template mapping, mutated one dot-path at a
time and written out on demand. Unset values are ``None`` and are never
written into the tree by setters or merges.
"""

from __future__ import annotations

import copy
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import yaml

from weaver.errors import ConfigWriteError, ConfigurationError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
_NULL_LINE = re.compile(r"(?<=[:-]) null$", re.MULTILINE)

PathLike = Union[str, Path]


def _dedupe(items: Iterable[Any]) -> List[Any]:
    seen: List[Any] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        if isinstance(value, Mapping) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        elif isinstance(value, Mapping):
            result[key] = _deep_merge({}, value)
        elif isinstance(value, (list, tuple)):
            result[key] = _dedupe(value)
        else:
            result[key] = value
    return result


def dump_yaml(data: Mapping[str, Any]) -> str:
    """Serialize a mapping the way config files are written: keys in insertion order, nulls blank."""
    text = yaml.safe_dump(
        dict(data),
        sort_keys=False,
        default_flow_style=False,
        indent=2,
        allow_unicode=True,
        width=float("inf"),
    )
    return _NULL_LINE.sub("", text)


def read_yaml(path: PathLike) -> Dict[str, Any]:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read YAML from {path}: {e}", {"path": str(path)}) from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"YAML document at {path} is not a mapping", {"path": str(path)})
    return data


class ConfigTree:
    """Deep-mergeable configuration document bound to a canonical filename."""

    def __init__(self, template: Optional[Mapping[str, Any]] = None, filename: str = "config.yaml"):
        self._data: Dict[str, Any] = copy.deepcopy(dict(template or {}))
        self.filename = filename

    @classmethod
    def load(cls, path: PathLike, filename: Optional[str] = None) -> "ConfigTree":
        path = Path(path)
        return cls(read_yaml(path), filename or path.name)

    def copy(self) -> "ConfigTree":
        return ConfigTree(self._data, self.filename)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigTree):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"ConfigTree(filename={self.filename!r}, keys={list(self._data)})"

    def get_path(self, dot_path: str, default: Any = None) -> Any:
        node: Any = self._data
        for part in dot_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set_path(self, dot_path: str, value: Any) -> "ConfigTree":
        if value is None:
            return self
        parts = dot_path.split(".")
        node = self._data
        for part in parts[:-1]:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        if isinstance(value, Mapping):
            value = _deep_merge({}, value)
        elif isinstance(value, (list, tuple)):
            value = _dedupe(value)
        node[parts[-1]] = value
        return self

    def delete_field(self, dot_path: str) -> "ConfigTree":
        parts = dot_path.split(".")
        node: Any = self._data
        for part in parts[:-1]:
            if not isinstance(node, dict) or part not in node:
                return self
            node = node[part]
        if isinstance(node, dict) and parts[-1] in node:
            del node[parts[-1]]
            logger.debug(f"Removed config field {dot_path}")
        return self

    def merge(self, override: Optional[Mapping[str, Any]]) -> "ConfigTree":
        if override:
            self._data = _deep_merge(self._data, override)
        return self

    def resolve_destination(self, dest: PathLike) -> Path:
        dest = Path(dest)
        if dest.suffix.lower() in YAML_SUFFIXES:
            return dest
        return dest / self.filename

    def save(self, dest: Optional[PathLike]) -> "ConfigTree":
        """
        Write the tree as YAML.

        ``dest`` may be a directory (the canonical filename is appended) or a
        ``.yaml`` file path. ``None`` skips the write.
        """
        if dest is None:
            return self
        target = self.resolve_destination(dest)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(dump_yaml(self._data), encoding="utf-8")
        except OSError as e:
            raise ConfigWriteError(f"Failed to write {target}: {e}", path=str(target)) from e
        logger.info(f"Wrote configuration to {target}")
        return self


def load_template(name_or_path: PathLike, template_dir: Optional[PathLike] = None) -> ConfigTree:
    """
    Load a template by canonical name from ``template_dir`` or from an explicit path.

    ``load_template("core.yaml", settings.template_dir)`` and
    ``load_template("/etc/fabric/core.yaml")`` both return a tree whose
    filename is ``core.yaml``.
    """
    candidate = Path(name_or_path)
    if not candidate.is_absolute() and template_dir is not None:
        in_dir = Path(template_dir) / candidate
        if in_dir.exists():
            candidate = in_dir
    if not candidate.exists():
        raise ConfigurationError(f"Template not found: {candidate}", {"path": str(candidate)})
    return ConfigTree.load(candidate, Path(name_or_path).name)
