"""Conversion of option values into CLI tokens."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple, Union

ArgValue = Union[str, int, float, bool, List[str]]


class ArgVector:
    """
    Ordered flag settings serialized to a token list.

    ``True`` becomes a bare flag, ``False`` and ``None`` produce nothing,
    lists are comma-joined into one value token and everything else is
    rendered with ``str()``. ``prefix`` is the flag dash style and
    ``inline`` renders ``--flag=value`` as a single token.
    """

    def __init__(self, prefix: str = "--", inline: bool = False):
        self.prefix = prefix
        self.inline = inline
        self._values: dict = {}

    def set(self, key: str, value: Optional[ArgValue]) -> "ArgVector":
        if value is not None:
            self._values[key] = value
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def items(self):
        return self._values.items()

    def serialize(self) -> List[str]:
        return serialize_pairs(self._values.items(), self.prefix, self.inline)


def serialize_pair(key: str, value: Optional[ArgValue], prefix: str = "--", inline: bool = False) -> List[str]:
    flag = f"{prefix}{key}"
    if value is None or value is False:
        return []
    if value is True:
        return [flag]
    if isinstance(value, (list, tuple)):
        rendered = ",".join(str(v) for v in value)
    else:
        rendered = str(value)
    if inline:
        return [f"{flag}={rendered}"]
    return [flag, rendered]


def serialize_pairs(
    pairs: Iterable[Tuple[str, Optional[ArgValue]]],
    prefix: str = "--",
    inline: bool = False,
) -> List[str]:
    """Serialize ``(key, value)`` pairs in order; keys may repeat."""
    tokens: List[str] = []
    for key, value in pairs:
        tokens.extend(serialize_pair(key, value, prefix, inline))
    return tokens
