from __future__ import annotations

import re
from typing import Dict, Iterator, Tuple

from ..errors import StateError

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*!?$")


class CommandRegistry:
    """User-defined :commands, name to body."""

    def __init__(self) -> None:
        self._cmds: Dict[str, str] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._cmds

    def define(self, name: str, body: str, overwrite: bool = True) -> None:
        if not _NAME_RE.match(name):
            raise StateError(f"Invalid command name: {name!r}")
        if not body:
            raise StateError(f"Command `{name}` has no body")
        if not overwrite and name in self._cmds:
            raise StateError(f"Command `{name}` already exists")
        self._cmds[name] = body

    def get(self, name: str) -> str:
        return self._cmds[name]

    def remove(self, name: str) -> None:
        self._cmds.pop(name, None)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._cmds.items()))
