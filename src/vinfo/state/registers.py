from __future__ import annotations

from typing import Dict, Iterator, List, Tuple

from ..errors import StateError

VALID_REGISTERS = '"_abcdefghijklmnopqrstuvwxyz'
BLACKHOLE_REGISTER = "_"
DEFAULT_REGISTER = '"'


class RegisterStore:
    """Registers holding ordered lists of file paths."""

    def __init__(self) -> None:
        self._regs: Dict[str, List[str]] = {}

    def append(self, name: str, path: str) -> None:
        """Append a path unless it's already in the register."""
        if len(name) != 1 or name not in VALID_REGISTERS:
            raise StateError(f"Invalid register name: {name!r}")
        if name == BLACKHOLE_REGISTER:
            return
        files = self._regs.setdefault(name, [])
        if path not in files:
            files.append(path)

    def get(self, name: str) -> List[str]:
        return list(self._regs.get(name, []))

    def clear(self, name: str) -> None:
        self._regs.pop(name, None)

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        """Non-empty registers in canonical order."""
        for name in VALID_REGISTERS:
            files = self._regs.get(name)
            if files:
                yield name, list(files)
