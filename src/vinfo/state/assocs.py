from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .matchers import Matchers

# Command of synthetic associations the application registers on its own.
PSEUDO_CMD = "vinfo"


class RecordType(enum.Enum):
    USER = "user"
    BUILTIN = "builtin"


@dataclass
class AssocRecord:
    command: str
    description: str = ""
    type: RecordType = RecordType.USER


@dataclass
class Assoc:
    matchers: Matchers
    records: List[AssocRecord] = field(default_factory=list)


def replace_double_comma(text: str) -> str:
    """Turn every ``,,`` into a single literal comma."""
    return text.replace(",,", ",")


def double_commas(text: str) -> str:
    return text.replace(",", ",,")


def split_programs(programs: str) -> List[AssocRecord]:
    """Split a comma-separated program list into records.

    ``,,`` stands for a literal comma and a leading ``{text}`` on a program is
    its description.
    """
    records: List[AssocRecord] = []
    current: List[str] = []
    i = 0
    while i <= len(programs):
        if i == len(programs) or (programs[i] == "," and programs[i + 1:i + 2] != ","):
            record = _parse_record("".join(current).strip())
            if record is not None:
                records.append(record)
            current = []
            i += 1
            continue
        if programs[i] == ",":
            current.append(",")
            i += 2
            continue
        current.append(programs[i])
        i += 1
    return records


def _parse_record(text: str) -> Optional[AssocRecord]:
    description = ""
    if text.startswith("{"):
        end = text.find("}")
        if end > 0:
            description = text[1:end]
            text = text[end + 1:].lstrip()
    if not text:
        return None
    return AssocRecord(command=text, description=description)


def format_record(record: AssocRecord) -> str:
    """Inverse of :func:`split_programs` for a single record."""
    cmd = double_commas(record.command)
    if record.description:
        return f"{{{record.description}}}{cmd}"
    return cmd


class AssocList:
    """Ordered list of associations sharing one purpose (open, X-open, view)."""

    def __init__(self) -> None:
        self._assocs: List[Assoc] = []

    def __iter__(self) -> Iterator[Assoc]:
        return iter(self._assocs)

    def __len__(self) -> int:
        return len(self._assocs)

    def add(self, matchers: Matchers, records: List[AssocRecord]) -> None:
        assoc = self._find(matchers.expr)
        if assoc is None:
            assoc = Assoc(matchers=matchers)
            self._assocs.append(assoc)
        for record in records:
            if not self._has_record(assoc, record.command, record.description):
                assoc.records.append(record)

    def _find(self, expr: str) -> Optional[Assoc]:
        for assoc in self._assocs:
            if assoc.matchers.expr == expr:
                return assoc
        return None

    @staticmethod
    def _has_record(assoc: Assoc, command: str, description: str) -> bool:
        return any(r.command == command and r.description == description for r in assoc.records)

    def exists(self, matchers: str, cmd: str) -> bool:
        """Whether every program of the stored ``cmd`` string is registered for ``matchers``."""
        assoc = self._find(matchers)
        records = split_programs(cmd)
        if assoc is None or not records:
            return False
        return all(self._has_record(assoc, r.command, r.description) for r in records)

    def records(self) -> Iterator[Tuple[Assoc, AssocRecord]]:
        for assoc in self._assocs:
            for record in assoc.records:
                yield assoc, record


class AssocRegistry:
    """File-type programs (regular and X-only) and file viewers."""

    def __init__(self) -> None:
        self.filetypes = AssocList()
        self.xfiletypes = AssocList()
        self.viewers = AssocList()

    def set_programs(self, matchers: Matchers, programs: str, for_x: bool = False) -> None:
        target = self.xfiletypes if for_x else self.filetypes
        target.add(matchers, split_programs(programs))

    def set_viewers(self, matchers: Matchers, viewers: str) -> None:
        self.viewers.add(matchers, split_programs(viewers))

    def add_builtin(self, matchers: Matchers, description: str) -> None:
        record = AssocRecord(command=PSEUDO_CMD, description=description, type=RecordType.BUILTIN)
        self.filetypes.add(matchers, [record])
