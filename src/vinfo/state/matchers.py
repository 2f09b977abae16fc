from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern

from ..errors import MatcherError


@dataclass
class Matcher:
    """A single compiled pattern: either a glob list or a regular expression."""

    expr: str
    pattern: Pattern[str]

    def matches(self, name: str) -> bool:
        return self.pattern.search(name) is not None


def _compile_globs(globs: str, expr: str, case_sensitive: bool) -> Matcher:
    parts = [g for g in _split_globs(globs) if g]
    if not parts:
        raise MatcherError(f"Empty glob list in `{expr}`")
    regex = "|".join(fnmatch.translate(p) for p in parts)
    flags = 0 if case_sensitive else re.IGNORECASE
    return Matcher(expr=expr, pattern=re.compile(regex, flags))


def _split_globs(globs: str) -> List[str]:
    # `,,` stands for a literal comma inside a glob.
    parts: List[str] = []
    current = []
    i = 0
    while i < len(globs):
        ch = globs[i]
        if ch == ",":
            if globs[i + 1:i + 2] == ",":
                current.append(",")
                i += 2
                continue
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    parts.append("".join(current))
    return parts


def _compile_regex(body: str, flags_str: str, expr: str, case_sensitive: bool) -> Matcher:
    flags = 0 if case_sensitive else re.IGNORECASE
    for flag in flags_str:
        if flag == "i":
            flags |= re.IGNORECASE
        elif flag == "I":
            flags &= ~re.IGNORECASE
        else:
            raise MatcherError(f"Unknown regex flag `{flag}` in `{expr}`")
    try:
        return Matcher(expr=expr, pattern=re.compile(body, flags))
    except re.error as exc:
        raise MatcherError(f"Invalid regex in `{expr}`: {exc}") from exc


def _find_closing(expr: str, start: int, closing: str) -> int:
    i = start
    while i < len(expr):
        if expr[i] == "\\":
            i += 2
            continue
        if expr[i] == closing:
            return i
        i += 1
    return -1


@dataclass
class Matchers:
    """List of matchers parsed from an association expression.

    Supported forms, which may be concatenated:
      - ``{*.jpg,*.png}``: case-insensitive globs (``{{...}}`` is case-sensitive)
      - ``/regex/flags``: regular expression, flags ``i``/``I``
      - ``*.jpg,*.png``: bare globs (must be the whole expression)
    """

    expr: str
    items: List[Matcher] = field(default_factory=list)

    def matches(self, name: str) -> bool:
        return all(m.matches(name) for m in self.items)

    @staticmethod
    def parse(expr: str) -> "Matchers":
        if not expr:
            raise MatcherError("Empty matcher expression")
        items: List[Matcher] = []
        i = 0
        while i < len(expr):
            rest = expr[i:]
            if rest.startswith("{{"):
                end = rest.find("}}")
                if end < 0:
                    raise MatcherError(f"Unclosed `{{{{` in `{expr}`")
                items.append(_compile_globs(rest[2:end], rest[:end + 2], True))
                i += end + 2
            elif rest.startswith("{"):
                end = rest.find("}")
                if end < 0:
                    raise MatcherError(f"Unclosed `{{` in `{expr}`")
                items.append(_compile_globs(rest[1:end], rest[:end + 1], False))
                i += end + 1
            elif rest.startswith("/"):
                end = _find_closing(rest, 1, "/")
                if end < 0:
                    raise MatcherError(f"Unclosed `/` in `{expr}`")
                flags_end = end + 1
                while flags_end < len(rest) and rest[flags_end].isalpha():
                    flags_end += 1
                items.append(_compile_regex(rest[1:end], rest[end + 1:flags_end], rest[:flags_end], True))
                i += flags_end
            elif i == 0:
                items.append(_compile_globs(expr, expr, False))
                break
            else:
                raise MatcherError(f"Unexpected text `{rest}` in `{expr}`")
        return Matchers(expr=expr, items=items)


class Filter:
    """Regex-based name filter whose raw expression is remembered.

    An empty expression is valid and filters nothing.
    """

    def __init__(self, expr: str = "", case_sensitive: bool = True) -> None:
        self.case_sensitive = case_sensitive
        self.expr = ""
        self._pattern: Optional[Pattern[str]] = None
        self.set(expr)

    def set(self, expr: str) -> None:
        """Replace the expression; raises MatcherError and keeps the old one on failure."""
        pattern = None
        if expr:
            try:
                pattern = re.compile(expr, 0 if self.case_sensitive else re.IGNORECASE)
            except re.error as exc:
                raise MatcherError(f"Invalid filter `{expr}`: {exc}") from exc
        self.expr = expr
        self._pattern = pattern

    def is_empty(self) -> bool:
        return not self.expr

    def matches(self, name: str) -> bool:
        return self._pattern is not None and self._pattern.search(name) is not None
