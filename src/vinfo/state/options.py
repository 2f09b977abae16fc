"""Option table and option values.

Options are persisted as flat strings understood by :meth:`OptionStore.apply`:

- ``name`` / ``noname`` / ``invname`` for boolean options
- ``name=value`` for valued options, with ``\\`` and space escaped by ``\\``
- ``name+=value`` / ``name-=value`` to append to or subtract from a value
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple, Union

from ..config import DEFAULT_INFO
from ..errors import OptionError

OptionValue = Union[bool, int, str]

BOOL = "bool"
INT = "int"
STR = "str"


@dataclass(frozen=True)
class Option:
    name: str
    kind: str
    default: OptionValue


def _opts(*specs: Tuple[str, str, OptionValue]) -> Tuple[Option, ...]:
    return tuple(Option(name, kind, default) for name, kind, default in specs)


# Every global option that is persisted, in the order it is written.
GLOBAL_OPTIONS: Tuple[Option, ...] = _opts(
    ("aproposprg", STR, "apropos %a"),
    ("autochpos", BOOL, True),
    ("cdpath", STR, ""),
    ("chaselinks", BOOL, False),
    ("columns", INT, 80),
    ("cpoptions", STR, "fst"),
    ("deleteprg", STR, ""),
    ("fastrun", BOOL, False),
    ("fillchars", STR, ""),
    ("findprg", STR, "find %s %a -print , -type d \\( ! -readable -o ! -executable \\) -prune"),
    ("followlinks", BOOL, True),
    ("fusehome", STR, "/tmp/vinfo_FUSE"),
    ("gdefault", BOOL, False),
    ("grepprg", STR, "grep -n -H -I -r %i %a %s"),
    ("histcursor", STR, "startup,dirmark,direnter"),
    ("history", INT, 15),
    ("hlsearch", BOOL, True),
    ("iec", BOOL, False),
    ("ignorecase", BOOL, False),
    ("incsearch", BOOL, False),
    ("laststatus", BOOL, True),
    ("title", BOOL, True),
    ("lines", INT, 24),
    ("locateprg", STR, "locate %a"),
    ("mediaprg", STR, ""),
    ("mintimeoutlen", INT, 150),
    ("rulerformat", STR, "%2l/%S%[ +%x%]"),
    ("runexec", BOOL, False),
    ("scrollbind", BOOL, False),
    ("scrolloff", INT, 0),
    ("shell", STR, "/bin/sh"),
    ("shellcmdflag", STR, "-c"),
    ("shortmess", STR, ""),
    ("showtabline", STR, "multiple"),
    ("sizefmt", STR, "units:iec"),
    ("slowfs", STR, ""),
    ("smartcase", BOOL, False),
    ("sortnumbers", BOOL, False),
    ("statusline", STR, ""),
    ("syncregs", STR, ""),
    ("tabscope", STR, "global"),
    ("tabstop", INT, 8),
    ("timefmt", STR, "%m/%d %H:%M"),
    ("timeoutlen", INT, 1000),
    ("trash", BOOL, True),
    ("tuioptions", STR, "ps"),
    ("undolevels", INT, 100),
    ("vicmd", STR, "vim"),
    ("vixcmd", STR, "vim"),
    ("wrapscan", BOOL, True),
    ("confirm", STR, "delete,permdelete"),
    ("dotdirs", STR, "nonrootparent"),
    ("caseoptions", STR, ""),
    ("suggestoptions", STR, ""),
    ("iooptions", STR, ""),
    ("dirsize", STR, "size"),
    ("classify", STR, ""),
    ("vinfo", STR, DEFAULT_INFO),
    ("vimhelp", BOOL, False),
    ("wildmenu", BOOL, True),
    ("wildstyle", STR, "bar"),
    ("wordchars", STR, "1-8,14-31,33-255"),
    ("wrap", BOOL, True),
)

# Options that every pane carries on its own.
VIEW_OPTIONS: Tuple[Option, ...] = _opts(
    ("viewcolumns", STR, ""),
    ("sortgroups", STR, ""),
    ("lsoptions", STR, ""),
    ("lsview", BOOL, False),
    ("milleroptions", STR, "lsize:0,csize:1,rsize:0"),
    ("millerview", BOOL, False),
    ("number", BOOL, False),
    ("numberwidth", INT, 4),
    ("relativenumber", BOOL, False),
    ("previewprg", STR, ""),
)


def escape_spaces(value: str) -> str:
    return value.replace("\\", "\\\\").replace(" ", "\\ ")


def unescape(value: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(value):
        if value[i] == "\\" and i + 1 < len(value):
            i += 1
        out.append(value[i])
        i += 1
    return "".join(out)


class OptionStore:
    """Current values of a fixed table of options."""

    def __init__(self, table: Tuple[Option, ...]) -> None:
        self._table: Dict[str, Option] = {opt.name: opt for opt in table}
        self._values: Dict[str, OptionValue] = {opt.name: opt.default for opt in table}

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __iter__(self) -> Iterator[Option]:
        return iter(self._table.values())

    def get(self, name: str) -> OptionValue:
        try:
            return self._values[name]
        except KeyError:
            raise OptionError(f"Unknown option: {name}") from None

    def set(self, name: str, value: OptionValue) -> None:
        opt = self._option(name)
        self._values[name] = _coerce(opt, value)

    def _option(self, name: str) -> Option:
        opt = self._table.get(name)
        if opt is None:
            raise OptionError(f"Unknown option: {name}")
        return opt

    def apply(self, arg: str) -> None:
        """Apply one ``set``-style argument.  Raises OptionError when it is rejected."""
        arg = arg.strip()
        if not arg:
            raise OptionError("Empty option argument")

        for op in ("+=", "-=", "="):
            name, sep, raw = arg.partition(op)
            if sep and name and "=" not in name and not name.endswith(("+", "-")):
                self._apply_value(name, op, unescape(raw))
                return

        if arg in self._table:
            opt = self._table[arg]
            if opt.kind != BOOL:
                raise OptionError(f"Option `{arg}` requires a value")
            self._values[arg] = True
            return
        if arg.startswith("no") and arg[2:] in self._table:
            self._set_bool(arg[2:], False)
            return
        if arg.startswith("inv") and arg[3:] in self._table:
            name = arg[3:]
            self._set_bool(name, not self._values[name])
            return
        raise OptionError(f"Unknown option: {arg}")

    def _set_bool(self, name: str, value: bool) -> None:
        if self._table[name].kind != BOOL:
            raise OptionError(f"Option `{name}` is not boolean")
        self._values[name] = value

    def _apply_value(self, name: str, op: str, raw: str) -> None:
        opt = self._option(name)
        if opt.kind == BOOL:
            raise OptionError(f"Boolean option `{name}` doesn't take a value")
        new = _coerce(opt, raw)
        if op == "=":
            self._values[name] = new
            return
        old = self._values[name]
        if opt.kind == INT:
            self._values[name] = old + new if op == "+=" else old - new
            return
        if op == "+=":
            self._values[name] = f"{old},{new}" if old else new
        else:
            items = [item for item in str(old).split(",") if item and item != new]
            self._values[name] = ",".join(items)

    def format(self) -> List[str]:
        """Render every option as a string accepted by :meth:`apply`."""
        result: List[str] = []
        for opt in self._table.values():
            value = self._values[opt.name]
            if opt.kind == BOOL:
                result.append(opt.name if value else f"no{opt.name}")
            else:
                result.append(f"{opt.name}={escape_spaces(str(value))}")
        return result


def _coerce(opt: Option, value: OptionValue) -> OptionValue:
    if opt.kind == BOOL:
        if isinstance(value, bool):
            return value
        raise OptionError(f"Option `{opt.name}` expects a boolean")
    if opt.kind == INT:
        if isinstance(value, bool):
            raise OptionError(f"Option `{opt.name}` expects an integer")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise OptionError(f"Invalid value for `{opt.name}`: {value!r}") from None
    return str(value)
