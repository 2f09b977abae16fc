from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Fingerprint:
    """Modification state of a file, compared to detect writes by other instances."""

    mtime_ns: int
    size: int
    inode: int
    device: int


def fingerprint(path: Path) -> Optional[Fingerprint]:
    """Fingerprint of the file at ``path`` or None if it can't be stat'ed."""
    try:
        st = os.stat(path)
    except OSError:
        return None
    return Fingerprint(mtime_ns=st.st_mtime_ns, size=st.st_size, inode=st.st_ino, device=st.st_dev)


def fingerprints_equal(a: Optional[Fingerprint], b: Optional[Fingerprint]) -> bool:
    """Unknown fingerprints never compare equal."""
    return a is not None and b is not None and a == b
