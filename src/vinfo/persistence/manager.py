from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from ..state.session import Session
from .document import JsonObject, read_document, write_document
from .fingerprint import Fingerprint, fingerprint, fingerprints_equal
from .legacy import read_legacy_file
from .loader import load_state
from .merge import merge_states
from .serializer import serialize_state

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


class InfoFileManager:
    """Reads and writes the state file of a session.

    Several instances may share one state file without locking.  The
    fingerprint of the file is recorded when it's loaded and whenever this
    instance writes it; if it differs at save time some other instance wrote
    the file in between and its state is merged into ours before writing.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.config = session.config
        self.info_path = self.config.info_path
        self.legacy_path = self.config.legacy_path
        self.fingerprint: Optional[Fingerprint] = None

    @property
    def tmp_path(self) -> Path:
        return Path(f"{self.info_path}_{os.getpid()}")

    # Public API

    def read(self, reread: bool = False) -> bool:
        """Load state into the session.  Returns False if there was nothing to load."""
        doc = read_document(self.info_path)
        if doc is None:
            doc = read_legacy_file(self.legacy_path, trash_dir=self.config.trash_dir)
        if doc is None:
            logger.info("No state to load from %s", self.config.state_dir)
            return False

        load_state(self.session, doc, reread=reread)

        self.fingerprint = fingerprint(self.info_path)
        self.session.dir_stack.freeze()
        return True

    def write(self) -> bool:
        """Save state of the session, merging in changes made by other instances.

        Failures are logged and leave both the session and the state file as
        they were.  Returns True if the file was replaced.
        """
        ensure_dir(self.info_path.parent)
        tmp = self.tmp_path

        have_snapshot = self._snapshot(tmp)
        changed = not fingerprints_equal(self.fingerprint, fingerprint(self.info_path))

        current = serialize_state(self.session)
        if changed and have_snapshot:
            logger.info("State file %s was changed by another instance, merging", self.info_path)
            merge_states(current, read_document(tmp), self.session)

        if not self._write_tmp(tmp, current):
            return False
        self.fingerprint = fingerprint(tmp)

        try:
            os.replace(tmp, self.info_path)
        except OSError as exc:
            logger.error("Can't replace %s with its temporary copy: %s", self.info_path, exc)
            _remove_quietly(tmp)
            return False
        logger.debug("Saved state to %s", self.info_path)
        return True

    # Internal utilities

    def _snapshot(self, tmp: Path) -> bool:
        """Copy the state file as it's now; the copy is what gets merged."""
        if not os.access(self.info_path, os.R_OK):
            return False
        try:
            shutil.copy2(str(self.info_path), str(tmp))
        except OSError as exc:
            logger.warning("Can't copy %s to %s, not merging: %s", self.info_path, tmp, exc)
            return False
        return True

    def _write_tmp(self, tmp: Path, doc: JsonObject) -> bool:
        try:
            write_document(tmp, doc)
        except OSError as exc:
            logger.error("Error storing state to: %s (%s)", tmp, exc)
            _remove_quietly(tmp)
            return False
        return True


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
    except OSError as exc:
        logger.debug("Can't remove %s: %s", path, exc)
