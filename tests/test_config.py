import logging
from pathlib import Path

import pytest

from vinfo.config import (
    DEFAULT_INFO,
    Config,
    InfoFlag,
    all_info_flags,
    default_state_dir,
    format_info_flags,
    parse_info_flags,
)
from vinfo.logging_config import configure_logging


def test_flags_roundtrip():
    flags = parse_info_flags("tui, dhistory,,savedirs")
    assert flags == InfoFlag.TUI | InfoFlag.DHISTORY | InfoFlag.SAVEDIRS
    assert parse_info_flags(format_info_flags(flags)) == flags
    assert parse_info_flags(format_info_flags(all_info_flags())) == all_info_flags()
    assert parse_info_flags(DEFAULT_INFO) == InfoFlag.BOOKMARKS
    assert parse_info_flags("") == InfoFlag.NONE


def test_unknown_flag_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="vinfo.config"):
        assert parse_info_flags("marks,nope") == InfoFlag.MARKS
    assert "nope" in caplog.text


def test_paths_derive_from_state_dir(tmp_path: Path):
    cfg = Config(state_dir=tmp_path, trash_dir=tmp_path / "Trash")
    assert cfg.info_path == tmp_path / "vinfo.json"
    assert cfg.legacy_path == tmp_path / "vinfo"


def test_env_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("VINFO_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("VINFO_TRASH_DIR", str(tmp_path / "trash"))
    cfg = Config.from_env()
    assert cfg.state_dir == tmp_path / "state"
    assert cfg.trash_dir == tmp_path / "trash"


def test_default_dirs_without_env(monkeypatch):
    monkeypatch.delenv("VINFO_STATE_DIR", raising=False)
    cfg = Config.from_env()
    assert cfg.state_dir == default_state_dir()
    assert cfg.state_dir.name == "vinfo"


@pytest.fixture
def package_logger():
    logger = logging.getLogger("vinfo")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_configure_logging_honours_env(monkeypatch, package_logger):
    root_handlers = list(logging.getLogger().handlers)

    monkeypatch.setenv("VINFO_LOG_LEVEL", "debug")
    assert configure_logging() is package_logger
    assert package_logger.level == logging.DEBUG

    monkeypatch.setenv("VINFO_LOG_LEVEL", "nonsense")
    configure_logging(default_level=logging.ERROR)
    assert package_logger.level == logging.ERROR

    added = [h for h in package_logger.handlers if isinstance(h, logging.StreamHandler)
             and not isinstance(h, logging.NullHandler)]
    assert len(added) == 1
    assert "%(name)s" in added[0].formatter._fmt
    assert logging.getLogger().handlers == root_handlers
