import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from vinfo.config import Config, all_info_flags  # noqa: E402
from vinfo.state import Session  # noqa: E402


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(state_dir=tmp_path / "state", trash_dir=tmp_path / "trash")


@pytest.fixture
def session(config: Config) -> Session:
    return Session(config)


@pytest.fixture
def full_session(config: Config) -> Session:
    """Session that persists every category."""
    s = Session(config)
    s.set_info_flags(all_info_flags())
    return s
