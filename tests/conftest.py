import logging
import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

# Ensure src/ is importable when running tests without installing the package.
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture(autouse=True)
def _isolate_checktext_home(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path):
    """Point CHECKTEXT_HOME at a temporary directory so we never read a real config."""

    home = tmp_path / "checktext-home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("CHECKTEXT_HOME", str(home))
    for name in ("CHECKTEXT_MARKER", "CHECKTEXT_MAX_SIZE", "CHECKTEXT_MEASURE", "CHECKTEXT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield home


@pytest.fixture(autouse=True)
def _reset_checktext_logger():
    """Drop handlers added by configure_logger so tests stay independent."""

    yield
    logger = logging.getLogger("checktext")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def marker() -> str:
    return "Truncated"  # 9 bytes, 9 chars
