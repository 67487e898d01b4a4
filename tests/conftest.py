from __future__ import annotations

import logging
import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the reader's log file out of the user's home directory.
os.environ.setdefault("XL2CAL_IO_LOG_DIR", str(Path(tempfile.gettempdir()) / "xl2cal_io_test_logs"))


@pytest.fixture()
def isolated_app_logger(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the application logger at ``tmp_path`` and drop its handlers afterwards."""

    import xl2cal.core.logger as core_logger

    monkeypatch.setattr(core_logger, "_work_dir", lambda: tmp_path / "work")
    monkeypatch.setattr(core_logger, "_LOGGER", None, raising=False)
    yield
    app_logger = logging.getLogger("xl2cal")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
