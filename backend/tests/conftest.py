from pathlib import Path
import sys

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
for path in (ROOT_DIR, ROOT_DIR / "scripts"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from flights.config import settings


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the local cache at a temporary directory."""
    monkeypatch.setattr(settings, "data_dir", str(tmp_path))
    return tmp_path
