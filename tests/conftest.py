import os, sys
import tempfile
import warnings
from pathlib import Path

import pytest

# Add src/ to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Ensure required environment variables for config validation
os.environ.setdefault("DISCORD_TOKEN", "test-token")
os.environ.setdefault("SQL_DB_PATH", str(Path(tempfile.mkdtemp(prefix="ddbot-tests-")) / "ddbot.db"))
os.environ.setdefault("SYNC_COMMANDS", "0")

# Silence deprecation warnings surfaced from third-party dependencies during tests
warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


def pytest_configure(config):
    warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite store for one test."""
    from ddbot import storage

    storage.init(tmp_path / "ddbot.db")
    try:
        yield storage
    finally:
        storage.close()
