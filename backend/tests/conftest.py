import os
import tempfile

# Point config at a throwaway database before anything imports precalc.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="precalc-tests-")
os.environ["DATABASE_PATH"] = os.path.join(_TEST_DB_DIR, "test.db")

import pytest  # noqa: E402

from precalc.persistence.interfaces.progress_store import ProgressStore  # noqa: E402


class MemoryProgressStore(ProgressStore):
    """Dict-backed store, behaves like browser local storage."""

    def __init__(self):
        self.items = {}

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        self.items[key] = value

    def remove_item(self, key):
        return self.items.pop(key, None) is not None


@pytest.fixture
def memory_store():
    return MemoryProgressStore()


@pytest.fixture(scope="module")
def client():
    from fastapi.testclient import TestClient

    from precalc.main import app
    from precalc.persistence.db import init_db
    init_db()
    return TestClient(app)
