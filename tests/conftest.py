import os
import sys
import tempfile

# Ensure Python path includes project root for `import planner`
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Test environment: file-backed SQLite, memory calendar store, eager Celery
_DB_PATH = os.path.join(tempfile.gettempdir(), f"planner-test-{os.getpid()}.sqlite3")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_DB_PATH}")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("CALENDAR_STORE", "memory")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import pytest  # noqa: E402

from planner.workers.tasks import celery_app  # noqa: E402

celery_app.conf.task_always_eager = True
celery_app.conf.task_eager_propagates = True


@pytest.fixture
def memory_store():
    from planner.core.calendar.memory import InMemoryCalendarStore
    return InMemoryCalendarStore()
