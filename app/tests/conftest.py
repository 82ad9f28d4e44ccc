import os
import tempfile
from pathlib import Path

_default_test_secret = "test-jwt-secret-for-pytest-only-0000000000000000"
if len(os.environ.get("JWT_SECRET", "")) < 32:
    os.environ["JWT_SECRET"] = _default_test_secret

os.environ["ENV"] = "test"

_test_db_path = Path(tempfile.gettempdir()) / f"sparc_test_{os.getpid()}.sqlite3"
TEST_DATABASE_URL = os.getenv("SPARC_TEST_DATABASE_URL", f"sqlite:///{_test_db_path}")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

import pytest

from app import database
import app.models  # noqa: F401,E402


def _clear_tables() -> None:
    with database.engine.begin() as conn:
        for table in reversed(database.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture(scope="session", autouse=True)
def _prepare_test_database():
    database.configure_database()
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.engine.dispose()
    if TEST_DATABASE_URL.startswith("sqlite:///") and _test_db_path.exists():
        _test_db_path.unlink()


@pytest.fixture(scope="function", autouse=True)
def _truncate_tables_between_tests():
    _clear_tables()
    yield
    _clear_tables()


@pytest.fixture
def db():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
