import os

os.environ["ENV"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import clinic_insights.models  # noqa: E402,F401
from clinic_insights.db import Base, SessionLocal, engine, get_db  # noqa: E402
from clinic_insights.main import create_app  # noqa: E402

pytest_plugins = [
    "tests.fixtures.ai_performance_fixtures",
]


@pytest.fixture(scope="function")
def db():
    """Session on a freshly created schema; tables are dropped afterwards."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Client with db override (webhooks and metrics are unauthenticated)."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
