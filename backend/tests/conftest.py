"""
Point the app at a throwaway SQLite file before anything imports the
settings, create the schema once and empty every table between tests.
"""
import os
import tempfile
import uuid

_tmpdir = tempfile.mkdtemp(prefix="liftlog-tests-")
os.environ["DB_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"

import pytest

from liftlog.db import Base, SessionLocal, engine
from liftlog import models  # noqa: F401
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.security import create_access_token


@pytest.fixture(scope="session", autouse=True)
def schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    return uuid.uuid4()


@pytest.fixture
def exercises(db):
    repo = ExerciseRepository(db)
    created = {name: repo.create(name=name) for name in ("Squat", "Bench Press", "Deadlift")}
    db.commit()
    return created


@pytest.fixture
def auth_headers():
    def make(sub=None):
        token = create_access_token(str(sub or uuid.uuid4()))
        return {"Authorization": f"Bearer {token}"}
    return make
