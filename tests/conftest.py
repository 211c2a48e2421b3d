import os
from datetime import datetime, timedelta

# the app module builds its engine at import time
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import main
from db import Base, get_db
from logic.quiz_store import QuizStore
from logic.store import LearnerState
from logic.upload_store import UploadStore


class FakeClock:
    def __init__(self, start=datetime(2024, 5, 10, 9, 30)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def learner(clock):
    return LearnerState(clock=clock)


@pytest.fixture
def quiz_store(tmp_path):
    return QuizStore(str(tmp_path / "data" / "quizzes.json"))


@pytest.fixture
def upload_store(tmp_path):
    return UploadStore(str(tmp_path / "data" / "uploads.json"), str(tmp_path / "public"))


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def client(learner, quiz_store, upload_store, session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    rounds = {}
    runs = {}
    main.app.dependency_overrides[get_db] = override_get_db
    main.app.dependency_overrides[main.get_learner_state] = lambda: learner
    main.app.dependency_overrides[main.get_quiz_store] = lambda: quiz_store
    main.app.dependency_overrides[main.get_upload_store] = lambda: upload_store
    main.app.dependency_overrides[main.get_game_rounds] = lambda: rounds
    main.app.dependency_overrides[main.get_lesson_runs] = lambda: runs
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()
