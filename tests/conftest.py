"""Shared test fixtures for TaskBoard tests."""

import pytest

from taskboard.board import TaskBoard
from taskboard.config import Settings
from taskboard.server import create_app
from taskboard.store import TaskStore

from .fakes import FakeTaskClient


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "tasks.db")


@pytest.fixture
def store(db_path):
    return TaskStore(db_path)


@pytest.fixture
def settings(db_path):
    return Settings(db_path=db_path)


@pytest.fixture
def app(settings, store):
    app = create_app(settings, store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def http(app):
    return app.test_client()


@pytest.fixture
def client():
    return FakeTaskClient()


@pytest.fixture
def board(client):
    return TaskBoard(client)
