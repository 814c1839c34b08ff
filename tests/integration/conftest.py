from pathlib import Path
from typing import Generator
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture

from taskboard.config import Settings, get_settings
from taskboard.main import app as main_app


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        DB_USER="taskboard",
        DB_PASS="taskboard",
        STORE_BACKEND="postgres",
        DATABASE_URL=f"sqlite:///{tmp_path / 'taskboard.db'}",
        TASKBOARD_API_KEY=None,
        OTEL_ENABLED=False,
        DELIVERY_TIMEOUT_SECONDS=2.0,
    )


@pytest.fixture(autouse=True)
def patch_settings(test_settings: Settings, mocker: MockerFixture) -> None:
    mocker.patch("taskboard.main.settings", test_settings)


@pytest.fixture
def test_app(test_settings: Settings) -> Generator[FastAPI, None, None]:
    def get_test_settings() -> Settings:
        return test_settings

    main_app.dependency_overrides[get_settings] = get_test_settings
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
def test_client(test_app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(test_app) as client:
        yield client
