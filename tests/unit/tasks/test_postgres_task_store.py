from datetime import datetime, timedelta
from pathlib import Path
from typing import Any
import pytest

from taskboard.common.exceptions import StorageError
from taskboard.tasks.store.postgres.model import Base
from taskboard.tasks.store.postgres.store import PostgresTaskStore

FIRST_ID = "11111111-1111-4111-8111-111111111111"
SECOND_ID = "22222222-2222-4222-8222-222222222222"
TEST_TIMESTAMP = datetime.fromisoformat("2024-01-01T12:00:00")
UPDATED_TIMESTAMP = datetime.fromisoformat("2024-01-01T13:00:00")


@pytest.fixture
def test_database_url(tmp_path: Path) -> str:
    db_path: Path = tmp_path / "test_tasks.db"
    return f"sqlite:///{db_path}"


@pytest.fixture
def task_store(test_database_url: str) -> PostgresTaskStore:
    return PostgresTaskStore(database_url=test_database_url)


@pytest.fixture
def task_fields() -> dict[str, Any]:
    return {
        "title": "A",
        "description": "d",
        "email": "x@y.com",
        "status": "todo",
    }


def test_insert_and_list_tasks(
    task_store: PostgresTaskStore, task_fields: dict[str, Any]
) -> None:
    task_store.insert_task(SECOND_ID, {**task_fields, "title": "B"}, TEST_TIMESTAMP)
    task_store.insert_task(
        FIRST_ID, task_fields, TEST_TIMESTAMP - timedelta(minutes=5)
    )

    tasks = task_store.list_tasks()

    assert [task.id for task in tasks] == [FIRST_ID, SECOND_ID]
    assert tasks[0].title == "A"
    assert tasks[1].title == "B"


def test_list_tasks_empty(task_store: PostgresTaskStore) -> None:
    assert task_store.list_tasks() == []


def test_list_tasks_by_email(
    task_store: PostgresTaskStore, task_fields: dict[str, Any]
) -> None:
    task_store.insert_task(FIRST_ID, task_fields, TEST_TIMESTAMP)
    task_store.insert_task(
        SECOND_ID, {**task_fields, "email": "other@y.com"}, TEST_TIMESTAMP
    )

    tasks = task_store.list_tasks(email="other@y.com")

    assert [task.id for task in tasks] == [SECOND_ID]


def test_extra_fields_pass_through(
    task_store: PostgresTaskStore, task_fields: dict[str, Any]
) -> None:
    task_store.insert_task(
        FIRST_ID, {**task_fields, "tags": ["home"], "priority": 3}, TEST_TIMESTAMP
    )

    [task] = task_store.list_tasks()

    assert task.model_dump() == {
        "id": FIRST_ID,
        **task_fields,
        "tags": ["home"],
        "priority": 3,
    }


def test_replace_task(
    task_store: PostgresTaskStore, task_fields: dict[str, Any]
) -> None:
    task_store.insert_task(FIRST_ID, {**task_fields, "priority": 3}, TEST_TIMESTAMP)

    result = task_store.replace_task(
        FIRST_ID, {**task_fields, "status": "done"}, UPDATED_TIMESTAMP
    )

    assert result.matched_count == 1
    assert result.modified_count == 1
    [task] = task_store.list_tasks()
    assert task.model_dump() == {"id": FIRST_ID, **task_fields, "status": "done"}


def test_replace_task_not_found(
    task_store: PostgresTaskStore, task_fields: dict[str, Any]
) -> None:
    result = task_store.replace_task(FIRST_ID, task_fields, UPDATED_TIMESTAMP)

    assert result.matched_count == 0
    assert result.modified_count == 0


def test_update_task_merges_fields(
    task_store: PostgresTaskStore, task_fields: dict[str, Any]
) -> None:
    task_store.insert_task(FIRST_ID, {**task_fields, "priority": 3}, TEST_TIMESTAMP)

    result = task_store.update_task(
        FIRST_ID, {"status": "doing", "email": "new@y.com"}, UPDATED_TIMESTAMP
    )

    assert result.modified_count == 1
    assert task_store.list_tasks(email="x@y.com") == []
    [task] = task_store.list_tasks(email="new@y.com")
    assert task.status == "doing"
    assert task.title == "A"
    assert task.model_dump()["priority"] == 3


def test_update_task_unchanged(
    task_store: PostgresTaskStore, task_fields: dict[str, Any]
) -> None:
    task_store.insert_task(FIRST_ID, task_fields, TEST_TIMESTAMP)

    result = task_store.update_task(FIRST_ID, {"status": "todo"}, UPDATED_TIMESTAMP)

    assert result.matched_count == 1
    assert result.modified_count == 0


def test_delete_task(
    task_store: PostgresTaskStore, task_fields: dict[str, Any]
) -> None:
    task_store.insert_task(FIRST_ID, task_fields, TEST_TIMESTAMP)

    assert task_store.delete_task(FIRST_ID) == 1
    assert task_store.delete_task(FIRST_ID) == 0
    assert task_store.list_tasks() == []


def test_ping(task_store: PostgresTaskStore) -> None:
    task_store.ping()


def test_database_errors_become_storage_errors(
    task_store: PostgresTaskStore,
) -> None:
    Base.metadata.drop_all(task_store.engine)

    with pytest.raises(StorageError, match="Failed to fetch tasks"):
        task_store.list_tasks()
