from datetime import datetime
from typing import Any
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import SQLAlchemyError

from taskboard.common.decorators import raise_storage_error
from taskboard.tasks.schemas import Task, TaskUpdateResult, map_task
from taskboard.tasks.store.base import TaskStore
from taskboard.tasks.store.postgres.model import Base, TaskModel


class PostgresTaskStore(TaskStore):
    def __init__(self, database_url: str):
        self.engine = create_engine(database_url)
        self.Session = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    @raise_storage_error("insert task", SQLAlchemyError)
    def insert_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> Task:
        with self.Session() as session:
            task = TaskModel(
                id=task_id,
                email=fields["email"],
                document=dict(fields),
                created_at=timestamp,
                updated_at=timestamp,
            )

            try:
                session.add(task)
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise

            return map_task(task_id, fields)

    @raise_storage_error("fetch tasks", SQLAlchemyError)
    def list_tasks(self, email: str | None = None) -> list[Task]:
        with self.Session() as session:
            query = session.query(TaskModel)
            if email:
                query = query.filter_by(email=email)

            tasks = query.order_by(TaskModel.created_at, TaskModel.id).all()
            return [map_task(task.id, task.document) for task in tasks]

    def _write_document(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime, merge: bool
    ) -> TaskUpdateResult:
        with self.Session() as session:
            task = session.query(TaskModel).filter_by(id=task_id).first()

            if not task:
                return TaskUpdateResult(matched_count=0, modified_count=0)

            document = {**task.document, **fields} if merge else dict(fields)
            if document == task.document:
                return TaskUpdateResult(matched_count=1, modified_count=0)

            # JSON columns are only flushed when reassigned
            task.document = document
            task.email = document.get("email", task.email)
            task.updated_at = timestamp

            try:
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise

            return TaskUpdateResult(matched_count=1, modified_count=1)

    @raise_storage_error("replace task", SQLAlchemyError)
    def replace_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> TaskUpdateResult:
        return self._write_document(task_id, fields, timestamp, merge=False)

    @raise_storage_error("update task", SQLAlchemyError)
    def update_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> TaskUpdateResult:
        return self._write_document(task_id, fields, timestamp, merge=True)

    @raise_storage_error("delete task", SQLAlchemyError)
    def delete_task(self, task_id: str) -> int:
        with self.Session() as session:
            try:
                deleted = session.query(TaskModel).filter_by(id=task_id).delete()
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise

            return deleted

    @raise_storage_error("reach the database", SQLAlchemyError)
    def ping(self) -> None:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
