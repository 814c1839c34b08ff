from datetime import datetime
from typing import Any
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskboard.common.decorators import raise_storage_error
from taskboard.common.exceptions import ConflictError, ResourceType
from taskboard.users.schemas import User, map_user
from taskboard.users.store.base import UserStore
from taskboard.users.store.postgres.model import Base, UserModel


class PostgresUserStore(UserStore):
    def __init__(self, database_url: str):
        self.engine = create_engine(database_url)
        self.Session = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    @raise_storage_error("fetch user", SQLAlchemyError)
    def get_user_by_email(self, email: str) -> User | None:
        with self.Session() as session:
            user = session.query(UserModel).filter_by(email=email).first()

            if not user:
                return None

            return map_user(user.id, user.document)

    @raise_storage_error("create user", SQLAlchemyError)
    def create_user(
        self, user_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> User:
        with self.Session() as session:
            user = UserModel(
                id=user_id,
                email=fields["email"],
                name=fields["name"],
                document=dict(fields),
                created_at=timestamp,
            )

            try:
                session.add(user)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ConflictError(ResourceType.USER, fields["email"]) from e
            except SQLAlchemyError:
                session.rollback()
                raise

            return map_user(user_id, fields)
