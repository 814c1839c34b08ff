from datetime import datetime
from typing import Any
from sqlalchemy import JSON, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

from taskboard.config import get_settings


settings = get_settings()

Base = declarative_base()


class UserModel(Base):
    __tablename__ = settings.USER_STORE_NAMESPACE

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    document: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __init__(
        self,
        id: str,
        email: str,
        name: str,
        document: dict[str, Any],
        created_at: datetime,
    ):
        self.id = id
        self.email = email
        self.name = name
        self.document = document
        self.created_at = created_at
