import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, String, func

from portal.core.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(50), nullable=False)
    password_hash = Column(String(255), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    deleted_at = Column(DateTime, nullable=True)

    # a username can be reused once the previous owner is soft-deleted
    __table_args__ = (
        Index(
            "ix_users_active_username",
            "username",
            unique=True,
            sqlite_where=deleted_at.is_(None),
            postgresql_where=deleted_at.is_(None),
        ),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
