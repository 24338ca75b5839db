"""User ORM model - infrastructure layer SQLAlchemy mapping."""

from datetime import datetime

from sqlalchemy import String, func
from sqlalchemy.orm import Mapped, mapped_column

from authcore.domain.entities.user import User, UserRole
from authcore.infrastructure.persistence.database import Base


class UserModel(Base):
    """
    SQLAlchemy ORM model for users table.

    The domain layer never imports this class. Emails are stored in
    normalized (trimmed, lower-case) form, so the unique index is
    effectively case-insensitive.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    role: Mapped[str] = mapped_column(
        String(32), nullable=False, default=UserRole.FREE_USER.value
    )

    # Authentication
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        insert_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        insert_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"UserModel(id={self.id!r}, email={self.email!r}, role={self.role!r})"

    def to_entity(self) -> User:
        """Convert ORM model to domain entity."""
        return User(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            role=UserRole(self.role),
            password_hash=self.password_hash,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
