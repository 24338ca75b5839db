"""Repository implementations using SQLAlchemy."""

from authcore.infrastructure.repositories.user_repository_impl import UserRepository

__all__ = ["UserRepository"]
