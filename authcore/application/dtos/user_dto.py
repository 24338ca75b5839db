"""User DTOs for application layer using Pydantic."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from authcore.domain.entities.user import User, UserRole


class UserDTO(BaseModel):
    """DTO for returning user data to presentation layer. Never carries the hash."""

    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        """
        Convert a PERSISTED domain entity to DTO.

        Args:
            user: User domain entity (must be persisted)

        Returns:
            UserDTO instance

        Raises:
            ValueError: If the entity is not persisted (missing id, created_at, or updated_at)
        """
        if user.id is None or user.created_at is None or user.updated_at is None:
            raise ValueError(
                "Cannot create UserDTO from non-persisted entity. "
                "Ensure the entity has been saved via repository before converting to DTO."
            )

        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
