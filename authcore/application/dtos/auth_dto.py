"""Authentication DTOs for the application layer."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

from authcore.application.dtos.user_dto import UserDTO
from authcore.domain.services.token_codec import Claims


def strip_whitespace(v: str | None) -> str | None:
    """Strip whitespace from string values."""
    return v.strip() if isinstance(v, str) else v


class RegisterDTO(BaseModel):
    """
    DTO for account registration.

    Only the shape is checked here. Password policy is enforced by
    CredentialValidator so the caller gets every violation at once.
    """

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")
    first_name: Annotated[str, BeforeValidator(strip_whitespace), Field(max_length=100)] = ""
    last_name: Annotated[str, BeforeValidator(strip_whitespace), Field(max_length=100)] = ""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "email": "user@example.com",
                    "password": "Str0ng!Passw0rd",
                    "first_name": "Ada",
                    "last_name": "Lovelace",
                }
            ]
        }
    )


class LoginDTO(BaseModel):
    """DTO for user login request."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"email": "user@example.com", "password": "Str0ng!Passw0rd"}]
        }
    )


class RefreshTokenDTO(BaseModel):
    """DTO for refresh token request."""

    refresh_token: str = Field(..., min_length=1, description="JWT refresh token")


class LogoutDTO(BaseModel):
    """DTO for logout request. The access token comes from the Authorization header."""

    refresh_token: str = Field(..., min_length=1, description="JWT refresh token")


class TokenPairDTO(BaseModel):
    """DTO for a freshly issued token pair."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class AuthResultDTO(TokenPairDTO):
    """DTO returned by register and login: the user plus a token pair."""

    user: UserDTO


class ClaimsDTO(BaseModel):
    """DTO exposing verified access-token claims."""

    subject_id: str
    email: str
    role: str | None
    token_id: str
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def from_claims(cls, claims: Claims) -> "ClaimsDTO":
        return cls(
            subject_id=claims.subject_id,
            email=claims.email,
            role=claims.role,
            token_id=claims.token_id,
            issued_at=claims.issued_at,
            expires_at=claims.expires_at,
        )
