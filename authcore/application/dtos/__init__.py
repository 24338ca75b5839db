"""Data Transfer Objects for application layer."""

from authcore.application.dtos.auth_dto import (
    AuthResultDTO,
    ClaimsDTO,
    LoginDTO,
    LogoutDTO,
    RefreshTokenDTO,
    RegisterDTO,
    TokenPairDTO,
)
from authcore.application.dtos.user_dto import UserDTO

__all__ = [
    "AuthResultDTO",
    "ClaimsDTO",
    "LoginDTO",
    "LogoutDTO",
    "RefreshTokenDTO",
    "RegisterDTO",
    "TokenPairDTO",
    "UserDTO",
]
