"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request, status

from authcore.application.dtos.auth_dto import (
    AuthResultDTO,
    ClaimsDTO,
    LoginDTO,
    LogoutDTO,
    RefreshTokenDTO,
    RegisterDTO,
    TokenPairDTO,
)
from authcore.application.services.session_orchestrator import SessionOrchestrator
from authcore.domain.services.token_codec import Claims
from authcore.presentation.dependencies import (
    get_bearer_token,
    get_current_claims,
    get_session_orchestrator,
)


router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=AuthResultDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account and receive access and refresh tokens.",
)
async def register(
    dto: RegisterDTO,
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
):
    """
    Raises:
        422 Unprocessable Entity: If the password violates the password policy
        409 Conflict: If the email is already registered
    """
    return await orchestrator.register(dto)


@router.post(
    "/login",
    response_model=AuthResultDTO,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns access and refresh tokens.",
)
async def login(
    dto: LoginDTO,
    request: Request,
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
):
    """
    Authenticate user and receive JWT tokens.

    Attempts are rate-limited per email and per client address.

    Raises:
        401 Unauthorized: If email or password is incorrect
        429 Too Many Requests: If the attempt limit for the window is used up
    """
    client_ip = request.client.host if request.client else None
    return await orchestrator.login(dto.email, dto.password, client_ip=client_ip)


@router.post(
    "/refresh",
    response_model=TokenPairDTO,
    status_code=status.HTTP_200_OK,
    summary="Refresh tokens",
    description="Exchange the current refresh token for a new access/refresh pair.",
)
async def refresh_token(
    dto: RefreshTokenDTO,
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
):
    """
    Rotate the refresh token.

    The presented refresh token stops working as soon as this call
    succeeds. Do not retry a failed or interrupted refresh with the same
    token; log in again instead.

    Raises:
        401 Unauthorized: If the refresh token is invalid, expired or already used
    """
    return await orchestrator.refresh(dto.refresh_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Revoke the Bearer access token and the given refresh token.",
)
async def logout(
    dto: LogoutDTO,
    access_token: str = Depends(get_bearer_token),
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
) -> None:
    """
    Raises:
        401 Unauthorized: If either token is invalid
        503 Service Unavailable: If the session could not be fully revoked
    """
    await orchestrator.logout(access_token, dto.refresh_token)


@router.post(
    "/logout-all",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout from all devices",
    description="Revoke the Bearer access token and whatever refresh token is on record.",
)
async def logout_all(
    access_token: str = Depends(get_bearer_token),
    orchestrator: SessionOrchestrator = Depends(get_session_orchestrator),
) -> None:
    await orchestrator.logout_all(access_token)


@router.get(
    "/me",
    response_model=ClaimsDTO,
    status_code=status.HTTP_200_OK,
    summary="Current session",
    description="Return the verified claims of the Bearer access token.",
)
async def get_me(claims: Claims = Depends(get_current_claims)):
    """
    Raises:
        401 Unauthorized: If the token is invalid, expired or revoked
    """
    return ClaimsDTO.from_claims(claims)
