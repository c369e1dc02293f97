"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_account_service
from src.schemas.envelope import DataEnvelope, ErrorEnvelope, TokenEnvelope
from src.schemas.user import UserLogin, UserRegister, UserResponse
from src.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=DataEnvelope[UserResponse],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorEnvelope},
        409: {"model": ErrorEnvelope},
        500: {"model": ErrorEnvelope},
    },
)
async def register(
    user_data: UserRegister,
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Register a new user."""
    user = await service.register(user_data)
    return DataEnvelope(data=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=TokenEnvelope,
    responses={
        400: {"model": ErrorEnvelope},
        401: {"model": ErrorEnvelope},
        500: {"model": ErrorEnvelope},
    },
)
async def login(
    credentials: UserLogin,
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Login with email and password."""
    token = await service.login(credentials)
    return TokenEnvelope(token=token)
