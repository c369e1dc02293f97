"""User directory API endpoints. Every route requires a bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_account_service, get_current_subject
from src.schemas.envelope import DataEnvelope, ErrorEnvelope, MessageEnvelope
from src.schemas.user import UserRegister, UserResponse, UserUpdate
from src.services.accounts import AccountService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_current_subject)],
    responses={
        401: {"model": ErrorEnvelope},
        403: {"model": ErrorEnvelope},
        500: {"model": ErrorEnvelope},
    },
)


@router.get("", response_model=DataEnvelope[list[UserResponse]])
async def list_users(
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Get all users."""
    users = await service.list_users()
    return DataEnvelope(data=[UserResponse.model_validate(user) for user in users])


@router.get(
    "/{user_id}",
    response_model=DataEnvelope[UserResponse],
    responses={400: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def get_user(
    user_id: str,
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Get a specific user."""
    user = await service.get_user(user_id)
    return DataEnvelope(data=UserResponse.model_validate(user))


@router.post(
    "",
    response_model=DataEnvelope[UserResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorEnvelope}, 409: {"model": ErrorEnvelope}},
)
async def create_user(
    user_data: UserRegister,
    current_subject: Annotated[int, Depends(get_current_subject)],
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Create a user on behalf of the authenticated caller."""
    user = await service.create_user(user_data, created_by=current_subject)
    return DataEnvelope(data=UserResponse.model_validate(user))


@router.put(
    "/{user_id}",
    response_model=DataEnvelope[UserResponse],
    responses={
        400: {"model": ErrorEnvelope},
        404: {"model": ErrorEnvelope},
        409: {"model": ErrorEnvelope},
    },
)
async def update_user(
    user_id: str,
    service: Annotated[AccountService, Depends(get_account_service)],
    user_data: UserUpdate | None = None,
):
    """Update a user. Fields left out of the body keep their values."""
    user = await service.update_user(user_id, user_data or UserUpdate())
    return DataEnvelope(data=UserResponse.model_validate(user))


@router.delete(
    "/{user_id}",
    response_model=MessageEnvelope,
    responses={400: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
)
async def delete_user(
    user_id: str,
    service: Annotated[AccountService, Depends(get_account_service)],
):
    """Delete a user."""
    await service.delete_user(user_id)
    return MessageEnvelope(message="User deleted")
