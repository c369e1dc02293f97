"""Pydantic schemas for API requests and responses."""

from src.schemas.envelope import DataEnvelope, ErrorEnvelope, MessageEnvelope, TokenEnvelope
from src.schemas.user import UserLogin, UserRegister, UserResponse, UserUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "DataEnvelope",
    "MessageEnvelope",
    "TokenEnvelope",
    "ErrorEnvelope",
]
