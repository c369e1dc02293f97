"""Uniform ``{status, data|message|token}`` response envelopes."""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class DataEnvelope(BaseModel, Generic[T]):
    status: Literal["success"] = "success"
    data: T


class MessageEnvelope(BaseModel):
    """Success without a payload, e.g. after a deletion."""

    status: Literal["success"] = "success"
    message: str
    data: None = None


class TokenEnvelope(BaseModel):
    """Login response carrying the bearer token."""

    status: Literal["success"] = "success"
    token: str


class ErrorEnvelope(BaseModel):
    """Failure body, documented for OpenAPI; produced by the exception handlers."""

    status: Literal["fail", "error"]
    message: str
