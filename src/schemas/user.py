"""User request and response schemas.

Wire names follow the public API (``nombre``, ``apellido``, ``contrasena``);
attribute names follow the model. Request fields are all optional so that
missing values are reported by the validation rules as 400 failures.
"""

from pydantic import BaseModel, ConfigDict, Field


class UserRegister(BaseModel):
    """Registration request, also used by authenticated creation."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, alias="nombre", max_length=255)
    surname: str | None = Field(None, alias="apellido", max_length=255)
    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, alias="contrasena", max_length=128)


class UserLogin(BaseModel):
    """User login request."""

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, alias="contrasena", max_length=128)


class UserUpdate(BaseModel):
    """Partial update; only the fields the client sent are applied."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, alias="nombre", max_length=255)
    surname: str | None = Field(None, alias="apellido", max_length=255)
    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, alias="contrasena", max_length=128)

    def changes(self) -> dict:
        """Fields explicitly present in the request, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    """User information response. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str = Field(alias="nombre")
    surname: str | None = Field(None, alias="apellido")
    email: str
