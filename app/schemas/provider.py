"""
Pydantic v2 schemas for the Provider module.

The request schemas play the role of the form validator: FastAPI rejects
invalid payloads with HTTP 422 before any service function runs, so the
service only ever sees validated values. Response schemas enable ORM mode
(``from_attributes=True``) so ``Provider`` rows serialise directly.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.provider import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
)
from app.utils.constants import ProviderType


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class ProviderCreate(BaseModel):
    """Payload of the "new provider" form.

    ``active`` is not accepted here: every new provider starts active.
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Nombre del proveedor, ej. 'Hoteles ViajesParaTi'.",
    )
    email: EmailStr = Field(..., description="Correo electrónico de contacto.")
    phone: str = Field(
        ...,
        min_length=1,
        max_length=PHONE_MAX_LENGTH,
        description="Teléfono de contacto, ej. '612345678'.",
    )
    type: ProviderType | None = Field(
        default=None,
        description="Tipo de proveedor: hotel, crucero, esqui o parque.",
    )

    @field_validator("email")
    @classmethod
    def email_fits_column(cls, value: str) -> str:
        if len(value) > EMAIL_MAX_LENGTH:
            raise ValueError(
                f"El email no puede superar {EMAIL_MAX_LENGTH} caracteres."
            )
        return value

    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Acme",
                "email": "a@acme.com",
                "phone": "6123456789",
                "type": "hotel",
            }
        },
    )


class ProviderUpdate(ProviderCreate):
    """Payload of the "edit provider" form.

    Same fields as creation plus ``active``. Only fields present in the
    payload are written; an explicit ``"type": null`` clears the type.
    """

    active: bool | None = Field(
        default=None,
        description="Estado activo. Omitir para no modificarlo.",
    )


class DeleteRequest(BaseModel):
    """Body of the delete form: the token issued by ``/delete-token``."""

    token: str | None = Field(default=None, alias="_token")

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ProviderResponse(BaseModel):
    """Public representation of a provider."""

    id: int
    name: str
    email: str
    phone: str
    type: str | None = None
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProviderActionResponse(BaseModel):
    """Result of a successful create or edit: flash key plus the resource."""

    message: str
    provider: ProviderResponse


class TypeChoice(BaseModel):
    value: str
    label: str


class ProviderFormResponse(BaseModel):
    """Everything the frontend needs to render the create/edit modal.

    Attributes:
        action: URL the form must be POSTed to.
        provider: Current values when editing; ``None`` for a new provider.
        type_choices: Selector options, value plus human label.
    """

    action: str
    provider: ProviderResponse | None = None
    type_choices: list[TypeChoice]


class DeleteTokenResponse(BaseModel):
    """Delete token bound to one provider, plus the URL it is valid for."""

    action: str
    token: str
