"""
Providers router.

Mounts under ``/{locale}/provider`` (prefix declared on the router). The locale
segment is validated against ``SUPPORTED_LOCALES`` and otherwise ignored:
flash messages are returned as opaque keys for the frontend to translate.

Endpoints
---------
GET  /                    — Active providers.
GET  /new                 — Empty form descriptor.
POST /new                 — Create a provider.
GET  /export/csv          — Accounting CSV of active providers.
GET  /{id}/edit           — Form descriptor pre-filled with the provider.
POST /{id}/edit           — Update a provider.
GET  /{id}/delete-token   — Token required by the delete form.
POST /{id}/delete         — Soft delete (deactivate) a provider.
"""

from __future__ import annotations

import io
import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.provider import (
    DeleteRequest,
    DeleteTokenResponse,
    ProviderActionResponse,
    ProviderCreate,
    ProviderFormResponse,
    ProviderResponse,
    ProviderUpdate,
    TypeChoice,
)
from app.services import provider_service
from app.utils.constants import (
    CSV_MEDIA_TYPE,
    FLASH_CREATED,
    FLASH_DELETED,
    FLASH_UPDATED,
    PROVIDER_TYPE_LABELS,
)
from app.utils.security import create_delete_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/{locale}/provider", tags=["Proveedores"])


# ---------------------------------------------------------------------------
# Shared dependencies / helpers
# ---------------------------------------------------------------------------


def valid_locale(locale: str) -> str:
    """Reject locales outside ``SUPPORTED_LOCALES`` with a 404.

    Args:
        locale: First path segment of the request.

    Returns:
        The locale, unchanged.

    Raises:
        HTTPException 404: If the locale is not supported.
    """
    if locale not in get_settings().SUPPORTED_LOCALES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Idioma '{locale}' no soportado.",
        )
    return locale


def _type_choices() -> list[TypeChoice]:
    return [
        TypeChoice(value=value, label=label)
        for value, label in PROVIDER_TYPE_LABELS.items()
    ]


def csv_download_response(file_bytes: bytes) -> StreamingResponse:
    """Wrap the export bytes in a download response."""
    headers = {
        "Content-Disposition": (
            f'attachment; filename="{get_settings().EXPORT_FILENAME}"'
        ),
        "Content-Length": str(len(file_bytes)),
    }
    return StreamingResponse(
        io.BytesIO(file_bytes),
        media_type=CSV_MEDIA_TYPE,
        headers=headers,
    )


# ---------------------------------------------------------------------------
# GET /
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=list[ProviderResponse],
    summary="Listado de proveedores activos",
    responses={404: {"description": "Idioma no soportado."}},
)
def list_providers(
    locale: Annotated[str, Depends(valid_locale)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ProviderResponse]:
    """Return every active provider. Deactivated providers are never listed."""
    providers = provider_service.list_active(db)
    logger.debug("GET /%s/provider: %d records", locale, len(providers))
    return [ProviderResponse.model_validate(p) for p in providers]


# ---------------------------------------------------------------------------
# GET/POST /new
# ---------------------------------------------------------------------------


@router.get(
    "/new",
    response_model=ProviderFormResponse,
    summary="Formulario de alta de proveedor",
)
def new_provider_form(
    locale: Annotated[str, Depends(valid_locale)],
) -> ProviderFormResponse:
    return ProviderFormResponse(
        action=f"/{locale}/provider/new",
        provider=None,
        type_choices=_type_choices(),
    )


@router.post(
    "/new",
    response_model=ProviderActionResponse,
    status_code=201,
    summary="Crear proveedor",
    description=(
        "Registra un nuevo proveedor activo. Las fechas de creación y "
        "modificación se asignan en el servidor."
    ),
    responses={
        201: {"description": "Proveedor creado (flash.created)."},
        409: {"description": "Email o teléfono ya registrados (flash.error_generic)."},
        422: {"description": "Datos del formulario inválidos."},
    },
)
def create_provider(
    locale: Annotated[str, Depends(valid_locale)],
    data: ProviderCreate,
    db: Annotated[Session, Depends(get_db)],
) -> ProviderActionResponse:
    """Create a provider from the validated form payload.

    Args:
        locale: Validated locale segment.
        data: Validated creation payload.
        db: Database session.

    Returns:
        ``flash.created`` and the new provider (HTTP 201).
    """
    logger.info("POST /%s/provider/new email=%s", locale, data.email)
    provider = provider_service.create_provider(db, data)
    return ProviderActionResponse(
        message=FLASH_CREATED,
        provider=ProviderResponse.model_validate(provider),
    )


# ---------------------------------------------------------------------------
# GET /export/csv
# ---------------------------------------------------------------------------


@router.get(
    "/export/csv",
    summary="Exportar proveedores activos a CSV",
    response_class=StreamingResponse,
    responses={200: {"content": {"text/csv": {}}}},
)
def export_csv_localized(
    locale: Annotated[str, Depends(valid_locale)],
    db: Annotated[Session, Depends(get_db)],
) -> StreamingResponse:
    logger.info("GET /%s/provider/export/csv", locale)
    return csv_download_response(provider_service.export_active_csv(db))


# ---------------------------------------------------------------------------
# GET/POST /{id}/edit
# ---------------------------------------------------------------------------


@router.get(
    "/{provider_id}/edit",
    response_model=ProviderFormResponse,
    summary="Formulario de edición de proveedor",
    responses={404: {"description": "Proveedor no encontrado."}},
)
def edit_provider_form(
    locale: Annotated[str, Depends(valid_locale)],
    provider_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> ProviderFormResponse:
    provider = provider_service.get_provider(db, provider_id)
    return ProviderFormResponse(
        action=f"/{locale}/provider/{provider_id}/edit",
        provider=ProviderResponse.model_validate(provider),
        type_choices=_type_choices(),
    )


@router.post(
    "/{provider_id}/edit",
    response_model=ProviderActionResponse,
    summary="Actualizar proveedor",
    responses={
        200: {"description": "Proveedor actualizado (flash.updated)."},
        404: {"description": "Proveedor no encontrado."},
        409: {"description": "Email o teléfono ya registrados (flash.error_generic)."},
        422: {"description": "Datos del formulario inválidos."},
    },
)
def edit_provider(
    locale: Annotated[str, Depends(valid_locale)],
    provider_id: int,
    data: ProviderUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> ProviderActionResponse:
    """Apply the edit form to an existing provider.

    Args:
        locale: Validated locale segment.
        provider_id: Primary key of the provider to modify.
        data: Validated edit payload.
        db: Database session.

    Returns:
        ``flash.updated`` and the updated provider.
    """
    logger.info("POST /%s/provider/%d/edit", locale, provider_id)
    provider = provider_service.update_provider(db, provider_id, data)
    return ProviderActionResponse(
        message=FLASH_UPDATED,
        provider=ProviderResponse.model_validate(provider),
    )


# ---------------------------------------------------------------------------
# GET /{id}/delete-token, POST /{id}/delete
# ---------------------------------------------------------------------------


@router.get(
    "/{provider_id}/delete-token",
    response_model=DeleteTokenResponse,
    summary="Token para el formulario de borrado",
    responses={404: {"description": "Proveedor no encontrado."}},
)
def delete_token(
    locale: Annotated[str, Depends(valid_locale)],
    provider_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> DeleteTokenResponse:
    provider_service.get_provider(db, provider_id)
    return DeleteTokenResponse(
        action=f"/{locale}/provider/{provider_id}/delete",
        token=create_delete_token(provider_id),
    )


@router.post(
    "/{provider_id}/delete",
    response_model=MessageResponse,
    summary="Desactivar proveedor (borrado lógico)",
    description=(
        "Marca el proveedor como inactivo y libera su email y teléfono "
        "añadiendo un sufijo de borrado. Requiere el token emitido por "
        "'/delete-token'. Con CSRF_STRICT desactivado, un token inválido "
        "se ignora y la respuesta es la misma."
    ),
    responses={
        200: {"description": "flash.deleted"},
        403: {"description": "Token inválido (solo con CSRF_STRICT)."},
        404: {"description": "Proveedor no encontrado."},
    },
)
def delete_provider(
    locale: Annotated[str, Depends(valid_locale)],
    provider_id: int,
    db: Annotated[Session, Depends(get_db)],
    body: Annotated[DeleteRequest | None, Body()] = None,
) -> MessageResponse:
    """Soft delete a provider.

    Args:
        locale: Validated locale segment.
        provider_id: Primary key of the provider to deactivate.
        db: Database session.
        body: Delete form with the ``_token`` field.

    Returns:
        ``flash.deleted``, also when the token was rejected unless
        ``CSRF_STRICT`` is enabled.

    Raises:
        HTTPException 403: Token rejected and ``CSRF_STRICT`` enabled.
    """
    logger.info("POST /%s/provider/%d/delete", locale, provider_id)
    token = body.token if body is not None else None
    deleted = provider_service.soft_delete_provider(db, provider_id, token)

    if not deleted and get_settings().CSRF_STRICT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token de borrado inválido.",
        )
    return MessageResponse(message=FLASH_DELETED)
