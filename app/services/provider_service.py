"""
Provider lifecycle service layer.

All database access for the ``/{locale}/provider`` endpoints lives here.
Functions receive a SQLAlchemy ``Session`` and return ORM objects (or the
export bytes) ready for the router to serialise.

Design notes
------------
- Timestamps are stamped here, explicitly, from a single ``now`` per
  operation: ``created_at == updated_at`` right after creation, and only
  ``updated_at`` moves afterwards.
- Every write is one in-memory mutation followed by one ``commit``. On a
  database error the session is rolled back so no partial change survives,
  the technical detail is logged, and an ``HTTPException`` with the generic
  flash key is raised. No retries.
- Soft delete frees the unique ``email``/``phone`` values by appending a
  deletion marker. Deleting twice appends twice: the string rewrite is not
  idempotent.
- An invalid delete token is a silent no-op here; the router decides
  whether to surface it.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.exporters.csv_exporter import CsvExporter
from app.models.provider import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    Provider,
)
from app.schemas.provider import ProviderCreate, ProviderUpdate
from app.utils.constants import (
    CSV_DATE_FORMAT,
    CSV_HEADERS,
    DELETED_NAME_SUFFIX,
    DELETED_PHONE_KEEP,
    DELETION_MARKER_LENGTH,
    DELETION_MARKER_PREFIX,
    FLASH_ERROR_GENERIC,
)
from app.utils.security import verify_delete_token

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime.now()


def _commit(db: Session, action: str) -> None:
    """Commit the pending unit of work or roll it back and raise.

    Args:
        db: Active SQLAlchemy session holding the pending changes.
        action: Short label for the log line, e.g. ``"create id=None"``.

    Raises:
        HTTPException 409: Integrity violation (duplicate email/phone).
        HTTPException 500: Any other database error.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.error("Error de integridad al %s: %s", action, exc.orig)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=FLASH_ERROR_GENERIC,
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error de base de datos al %s", action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=FLASH_ERROR_GENERIC,
        ) from exc


def _append_suffix(value: str, suffix: str, max_length: int) -> str:
    """Append *suffix*, trimming the original value so the result fits."""
    return value[: max(max_length - len(suffix), 0)] + suffix


def build_deletion_marker() -> str:
    """Return a fresh deletion marker, e.g. ``"-DEL-3f9a1c2b7d4e0"``."""
    return DELETION_MARKER_PREFIX + uuid.uuid4().hex[:DELETION_MARKER_LENGTH]


def mark_deleted_phone(phone: str, marker: str) -> str:
    """Rewrite a phone number for a deactivated provider.

    Keeps at most the first 10 characters of the original number, appends
    the marker, then cuts the whole string to the column limit. The marker
    itself may lose its tail; that is accepted so that some original digits
    stay visible for audit.

    Args:
        phone: Current phone value (any length, possibly empty).
        marker: Deletion marker from ``build_deletion_marker``.

    Returns:
        A string of at most 20 characters.
    """
    return (phone[:DELETED_PHONE_KEEP] + marker)[:PHONE_MAX_LENGTH]


# ---------------------------------------------------------------------------
# Public service functions — read operations
# ---------------------------------------------------------------------------


def list_active(db: Session) -> list[Provider]:
    """Return every active provider ordered by id.

    Args:
        db: Active SQLAlchemy session.

    Returns:
        Providers with ``active`` true; inactive rows are never included.
    """
    providers = (
        db.query(Provider)
        .filter(Provider.active.is_(True))
        .order_by(Provider.id)
        .all()
    )
    logger.debug("list_active: %d records", len(providers))
    return providers


def get_provider(db: Session, provider_id: int) -> Provider:
    """Load one provider by primary key, active or not.

    Raises:
        HTTPException 404: If no provider with the given ID exists.
    """
    provider: Provider | None = (
        db.query(Provider).filter(Provider.id == provider_id).first()
    )
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Proveedor con ID {provider_id} no encontrado.",
        )
    return provider


# ---------------------------------------------------------------------------
# Public service functions — write operations
# ---------------------------------------------------------------------------


def create_provider(db: Session, data: ProviderCreate) -> Provider:
    """Register a new, active provider.

    Args:
        db: Active SQLAlchemy session.
        data: Validated creation payload from the HTTP request body.

    Returns:
        The newly persisted ``Provider`` (with ``id`` set).

    Raises:
        HTTPException 409: Email or phone already used by another provider.
        HTTPException 500: Any other database error.
    """
    now = _now()
    provider = Provider(
        name=data.name,
        email=data.email,
        phone=data.phone,
        type=data.type.value if data.type is not None else None,
        active=True,
        created_at=now,
        updated_at=now,
    )

    db.add(provider)
    _commit(db, f"crear proveedor email={data.email}")
    db.refresh(provider)

    logger.info("create_provider: id=%d email=%s", provider.id, provider.email)
    return provider


def update_provider(
    db: Session,
    provider_id: int,
    data: ProviderUpdate,
) -> Provider:
    """Apply the edit form to an existing provider.

    Only fields present in the payload are written. ``created_at`` is
    never touched; ``updated_at`` is restamped.

    Args:
        db: Active SQLAlchemy session.
        provider_id: Primary key of the provider to modify.
        data: Validated edit payload.

    Returns:
        The updated and refreshed ``Provider``.

    Raises:
        HTTPException 404: Provider not found.
        HTTPException 409: Email or phone already used by another provider.
        HTTPException 500: Any other database error.
    """
    provider = get_provider(db, provider_id)

    update_data = data.model_dump(exclude_unset=True, mode="json")
    if update_data.get("active") is None:
        update_data.pop("active", None)
    for field, value in update_data.items():
        setattr(provider, field, value)
    provider.updated_at = _now()

    _commit(db, f"editar proveedor ID {provider_id}")
    db.refresh(provider)

    logger.info(
        "update_provider: id=%d fields=%s", provider_id, list(update_data.keys())
    )
    return provider


def soft_delete_provider(
    db: Session,
    provider_id: int,
    token: str | None,
) -> bool:
    """Deactivate a provider if the delete token is valid.

    On success the provider is marked inactive and its ``name``, ``email``
    and ``phone`` are rewritten so the original email and phone can be
    registered again by a new provider. The row itself stays in the table.

    Args:
        db: Active SQLAlchemy session.
        provider_id: Primary key of the provider to deactivate.
        token: Delete token submitted with the form.

    Returns:
        ``True`` if the provider was deactivated, ``False`` if the token was
        rejected (nothing is written in that case).

    Raises:
        HTTPException 404: Provider not found.
        HTTPException 500: Database error while saving.
    """
    provider = get_provider(db, provider_id)

    if not verify_delete_token(token, provider_id):
        logger.warning(
            "soft_delete_provider: token inválido para proveedor ID %d", provider_id
        )
        return False

    marker = build_deletion_marker()
    provider.active = False
    provider.name = _append_suffix(provider.name, DELETED_NAME_SUFFIX, NAME_MAX_LENGTH)
    provider.email = _append_suffix(provider.email, marker, EMAIL_MAX_LENGTH)
    provider.phone = mark_deleted_phone(provider.phone, marker)
    provider.updated_at = _now()

    _commit(db, f"desactivar proveedor ID {provider_id}")

    logger.info("soft_delete_provider: id=%d marker=%s", provider_id, marker)
    return True


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def _format_type(value: str | None) -> str:
    # First character upper-cased only: "hotel" -> "Hotel".
    if not value:
        return ""
    return value[:1].upper() + value[1:]


def export_active_csv(db: Session) -> bytes:
    """Build the accounting CSV of all active providers.

    Args:
        db: Active SQLAlchemy session.

    Returns:
        UTF-8 BOM followed by the semicolon-delimited CSV, header row
        ``Nombre;Email;Teléfono;Tipo;Fecha de Registro`` and one row per
        active provider in ``list_active`` order.
    """
    rows = [
        [
            p.name,
            p.email,
            p.phone,
            _format_type(p.type),
            p.created_at.strftime(CSV_DATE_FORMAT),
        ]
        for p in list_active(db)
    ]

    exporter = CsvExporter()
    exporter.add_data_table(CSV_HEADERS, rows)
    file_bytes = exporter.finalize()

    logger.info("export_active_csv: %d rows, %d bytes", len(rows), len(file_bytes))
    return file_bytes
