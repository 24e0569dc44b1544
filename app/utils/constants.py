"""
Application-wide constants for the provider administration backend.

Defines domain enumerations, flash message keys, and the fixed strings
used by the soft-delete and CSV export workflows.
"""

from enum import Enum
from typing import Final

# ---------------------------------------------------------------------------
# Provider types
# ---------------------------------------------------------------------------


class ProviderType(str, Enum):
    HOTEL = "hotel"
    CRUCERO = "crucero"
    ESQUI = "esqui"
    PARQUE = "parque"


# Labels shown in the create/edit form selector
PROVIDER_TYPE_LABELS: Final[dict[str, str]] = {
    ProviderType.HOTEL.value: "Hotel",
    ProviderType.CRUCERO.value: "Crucero",
    ProviderType.ESQUI.value: "Estación de esquí",
    ProviderType.PARQUE.value: "Parque temático",
}

# ---------------------------------------------------------------------------
# Flash message keys (translated by the frontend, never here)
# ---------------------------------------------------------------------------

FLASH_CREATED: Final[str] = "flash.created"
FLASH_UPDATED: Final[str] = "flash.updated"
FLASH_DELETED: Final[str] = "flash.deleted"
FLASH_ERROR_GENERIC: Final[str] = "flash.error_generic"

# ---------------------------------------------------------------------------
# Soft delete
# ---------------------------------------------------------------------------

DELETED_NAME_SUFFIX: Final[str] = " (Borrado)"
DELETION_MARKER_PREFIX: Final[str] = "-DEL-"
DELETION_MARKER_LENGTH: Final[int] = 13      # hex chars after the prefix
DELETED_PHONE_KEEP: Final[int] = 10          # original digits kept for audit

DELETE_TOKEN_PURPOSE: Final[str] = "delete"

# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

CSV_DELIMITER: Final[str] = ";"
CSV_HEADERS: Final[list[str]] = [
    "Nombre",
    "Email",
    "Teléfono",
    "Tipo",
    "Fecha de Registro",
]
CSV_DATE_FORMAT: Final[str] = "%d/%m/%Y %H:%M"
CSV_MEDIA_TYPE: Final[str] = "text/csv; charset=utf-8"
