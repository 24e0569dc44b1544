"""
Shared Pydantic v2 schemas reused across multiple modules.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Generic message envelope for operations that do not return a resource.

    Returned by write operations when the caller only needs a confirmation,
    not the full updated resource. ``message`` carries an opaque flash key
    (``flash.deleted``, ``flash.error_generic``...) that the frontend
    translates.

    Attributes:
        message: Flash key summarising the result.
        detail: Optional extended information (error description, hint, etc.).
    """

    message: str = Field(..., description="Clave flash del resultado de la operación.")
    detail: str | None = Field(
        default=None,
        description="Información adicional (contexto de error, sugerencia, etc.).",
    )
