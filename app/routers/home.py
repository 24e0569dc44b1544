"""
Root and alias routes.

Requests that do not specify a locale land here and are redirected to the
localized provider listing using ``DEFAULT_LOCALE``. The unlocalized CSV
export path is also served here.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse, StreamingResponse
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.routers.providers import csv_download_response
from app.services import provider_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Inicio"])


def _redirect_to_index() -> RedirectResponse:
    return RedirectResponse(
        url=f"/{get_settings().DEFAULT_LOCALE}/provider",
        status_code=302,
    )


@router.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return _redirect_to_index()


# Legacy and hand-typed URLs
@router.get("/provider", include_in_schema=False)
@router.get("/providers", include_in_schema=False)
def provider_redirect() -> RedirectResponse:
    return _redirect_to_index()


@router.get(
    "/provider/export/csv",
    summary="Exportar proveedores activos a CSV",
    response_class=StreamingResponse,
    responses={200: {"content": {"text/csv": {}}}},
)
def export_csv(
    db: Annotated[Session, Depends(get_db)],
) -> StreamingResponse:
    """Download the accounting CSV (``proveedores_contabilidad.csv``)."""
    logger.info("GET /provider/export/csv")
    return csv_download_response(provider_service.export_active_csv(db))
