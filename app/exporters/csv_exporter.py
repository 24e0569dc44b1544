"""
CSV export helper wrapping pandas.

Provides ``CsvExporter`` — a small builder that assembles a tabular export
in memory and returns its bytes for streaming via FastAPI's
``StreamingResponse``.

Usage example::

    exporter = CsvExporter()
    exporter.add_data_table(headers, rows)
    file_bytes = exporter.finalize()

Design notes
------------
- The output starts with the UTF-8 byte-order mark so that Excel opens the
  file with the right encoding (accents in ``Teléfono``, names, etc.).
- Semicolon is the default delimiter: Spanish-locale spreadsheet tools use
  the comma as decimal separator.
- Quoting is minimal: a field is wrapped in double quotes only when it
  contains the delimiter, a quote, CR or LF; embedded quotes are doubled.
  Records end in CRLF: the csv writer only treats characters of the line
  terminator as line breaks, so a bare CR in a cell would otherwise be
  written unquoted.
- Every cell is written as text. Callers format dates and labels before
  handing the rows over.
"""

from __future__ import annotations

import codecs
from typing import Any, Sequence

import pandas as pd

from app.utils.constants import CSV_DELIMITER


class CsvExporter:
    """Stateful CSV builder for accounting exports.

    Args:
        delimiter: Field separator, ``";"`` by default.
        with_bom: Prefix the output with the UTF-8 byte-order mark.
    """

    def __init__(self, delimiter: str = CSV_DELIMITER, with_bom: bool = True) -> None:
        self._delimiter = delimiter
        self._with_bom = with_bom
        self._frame: pd.DataFrame | None = None

    def add_data_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
    ) -> None:
        """Set the header row and data rows of the export.

        ``None`` cells are written as empty fields.

        Args:
            headers: Column header strings.
            rows: Data rows; each must have ``len(headers)`` cells.

        Raises:
            ValueError: If a row does not match the header width.
        """
        width = len(headers)
        for index, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(
                    f"Fila {index} tiene {len(row)} columnas; se esperaban {width}."
                )

        cells = [["" if cell is None else str(cell) for cell in row] for row in rows]
        self._frame = pd.DataFrame(cells, columns=list(headers), dtype=object)

    def finalize(self) -> bytes:
        """Render the table and return the complete file contents.

        Returns:
            The encoded CSV, BOM included when configured.

        Raises:
            RuntimeError: If ``add_data_table`` was never called.
        """
        if self._frame is None:
            raise RuntimeError("CsvExporter.finalize() llamado sin datos.")

        text = self._frame.to_csv(
            sep=self._delimiter,
            index=False,
            lineterminator="\r\n",
        )
        body = text.encode("utf-8")
        return codecs.BOM_UTF8 + body if self._with_bom else body
