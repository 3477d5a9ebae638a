"""Hilfsfunktionen für das Lesen und Schreiben von Excel-Arbeitsmappen."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TypedDict

from openpyxl import load_workbook
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .identifiers import clean_vat_id
from .utils.logging_setup import setup_logger

_BASE_LOGGER = setup_logger()
LOGGER = _BASE_LOGGER.getChild("excel_io")


class RowData(TypedDict):
    """Eine gelesene Tabellenzeile mit bereinigter USt-IdNr."""

    index: int
    vat_id: str


_WORKBOOK_CACHE: dict[str, Workbook] = {}


def _get_or_load_workbook(excel_path: str) -> Workbook:
    """Gibt eine zwischengespeicherte Arbeitsmappe zurück."""

    workbook = _WORKBOOK_CACHE.get(excel_path)
    if workbook is None:
        LOGGER.debug("Lade Arbeitsmappe: %s", excel_path)
        workbook = load_workbook(excel_path)
        _WORKBOOK_CACHE[excel_path] = workbook
    return workbook


def normalise_column(column: str | None) -> str | None:
    if column is None:
        return None
    column = column.strip().upper()
    return column or None


def _cell_to_string(value: object) -> str | None:
    if value is None:
        return None
    value_str = value.strip() if isinstance(value, str) else str(value).strip()
    return value_str or None


def _read_cell(worksheet: Worksheet, column: str, row_index: int) -> str | None:
    return _cell_to_string(worksheet[f"{column}{row_index}"].value)


def _find_last_row_with_value(worksheet: Worksheet, column: str, start_row: int) -> int:
    for row_idx in range(worksheet.max_row, start_row - 1, -1):
        if _read_cell(worksheet, column, row_idx) is not None:
            return row_idx
    return start_row - 1


def _get_worksheet(workbook: Workbook, sheet: str | None) -> Worksheet:
    if sheet:
        try:
            return workbook[sheet]
        except KeyError as exc:
            raise ValueError(f"Arbeitsblatt '{sheet}' wurde nicht gefunden") from exc
    return workbook.active


def iter_rows(
    excel_path: str,
    sheet: str | None,
    start: int,
    end: int | None,
    vat_col: str,
) -> Iterator[RowData]:
    """Liest USt-IdNrn. aus *vat_col* und überspringt leere Zellen."""

    workbook = _get_or_load_workbook(excel_path)
    worksheet = _get_worksheet(workbook, sheet)
    column = normalise_column(vat_col)
    if not column:
        raise ValueError("Spalte für USt-IdNr. darf nicht leer sein")

    stop = end if end is not None else _find_last_row_with_value(worksheet, column, start)
    LOGGER.info("Lese Zeilen %s-%s aus Blatt '%s' (%s)", start, stop, sheet, excel_path)

    def _generator() -> Iterator[RowData]:
        yielded = 0
        for row_idx in range(start, stop + 1):
            raw_value = _read_cell(worksheet, column, row_idx)
            if raw_value is None:
                continue
            yielded += 1
            yield RowData(index=row_idx, vat_id=clean_vat_id(raw_value))

        LOGGER.info("Verarbeitete Zeilen in Blatt '%s' (%s): %s", sheet, excel_path, yielded)

    return _generator()


def write_result(
    excel_path: str,
    sheet: str | None,
    row_index: int,
    record: Mapping[str, object],
    mapping: Mapping[str, str],
) -> None:
    """Schreibt Daten aus *record* in die gemappten Spalten."""

    workbook = _get_or_load_workbook(excel_path)
    worksheet = _get_worksheet(workbook, sheet)

    LOGGER.debug("Schreibe Ergebnis für Zeile %s in Blatt '%s' (%s)", row_index, sheet, excel_path)

    for key, column in mapping.items():
        column_letter = normalise_column(column)
        if not column_letter or key not in record:
            continue
        value = record[key]
        if value is None:
            cell_value: object = ""
        elif isinstance(value, (str, bool)):
            cell_value = value
        else:
            cell_value = str(value)
        worksheet[f"{column_letter}{row_index}"] = cell_value


def save(excel_path: str) -> None:
    """Persistiert Änderungen auf die Festplatte."""

    workbook = _WORKBOOK_CACHE.get(excel_path)
    if workbook is None:
        LOGGER.debug("Keine Arbeitsmappe im Cache für Pfad: %s", excel_path)
        return
    LOGGER.info("Speichere Arbeitsmappe: %s", excel_path)
    workbook.save(excel_path)


def reset() -> None:
    """Leert den Arbeitsmappen-Cache (hauptsächlich für Tests)."""

    _WORKBOOK_CACHE.clear()


__all__ = ["RowData", "iter_rows", "normalise_column", "reset", "save", "write_result"]
