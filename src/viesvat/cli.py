"""Command line entry point for checking VAT IDs against VIES."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from viesvat import excel_io
from viesvat.client import ViesClient
from viesvat.config import load_settings, normalise_timeout
from viesvat.errors import (
    InvalidVatIdError,
    MalformedResponseError,
    RegistryFaultError,
    TransportError,
)
from viesvat.identifiers import clean_vat_id
from viesvat.utils.logging_setup import setup_logger

logger = setup_logger().getChild("cli")

DEFAULT_MAPPING: dict[str, str] = {
    "valid": "B",
    "server_validated": "C",
    "name": "D",
    "address": "E",
    "notes": "F",
}

_RETRY_WAIT = wait_exponential(multiplier=0.5, min=0.5, max=10)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="USt-IdNr. Prüfung über VIES")
    parser.add_argument("vat_ids", nargs="*", help="USt-IdNrn., z.B. DE123456789")
    parser.add_argument("--excel", help="Pfad zur Excel-Arbeitsmappe (Batch-Modus)")
    parser.add_argument("--sheet", help="Tabellenblatt-Name (Standard: aktives Blatt)")
    parser.add_argument(
        "--vat-col", default="A", help="Spalte mit USt-IdNr. (Standard: A)"
    )
    parser.add_argument(
        "--start", type=int, default=2, help="Startzeile (1-basiert). Standard: 2."
    )
    parser.add_argument("--end", type=int, help="Endzeile (1-basiert, inklusiv)")
    parser.add_argument(
        "--mapping-yaml",
        help="YAML mit Mapping zwischen Ergebnisfeldern und Spalten",
    )
    parser.add_argument(
        "--timeout", type=float, help="Timeout in Sekunden (Standard: VIES_TIMEOUT bzw. 30)"
    )
    parser.add_argument(
        "--retries",
        type=int,
        help="Versuche bei Verbindungsfehlern (Standard: VIES_RETRIES bzw. 3)",
    )
    parser.add_argument(
        "--degrade-fault",
        action="append",
        dest="degrade_faults",
        metavar="KEY",
        help=(
            "Nur diese VIES-Fehler (faultstring oder faultcode) als 'vermutlich gültig' "
            "werten; mehrfach angebbar. Standard: alle Fehler"
        ),
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Ausführliche Log-Ausgabe aktivieren"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Nur Abruf, keine Schreiboperationen in die Arbeitsmappe",
    )
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    setup_logger(logging.DEBUG if verbose else logging.INFO)


def _load_mapping(path: str | None) -> dict[str, str]:
    mapping: MutableMapping[str, str] = dict(DEFAULT_MAPPING)
    if not path:
        return dict(mapping)

    mapping_path = Path(path)
    if not mapping_path.exists():
        raise FileNotFoundError(f"Mapping-Datei nicht gefunden: {mapping_path}")

    data = yaml.safe_load(mapping_path.read_text(encoding="utf-8"))
    if data is None:
        return dict(mapping)
    if not isinstance(data, Mapping):
        raise ValueError("Mapping YAML muss ein Dictionary enthalten")

    for key, value in data.items():
        if value is None:
            mapping.pop(str(key), None)
            continue
        column = excel_io.normalise_column(str(value))
        if column is None:
            continue
        if not column.isalpha():
            raise ValueError(f"Ungültiger Spaltenwert: {column}")
        mapping[str(key)] = column

    return dict(mapping)


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    stop = getattr(retry_state.retry_object, "stop", None)
    logger.warning(
        "Retry VIES (Versuch %s/%s) wegen %s",
        retry_state.attempt_number,
        getattr(stop, "max_attempt_number", "?"),
        exc,
    )


def _validate_with_retry(client: ViesClient, vat_id: str, attempts: int) -> dict[str, Any]:
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=_RETRY_WAIT,
        retry=retry_if_exception_type(TransportError),
        after=_log_retry,
        reraise=True,
    )
    for attempt in retrying:
        with attempt:
            return client.validate(vat_id).as_dict()
    raise RuntimeError("tenacity lieferte kein Ergebnis")  # pragma: no cover


def _check(client: ViesClient, vat_id: str, attempts: int) -> tuple[dict[str, Any], bool]:
    """Prüft *vat_id* und liefert den Datensatz sowie ein Fehler-Flag."""

    record: dict[str, Any] = {"vat_id": vat_id}
    try:
        record.update(_validate_with_retry(client, vat_id, attempts))
    except InvalidVatIdError as exc:
        logger.warning("Ungültige Eingabe %r: %s", vat_id, exc)
        record["notes"] = str(exc)
        return record, True
    except (TransportError, RegistryFaultError) as exc:
        logger.error("VIES-Abfrage für %s fehlgeschlagen: %s", vat_id, exc)
        record["notes"] = str(exc)
        return record, True
    record["notes"] = "checked" if record["server_validated"] else "presumed valid"
    return record, False


def _run_single(client: ViesClient, vat_ids: Sequence[str], attempts: int) -> int:
    records: list[dict[str, Any]] = []
    errors = 0
    try:
        for raw in vat_ids:
            record, failed = _check(client, clean_vat_id(raw), attempts)
            if failed:
                errors += 1
            records.append(record)
    except MalformedResponseError:
        print(json.dumps(records, indent=2, ensure_ascii=False))
        raise

    print(json.dumps(records, indent=2, ensure_ascii=False))
    return 4 if errors else 0


def _run_batch(
    client: ViesClient,
    args: argparse.Namespace,
    mapping: Mapping[str, str],
    attempts: int,
) -> int:
    processed = 0
    valid = 0
    invalid = 0
    errors = 0
    start_time = time.perf_counter()

    rows = excel_io.iter_rows(
        excel_path=args.excel,
        sheet=args.sheet,
        start=args.start,
        end=args.end,
        vat_col=args.vat_col,
    )

    for row in rows:
        processed += 1
        record, failed = _check(client, row["vat_id"], attempts)
        if failed:
            errors += 1
        elif record["valid"]:
            valid += 1
        else:
            invalid += 1

        if not args.dry_run:
            excel_io.write_result(
                excel_path=args.excel,
                sheet=args.sheet,
                row_index=row["index"],
                record=record,
                mapping=mapping,
            )

    if not args.dry_run:
        excel_io.save(args.excel)

    duration = time.perf_counter() - start_time
    logger.info(
        "Verarbeitung abgeschlossen: processed=%s valid=%s invalid=%s errors=%s duration=%.2fs",
        processed,
        valid,
        invalid,
        errors,
        duration,
    )
    return 4 if errors else 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    dotenv_path = Path(".env")
    if dotenv_path.exists():
        load_dotenv(dotenv_path=dotenv_path)

    if not args.vat_ids and not args.excel:
        logger.error("Bitte USt-IdNrn. oder --excel angeben")
        return 2

    try:
        settings = load_settings()
        mapping = _load_mapping(args.mapping_yaml)
        timeout = (
            normalise_timeout(args.timeout, "--timeout")
            if args.timeout is not None
            else settings.timeout
        )
    except (ValueError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 2

    attempts = args.retries if args.retries is not None else settings.retries
    if attempts < 1:
        logger.error("--retries muss mindestens 1 sein")
        return 2

    degraded = args.degrade_faults if args.degrade_faults else settings.degraded_faults
    client = ViesClient(
        service_url=settings.service_url,
        timeout=timeout,
        degraded_faults=degraded,
    )

    try:
        if args.excel:
            return _run_batch(client, args, mapping, attempts)
        return _run_single(client, args.vat_ids, attempts)
    except MalformedResponseError as exc:
        logger.error("Abbruch, VIES-Antwort nicht lesbar: %s", exc)
        return 3
    except (ValueError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
