"""Ledger export/import as a JSON document"""

import json
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from debt_pool.domain.exceptions import InvalidDocumentError
from debt_pool.domain.ledger import clear_ledger
from debt_pool.domain.models import SCHEMA_VERSION, Ledger
from debt_pool.infrastructure.storage.schemas import LedgerDocument

logger = logging.getLogger(__name__)

REQUIRED_COLLECTIONS = ("debts", "claims", "poolHistory")


def export_ledger(ledger: Ledger) -> str:
    """Serialize the full ledger as indented JSON text"""
    return LedgerDocument.from_domain(ledger).model_dump_json(by_alias=True, indent=2)


def import_ledger(text: Union[str, bytes], *, schema_version: str = SCHEMA_VERSION) -> Ledger:
    """
    Parse a ledger document into a new Ledger.

    The document must be a JSON object holding the debts, claims and poolHistory
    collections. Nothing is returned unless the whole document validates, so a
    rejected import never replaces any state. The schema version is reset to the
    current one.

    Raises:
        InvalidDocumentError: invalid JSON, missing collections or invalid records
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidDocumentError(f"Ledger document is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidDocumentError("Ledger document must be a JSON object")

    missing = [key for key in REQUIRED_COLLECTIONS if not isinstance(data.get(key), list)]
    if missing:
        raise InvalidDocumentError(
            f"Ledger document is missing required collections: {', '.join(missing)}"
        )

    try:
        document = LedgerDocument.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidDocumentError(
            f"Ledger document has {e.error_count()} invalid field(s); first at {location}: {first['msg']}"
        ) from e

    return replace(document.to_domain(), schema_version=schema_version)


def read_ledger(path: Union[str, Path], *, schema_version: str = SCHEMA_VERSION) -> Ledger:
    """Load a ledger file; a missing file is an empty ledger"""
    source = Path(path)
    if not source.exists():
        logger.info("Ledger file not found, starting empty", extra={"path": str(source)})
        return clear_ledger(schema_version)
    return import_ledger(source.read_text(encoding="utf-8"), schema_version=schema_version)


def write_ledger(ledger: Ledger, path: Union[str, Path]) -> None:
    """Write the ledger document, replacing the target file only once fully written"""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".tmp")
    tmp.write_text(export_ledger(ledger), encoding="utf-8")
    os.replace(tmp, target)
