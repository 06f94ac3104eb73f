"""Debt file ingestion (CSV via pandas, or JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from ..errors import InvalidInputError
from ..logging_config import get_logger

logger = get_logger(__name__)

_NUMERIC_FIELDS = ("balance", "apr", "min_payment", "due_day")


@dataclass(slots=True)
class DebtColumnMapping:
    """Maps canonical debt fields to CSV headers (matched case-insensitively)."""

    name: str = "name"
    balance: str = "balance"
    apr: str = "apr"
    min_payment: str = "min_payment"
    id: str | None = "id"
    last4: str | None = "last4"
    due_day: str | None = "due_day"
    include: str | None = "include"

    def required(self) -> dict[str, str]:
        return {
            "name": self.name,
            "balance": self.balance,
            "apr": self.apr,
            "min_payment": self.min_payment,
        }

    def optional(self) -> dict[str, str]:
        fields = {"id": self.id, "last4": self.last4, "due_day": self.due_day, "include": self.include}
        return {key: column for key, column in fields.items() if column}


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing.

    Every cell is read as text so masked account numbers keep leading zeros.
    """

    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, skipinitialspace=True)
    frame.columns = [c.strip().lower() for c in frame.columns]
    return frame


def _clean_cell(value: Any, *, numeric: bool) -> Any:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    text = str(value).strip()
    if numeric:
        # "%" stays so the normalizer can tell "0.9%" from 0.9
        text = text.replace("$", "").replace(",", "")
    return text or None


def rows_to_debts(*, rows: Iterable[Mapping[str, Any]], mapping: DebtColumnMapping) -> list[dict]:
    """Convert dict-like CSV rows into raw debt records for the normalizer.

    Values stay as cleaned strings; numeric parsing happens in one place, in
    the normalizer.
    """

    columns = {**mapping.required(), **mapping.optional()}
    records: list[dict] = []
    for row in rows:
        record = {}
        for field, column in columns.items():
            column = column.lower()
            if column in row:
                record[field] = _clean_cell(row[column], numeric=field in _NUMERIC_FIELDS)
        if any(value is not None for value in record.values()):
            records.append(record)
    return records


def load_debts_csv(path: Path, mapping: DebtColumnMapping | None = None) -> list[dict]:
    """Parse a debt CSV into raw records.

    Raises:
        InvalidInputError: when a required column is missing
    """

    mapping = mapping or DebtColumnMapping()
    frame = normalize_frame(file_path=path)

    missing = [column for column in mapping.required().values() if column.lower() not in frame.columns]
    if missing:
        raise InvalidInputError(f"{path.name} is missing column(s): {', '.join(missing)}")

    rows = [{c: r[c] for c in frame.columns} for _, r in frame.iterrows()]
    records = rows_to_debts(rows=rows, mapping=mapping)
    logger.info("Loaded debts from CSV", extra={"path": str(path), "rows": len(records)})
    return records


def load_debts_json(path: Path) -> tuple[list[dict], dict[str, Any]]:
    """Read ``{"debts": [...], ...policy}`` or a bare list of debts.

    Returns the debt records and any policy keys found alongside them.
    """

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"{path.name} is not valid JSON: {exc}") from exc

    if isinstance(payload, list):
        return payload, {}
    if isinstance(payload, dict) and isinstance(payload.get("debts"), list):
        policy = {k: v for k, v in payload.items() if k != "debts"}
        return payload["debts"], policy
    raise InvalidInputError(f"{path.name} must hold a list of debts or an object with 'debts'")


def load_debts_file(path: Path, mapping: DebtColumnMapping | None = None) -> tuple[list[dict], dict[str, Any]]:
    """Dispatch on file suffix: ``.csv`` or ``.json``."""

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return load_debts_csv(path, mapping), {}
    if suffix == ".json":
        return load_debts_json(path)
    raise InvalidInputError(f"Unsupported debt file type {suffix!r}; use .csv or .json")
