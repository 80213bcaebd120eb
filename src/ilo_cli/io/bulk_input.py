"""Bulk input parsing for user account commands."""

from __future__ import annotations

import csv
import io
import json
import sys
from pathlib import Path
from typing import Literal, cast

from ilo_cli.models.users import PRIVILEGES, UserCreate

BulkInputFormat = Literal["auto", "json", "csv"]
Record = dict[str, object]

_ALIASES: dict[str, list[str]] = {
    "user_login": ["user_login", "login", "USER_LOGIN", "username"],
    "user_name": ["user_name", "name", "USER_NAME", "display_name"],
    "password": ["password", "PASSWORD"],
}


def load_user_add_entries(
    source: str,
    input_format: BulkInputFormat = "auto",
) -> list[UserCreate]:
    """Load user account records from a JSON/CSV file or stdin."""

    records = _load_records(source, input_format)
    return [UserCreate.model_validate(record) for record in records]


def _load_records(source: str, input_format: BulkInputFormat) -> list[Record]:
    text = _read_text(source)
    resolved_format = _resolve_format(source, text, input_format)

    if resolved_format == "json":
        records = _parse_json(text)
    else:
        records = _parse_csv(text)

    if not records:
        raise ValueError("Input data did not contain any records")
    return [_canonicalize_record(record) for record in records]


def _read_text(source: str) -> str:
    if source == "-":
        content = sys.stdin.read()
    else:
        content = Path(source).read_text(encoding="utf-8")

    if not content.strip():
        raise ValueError("Input is empty")
    return content


def _resolve_format(
    source: str,
    text: str,
    input_format: BulkInputFormat,
) -> Literal["json", "csv"]:
    if input_format == "json":
        return "json"
    if input_format == "csv":
        return "csv"

    if source != "-":
        suffix = Path(source).suffix.lower()
        if suffix == ".json":
            return "json"
        if suffix == ".csv":
            return "csv"

    stripped = text.lstrip()
    if stripped.startswith("[") or stripped.startswith("{"):
        return "json"
    return "csv"


def _parse_json(text: str) -> list[Record]:
    payload: object = json.loads(text)
    raw_records: list[object]

    if isinstance(payload, list):
        raw_records = cast(list[object], payload)
    else:
        payload_dict = _normalize_record(payload)
        users = payload_dict.get("users") if payload_dict is not None else None
        if not isinstance(users, list):
            raise ValueError(
                "JSON input must be a list of records or an object with a 'users' list"
            )
        raw_records = cast(list[object], users)

    records: list[Record] = []
    for raw_record in raw_records:
        record = _normalize_record(raw_record)
        if record is None:
            raise ValueError("All JSON records must be objects with string keys")
        records.append(record)
    return records


def _parse_csv(text: str) -> list[Record]:
    reader: csv.DictReader[str] = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise ValueError("CSV input must include a header row")

    records: list[Record] = []
    for row in reader:
        record: Record = {}
        for key, value in row.items():
            if key:
                record[key.strip()] = value
        records.append(record)
    return records


def _canonicalize_record(record: Record) -> Record:
    canonical: Record = {}

    for field_name, aliases in _ALIASES.items():
        value = _pick(record, aliases)
        if value is not None and str(value).strip() != "":
            canonical[field_name] = str(value).strip()

    for privilege in PRIVILEGES:
        parsed = _parse_optional_bool(_pick(record, [privilege, privilege.upper()]))
        if parsed is not None:
            canonical[privilege] = parsed

    return canonical


def _pick(source: Record, keys: list[str]) -> object | None:
    for key in keys:
        if key in source:
            return source[key]
    return None


def _parse_optional_bool(value: object | None) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value

    text = str(value).strip().lower()
    if text == "":
        return None
    if text in {"true", "1", "yes", "y"}:
        return True
    if text in {"false", "0", "no", "n"}:
        return False

    raise ValueError(f"Unsupported boolean value: {value}")


def _normalize_record(value: object) -> Record | None:
    if not isinstance(value, dict):
        return None

    normalized: Record = {}
    for key, item in cast(dict[object, object], value).items():
        if not isinstance(key, str):
            return None
        normalized[key] = item
    return normalized
