"""Record parsing for uploaded intake files.

Turns raw upload bytes into loosely-typed records (plain dicts). CSV input
is parsed leniently and never raises; malformed JSON raises a ParseError
naming the file so the caller can fail that file alone.
"""

import csv
import json
from dataclasses import dataclass
from enum import Enum
from io import StringIO
from typing import Any

from ..errors import ParseError
from ..logging import get_context_logger

logger = get_context_logger(__name__, component="parser")

JSON_MIMETYPES = frozenset({"application/json", "text/json"})

# Preferred wrapper key for JSON exports shaped like {"records": [...]}
JSON_RECORDS_KEY = "records"


class FileFormat(str, Enum):
    """Supported upload formats."""

    CSV = "csv"
    JSON = "json"


@dataclass(frozen=True)
class UploadedFile:
    """One file as delivered by the upload transport."""

    filename: str
    mimetype: str | None
    content: bytes


def detect_format(filename: str, mimetype: str | None = None) -> FileFormat:
    """Infer the format of an upload from its mimetype and filename.

    Anything not declared or named as JSON is treated as CSV.
    """
    if mimetype and mimetype.split(";")[0].strip().lower() in JSON_MIMETYPES:
        return FileFormat.JSON
    if filename.lower().endswith(".json"):
        return FileFormat.JSON
    return FileFormat.CSV


def decode_content(content: bytes | str) -> str:
    """Decode upload bytes as UTF-8, dropping a BOM and replacing bad bytes."""
    if isinstance(content, str):
        return content.lstrip("\ufeff")
    return content.decode("utf-8-sig", errors="replace")


def parse_csv(text: str) -> list[dict[str, str]]:
    """Parse CSV text whose first row is the header.

    Blank lines are skipped and every value is trimmed. Short rows are
    padded with empty strings; cells beyond the header are dropped.
    """
    reader = csv.reader(StringIO(text, newline=""), strict=False)

    header: list[str] | None = None
    records: list[dict[str, str]] = []

    try:
        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            if header is None:
                header = [cell.strip() for cell in row]
                continue
            cells = [cell.strip() for cell in row]
            record = {}
            for i, name in enumerate(header):
                if not name:
                    continue
                record[name] = cells[i] if i < len(cells) else ""
            records.append(record)
    except csv.Error as e:
        # Keep whatever parsed cleanly before the bad line
        logger.warning(f"CSV parsing stopped at line {reader.line_num}: {e}")

    return records


def _records_from_json(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]

    if isinstance(data, dict):
        wrapped = data.get(JSON_RECORDS_KEY)
        if isinstance(wrapped, list):
            return [item for item in wrapped if isinstance(item, dict)]
        for value in data.values():
            if isinstance(value, list) and any(isinstance(item, dict) for item in value):
                return [item for item in value if isinstance(item, dict)]
        return [data]

    return []


def parse_json(text: str, filename: str = "<upload>") -> list[dict[str, Any]]:
    """Parse JSON text into records.

    Accepts an array of objects, an object wrapping an array of objects, or
    a single object (one record).

    Raises:
        ParseError: If the text is not valid JSON
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(filename, str(e)) from e
    return _records_from_json(data)


def parse_records(
    filename: str,
    content: bytes | str,
    mimetype: str | None = None,
) -> list[dict[str, Any]]:
    """Parse one uploaded file into loosely-typed records.

    Args:
        filename: Original filename, used for format inference and errors
        content: Raw file content
        mimetype: Declared content type, if any

    Returns:
        List of records (header/key -> value)

    Raises:
        ParseError: If a JSON file is malformed
    """
    text = decode_content(content)
    if detect_format(filename, mimetype) is FileFormat.JSON:
        return parse_json(text, filename)
    return parse_csv(text)


def parse_upload(upload: UploadedFile) -> list[dict[str, Any]]:
    """Parse an UploadedFile into records."""
    return parse_records(upload.filename, upload.content, upload.mimetype)
