"""Bulk intake: parse uploads, normalize, preview, commit."""

from .commit import CommitEngine
from .normalizer import normalize_record, normalize_records
from .parser import UploadedFile, parse_records
from .preview import build_preview

__all__ = [
    "CommitEngine",
    "UploadedFile",
    "build_preview",
    "normalize_record",
    "normalize_records",
    "parse_records",
]
