# sitescripts/extract_metadata.py
import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .meta_reader import MetaReader
from .template_metadata import TEMPLATE_SUFFIX
from .utils import is_truthy

STATUS_KEY = "doc-status"
ID_KEYS = ("doc-id", "doc-identifier")
PINNED_KEY = "doc-pinned"
CERTIFIED_KEY = "doc-certified"

RECOGNIZED_STATUSES = ("active", "draft")

@dataclass
class DocumentMetadata:
    filename: str
    last_modified: str
    values: dict = field(default_factory=dict)
    status: Optional[str] = None
    doc_id: Optional[str] = None
    pinned: bool = False
    certified: bool = False

    @property
    def has_recognized_status(self) -> bool:
        return self.status in RECOGNIZED_STATUSES

def iso_mtime(path: Path) -> str:
    """File mtime as 2025-01-03T09:15:00.000Z"""
    ts = dt.datetime.fromtimestamp(path.stat().st_mtime, tz=dt.timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def list_content_documents(folder_path: Path, folder: str) -> list:
    skip = {f"{folder}{TEMPLATE_SUFFIX}", "index.html"}
    return sorted(
        (p for p in Path(folder_path).iterdir()
         if p.is_file() and p.suffix == ".html" and p.name not in skip),
        key=lambda p: p.name,
    )

def extract_values(html_text: str, fields: list) -> tuple:
    """(values-in-field-order, reader). Blank `content` counts as absent."""
    reader = MetaReader(html_text)
    values = {}
    for f in fields:
        value = reader.content(f.key)
        if value is not None:
            values[f.key] = value
    return values, reader

def extract_document(path: Path, fields: list) -> DocumentMetadata:
    """
    Read one content document. OSError / UnicodeDecodeError propagate so the
    caller can log and skip it.
    """
    path = Path(path)
    values, reader = extract_values(path.read_text("utf-8"), fields)

    status = reader.content(STATUS_KEY)
    doc_id = None
    for key in ID_KEYS:
        doc_id = reader.content(key)
        if doc_id:
            break

    return DocumentMetadata(
        filename=path.name,
        last_modified=iso_mtime(path),
        values=values,
        status=status.lower() if status else None,
        doc_id=doc_id,
        pinned=is_truthy(reader.content(PINNED_KEY)),
        certified=is_truthy(reader.content(CERTIFIED_KEY)),
    )
