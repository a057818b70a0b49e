# sitescripts/template_metadata.py
"""
Content folders and their template schemas.

A content folder `notices/` is any immediate subdirectory of the site root
holding `notices/notices_template.html`. The template's
<meta name="doc-*"> tags define which metadata fields documents in that
folder carry and how the listing groups them:

  <meta name="doc-date" data-group="line1" data-style="date"
        data-label="Posted" content="MMMM d, yyyy">
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .meta_reader import MetaReader
from .utils import ConfigError, humanize_label

def log(*args): print("[template]", *args, flush=True)

TEMPLATE_SUFFIX = "_template.html"
SOLO_GROUP = "__solo__"

@dataclass(frozen=True)
class FieldDefinition:
    key: str
    group: str = SOLO_GROUP
    style: Optional[str] = None
    label: str = ""
    format_hint: str = ""

# -------------------------
# Folder discovery
# -------------------------
def template_path(root: Path, folder: str) -> Path:
    return Path(root) / folder / f"{folder}{TEMPLATE_SUFFIX}"

def get_all_content_folders(root: Path) -> list:
    root = Path(root)
    if not root.is_dir():
        raise ConfigError(f"site root not found: {root}")

    folders = []
    for child in sorted(root.iterdir(), key=lambda p: p.name):
        try:
            if not child.is_dir():
                continue
            if template_path(root, child.name).is_file():
                folders.append(child.name)
        except OSError as e:
            log(f"skipping unreadable folder {child}: {e}")
    return folders

# -------------------------
# Schema parsing
# -------------------------
def parse_template_fields(template_html: str) -> list:
    """Field definitions in template document order; first definition of a key wins."""
    fields = []
    seen = set()
    for attrs in MetaReader(template_html).doc_tags():
        key = attrs["name"].strip()
        if key in seen:
            log(f"duplicate template field {key}; keeping the first definition")
            continue
        seen.add(key)
        fields.append(FieldDefinition(
            key=key,
            group=attrs.get("data-group", "").strip() or SOLO_GROUP,
            style=attrs.get("data-style", "").strip() or None,
            label=attrs.get("data-label", "").strip() or humanize_label(key),
            format_hint=attrs.get("content", "").strip(),
        ))
    return fields

def group_fields(fields: list) -> dict:
    grouped = {}
    for f in fields:
        grouped.setdefault(f.group, []).append(f)
    return grouped

def parse_template_metadata(template_html: str) -> dict:
    """group-key -> [FieldDefinition, ...], groups in order of first appearance."""
    return group_fields(parse_template_fields(template_html))

def load_template_fields(root: Path, folder: str) -> list:
    path = template_path(root, folder)
    return parse_template_fields(path.read_text("utf-8"))
