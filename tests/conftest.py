from __future__ import annotations

import os
from pathlib import Path

import pytest

# 2025-01-03T09:15:00Z
FIXED_MTIME = 1735895700


def meta_tag(name: str, content: str | None = None, **attrs: str) -> str:
    parts = [f'name="{name}"']
    for key, value in attrs.items():
        parts.append(f'{key.replace("_", "-")}="{value}"')
    if content is not None:
        parts.append(f'content="{content}"')
    return f"<meta {' '.join(parts)}>"


def write_template(root: Path, folder: str, metas: list[str]) -> Path:
    path = root / folder / f"{folder}_template.html"
    path.parent.mkdir(parents=True, exist_ok=True)
    head = "\n    ".join(metas)
    path.write_text(
        f"<!DOCTYPE html>\n<html>\n  <head>\n    {head}\n  </head>\n  <body></body>\n</html>\n",
        encoding="utf-8",
    )
    return path


def write_doc(root: Path, folder: str, filename: str, values: dict[str, str], mtime: int = FIXED_MTIME) -> Path:
    path = root / folder / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    head = "\n    ".join(meta_tag(k, v) for k, v in values.items())
    path.write_text(
        f"<!DOCTYPE html>\n<html>\n  <head>\n    {head}\n  </head>\n  <body><p>Body</p></body>\n</html>\n",
        encoding="utf-8",
    )
    os.utime(path, (mtime, mtime))
    return path


NOTICE_TEMPLATE = [
    meta_tag("doc-title"),
    meta_tag("doc-date", "MMMM d, yyyy", data_group="line1", data_style="date", data_label="Posted"),
    meta_tag("doc-id", data_group="line1"),
    meta_tag("doc-summary"),
    meta_tag("doc-status"),
    meta_tag("doc-pinned"),
]


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A small site: notices/ with three documents, emergency/ with one."""
    root = tmp_path / "site"
    write_template(root, "notices", NOTICE_TEMPLATE)
    write_doc(root, "notices", "index.html", {"doc-title": "Listing page"})
    write_doc(root, "notices", "a.html", {
        "doc-title": "Notice A",
        "doc-date": "2025-01-03",
        "doc-id": "NOT-1",
        "doc-status": "active",
    })
    write_doc(root, "notices", "b.html", {
        "doc-title": "Notice B",
        "doc-date": "2025-02-10",
        "doc-id": "NOT-2",
        "doc-status": "Draft",
        "doc-summary": "",
    })
    write_doc(root, "notices", "c.html", {
        "doc-title": "Notice C",
        "doc-status": "retired",
    })

    write_template(root, "emergency", [meta_tag("doc-title"), meta_tag("doc-status")])
    write_doc(root, "emergency", "alert.html", {
        "doc-title": "Boil Water",
        "doc-id": "EMG-HC01",
        "doc-status": "active",
        "doc-certified": "true",
    })

    # not a content folder: no matching template
    (root / "images").mkdir()
    return root
