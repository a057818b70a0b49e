from __future__ import annotations

from pathlib import Path

from conftest import FIXED_MTIME, NOTICE_TEMPLATE, write_doc, write_template
from sitescripts.extract_metadata import extract_document, iso_mtime, list_content_documents
from sitescripts.template_metadata import parse_template_fields

FIELDS = parse_template_fields("".join(NOTICE_TEMPLATE))


def test_lists_documents_without_template_or_index(site: Path) -> None:
    names = [p.name for p in list_content_documents(site / "notices", "notices")]
    assert names == ["a.html", "b.html", "c.html"]


def test_subdirectories_and_other_files_are_ignored(tmp_path: Path) -> None:
    write_template(tmp_path, "notices", [])
    write_doc(tmp_path, "notices", "a.html", {})
    (tmp_path / "notices" / "NOT-1").mkdir()
    (tmp_path / "notices" / "NOT-1" / "index.html").write_text("x", encoding="utf-8")
    (tmp_path / "notices" / "notices.json").write_text("[]", encoding="utf-8")
    (tmp_path / "notices" / "scan.pdf").write_bytes(b"%PDF")

    assert [p.name for p in list_content_documents(tmp_path / "notices", "notices")] == ["a.html"]


def test_extracts_requested_fields_in_field_order(tmp_path: Path) -> None:
    path = write_doc(tmp_path, "notices", "a.html", {
        "doc-status": "ACTIVE",
        "doc-date": "2025-01-03",
        "doc-title": "Notice A",
        "doc-author": "not in the template",
    })
    doc = extract_document(path, FIELDS)

    assert doc.filename == "a.html"
    assert list(doc.values) == ["doc-title", "doc-date", "doc-status"]
    assert doc.values["doc-title"] == "Notice A"
    assert "doc-author" not in doc.values
    assert doc.status == "active"
    assert doc.has_recognized_status


def test_blank_content_counts_as_absent(tmp_path: Path) -> None:
    path = write_doc(tmp_path, "notices", "a.html", {
        "doc-title": "Notice A",
        "doc-summary": "",
        "doc-id": "   ",
    })
    doc = extract_document(path, FIELDS)

    assert "doc-summary" not in doc.values
    assert "doc-id" not in doc.values
    assert doc.doc_id is None


def test_unrecognized_or_missing_status(tmp_path: Path) -> None:
    retired = extract_document(write_doc(tmp_path, "n", "r.html", {"doc-status": "Retired"}), FIELDS)
    missing = extract_document(write_doc(tmp_path, "n", "m.html", {"doc-title": "x"}), FIELDS)

    assert retired.status == "retired"
    assert not retired.has_recognized_status
    assert missing.status is None
    assert not missing.has_recognized_status


def test_id_pinned_and_certified_flags(tmp_path: Path) -> None:
    path = write_doc(tmp_path, "n", "a.html", {
        "doc-identifier": "EMG-7",
        "doc-pinned": "TRUE",
        "doc-certified": "yes",
    })
    doc = extract_document(path, [])

    assert doc.doc_id == "EMG-7"
    assert doc.pinned is True
    assert doc.certified is True
    assert doc.values == {}


def test_doc_id_wins_over_identifier(tmp_path: Path) -> None:
    path = write_doc(tmp_path, "n", "a.html", {"doc-id": "A-1", "doc-identifier": "B-2", "doc-pinned": "no"})
    doc = extract_document(path, [])
    assert doc.doc_id == "A-1"
    assert doc.pinned is False


def test_last_modified_is_utc_iso(tmp_path: Path) -> None:
    path = write_doc(tmp_path, "n", "a.html", {}, mtime=FIXED_MTIME)
    assert iso_mtime(path) == "2025-01-03T09:15:00.000Z"
    assert extract_document(path, []).last_modified == "2025-01-03T09:15:00.000Z"
