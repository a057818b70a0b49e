from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import meta_tag, write_doc, write_template
from sitescripts.generate_manifests import collect_folders
from sitescripts.generate_routes import (
    aggregate_routes,
    generate_routes,
    include_certified,
    main,
    route_file,
)
from sitescripts.utils import DuplicateIdError


def test_all_policy_covers_every_id_regardless_of_status(site: Path) -> None:
    scans, _ = collect_folders(site)
    routes = aggregate_routes(scans)

    assert routes == {
        "EMG-HC01": "emergency/alert.html",
        "NOT-1": "notices/a.html",
        "NOT-2": "notices/b.html",  # draft, still previewable by id
    }


def test_certified_policy_needs_the_flag(site: Path) -> None:
    scans, _ = collect_folders(site)
    assert aggregate_routes(scans, include_certified) == {"EMG-HC01": "emergency/alert.html"}


def test_route_files_per_policy(site: Path) -> None:
    scans, _ = collect_folders(site)
    generate_routes(site, scans, "all")
    generate_routes(site, scans, "certified")

    page = json.loads((site / "page-routes.json").read_text(encoding="utf-8"))
    qr = json.loads((site / "qr-routes.json").read_text(encoding="utf-8"))
    assert list(page) == sorted(page)
    assert set(page) == {"EMG-HC01", "NOT-1", "NOT-2"}
    assert qr == {"EMG-HC01": "emergency/alert.html"}


def test_duplicate_ids_are_an_error(site: Path) -> None:
    write_doc(site, "emergency", "copy.html", {"doc-id": "NOT-1", "doc-status": "active"})
    scans, _ = collect_folders(site)

    with pytest.raises(DuplicateIdError) as exc:
        generate_routes(site, scans)

    assert exc.value.collisions == {"NOT-1": ["emergency/copy.html", "notices/a.html"]}
    assert not route_file(site, "all").exists()


def test_allow_duplicates_keeps_first_seen(site: Path) -> None:
    write_doc(site, "notices", "z.html", {"doc-id": "EMG-HC01", "doc-status": "active"})
    scans, _ = collect_folders(site)

    routes = aggregate_routes(scans, allow_duplicates=True)
    assert routes["EMG-HC01"] == "emergency/alert.html"


def test_table_is_rebuilt_wholesale(site: Path) -> None:
    route_file(site, "all").write_text('{"OLD-1": "notices/old.html"}', encoding="utf-8")
    scans, _ = collect_folders(site)
    generate_routes(site, scans)
    assert "OLD-1" not in json.loads(route_file(site, "all").read_text(encoding="utf-8"))


def test_main_exit_codes(tmp_path: Path) -> None:
    write_template(tmp_path, "a", [meta_tag("doc-title")])
    write_template(tmp_path, "b", [meta_tag("doc-title")])
    write_doc(tmp_path, "a", "one.html", {"doc-id": "X"})
    assert main(["--root", str(tmp_path)]) == 0

    write_doc(tmp_path, "b", "two.html", {"doc-id": "X"})
    assert main(["--root", str(tmp_path)]) == 1
    assert main(["--root", str(tmp_path), "--allow-duplicates"]) == 0
