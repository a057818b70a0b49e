from __future__ import annotations

import argparse
import json
from pathlib import Path

import pytest

from conftest import write_doc
from sitescripts.build_site import main, parse_stages, run_build
from sitescripts.site_config import load_site_config
from sitescripts.validate_site import check_site
from sitescripts.validate_site import main as validate_main


def test_default_pipeline_writes_every_output(site: Path) -> None:
    assert main(["--root", str(site)]) == 0

    notices = json.loads((site / "notices" / "notices.json").read_text(encoding="utf-8"))
    routes = json.loads((site / "page-routes.json").read_text(encoding="utf-8"))
    assert [e["filename"] for e in notices] == ["a.html"]
    assert routes["NOT-2"] == "notices/b.html"
    assert (site / "notices" / "NOT-1" / "index.html").exists()
    assert (site / "emergency" / "EMG-HC01" / "index.html").exists()
    assert "notices/a.html" in (site / "sitemap.xml").read_text(encoding="utf-8")
    assert not (site / "_listings").exists()


def test_second_run_changes_nothing(site: Path) -> None:
    config = load_site_config(site, env={})
    run_build(site, config)
    before = {p: p.read_bytes() for p in site.rglob("*") if p.is_file()}

    summary = run_build(site, config)

    assert {p: p.read_bytes() for p in site.rglob("*") if p.is_file()} == before
    assert summary["redirects"]["skipped"] == 3
    assert summary["redirects"]["created"] == 0


def test_shims_are_not_mistaken_for_documents(site: Path) -> None:
    config = load_site_config(site, env={})
    run_build(site, config)
    summary = run_build(site, config)
    assert summary["discover"]["documents"] == 4


def test_certified_policy_and_render_stage(site: Path) -> None:
    assert main(["--root", str(site), "--policy", "certified", "--stages", "manifests,routes,redirects,render"]) == 0

    assert json.loads((site / "qr-routes.json").read_text(encoding="utf-8")) == {"EMG-HC01": "emergency/alert.html"}
    assert not (site / "page-routes.json").exists()
    assert (site / "_listings" / "notices.html").exists()
    assert not (site / "sitemap.xml").exists()


def test_duplicate_ids_fail_the_build(site: Path) -> None:
    write_doc(site, "emergency", "dupe.html", {"doc-id": "NOT-1", "doc-status": "active"})
    assert main(["--root", str(site)]) == 1
    assert main(["--root", str(site), "--allow-duplicates"]) == 0


def test_unknown_stage_is_rejected() -> None:
    with pytest.raises(argparse.ArgumentTypeError):
        parse_stages("manifests,deploy")
    assert parse_stages(" manifests , routes ") == ["manifests", "routes"]


def test_validation_after_build(site: Path) -> None:
    main(["--root", str(site)])

    errors, warnings = check_site(site)

    assert errors == []
    assert any("notices/c.html" in w and "retired" in w for w in warnings)
    assert validate_main(["--root", str(site)]) == 0


def test_validation_reports_problems(site: Path) -> None:
    main(["--root", str(site)])
    (site / "notices" / "a.html").unlink()
    write_doc(site, "notices", "d.html", {"doc-date": "someday", "doc-status": "active"})
    (site / "emergency" / "emergency.json").unlink()

    errors, warnings = check_site(site)

    assert any("'a.html' has no file on disk" in e for e in errors)
    assert any("NOT-1 -> notices/a.html does not exist" in e for e in errors)
    assert any("missing manifest" in e for e in errors)
    assert any("'someday'" in w for w in warnings)
    assert validate_main(["--root", str(site)]) == 1


def test_null_config_sections_do_not_break_the_build(site: Path) -> None:
    (site / "site-config.json").write_text(json.dumps({"display": None, "automation": None}), encoding="utf-8")
    assert main(["--root", str(site), "--stages", "manifests,sitemap"]) == 0
    assert (site / "sitemap.xml").exists()
