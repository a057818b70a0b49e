# sitescripts/generate_redirects.py
"""
Clean-path redirect shims from page-routes.json.

- Writes /<folder>/<doc-id>/index.html forwarding to /<folder>/<filename>
  so /emergency/EMG-HC01/ resolves to the document
- Only rewrites a shim when its content differs
- Removes shims (recognised by the generator meta tag, or the plain
  refresh-plus-script page older builds wrote) whose id is no longer
  routed to that folder
"""

import re, sys, shutil, argparse
from pathlib import Path

import jinja2

from .generate_routes import ROUTE_POLICIES, route_file
from .template_metadata import get_all_content_folders
from .utils import ConfigError, is_safe_segment, load_json, write_text_if_changed

def log(*args): print("[redirects]", *args, flush=True)

GENERATOR = "sitescripts-redirect"

REDIRECT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="generator" content="{{ generator }}">
  <title>Redirecting…</title>
  <link rel="canonical" href="{{ to }}">
  <meta http-equiv="refresh" content="0; url={{ to }}">
  <script>window.location.href = {{ to|tojson }};</script>
</head>
<body>
  <a href="{{ to }}">Redirecting to {{ to }}</a>
</body>
</html>
"""

def render_redirect(to_url: str) -> str:
    return jinja2.Template(REDIRECT_TEMPLATE, autoescape=True).render(to=to_url, generator=GENERATOR)

def load_routes(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"{path.name} is missing; generate the route table before redirects")
    try:
        routes = load_json(path)
    except ValueError as e:
        raise ConfigError(f"{path} is not valid JSON: {e}")
    if not isinstance(routes, dict):
        raise ConfigError(f"{path} must hold a JSON object of id -> folder/filename")
    return routes

def is_legacy_shim(d: Path, text: str) -> bool:
    """Shim written before the generator tag existed: a lone index.html that
    refreshes and script-redirects into its own folder."""
    folder = re.escape(d.parent.name)
    if not re.search(rf'<meta http-equiv="refresh" content="0; url=/{folder}/[^"/]+">', text):
        return False
    if not re.search(rf'window\.location\.href = "/{folder}/[^"/]+";', text):
        return False
    return [p.name for p in d.iterdir()] == ["index.html"]

def is_generated_shim(d: Path) -> bool:
    idx = d / "index.html"
    if not idx.is_file():
        return False
    try:
        text = idx.read_text("utf-8")
        return f'content="{GENERATOR}"' in text or is_legacy_shim(d, text)
    except (OSError, UnicodeDecodeError):
        return False

def sync_redirects(root: Path, routes: dict, folders=None) -> dict:
    root = Path(root)
    stats = {"created": 0, "updated": 0, "skipped": 0, "removed": 0, "missing_folder": 0, "invalid": 0}
    wanted = set()  # (folder, doc_id)

    for doc_id, relative_path in routes.items():
        parts = str(relative_path).split("/")
        if len(parts) != 2 or not all(is_safe_segment(p) for p in parts):
            log(f"skip {doc_id}: invalid path {relative_path!r}")
            stats["invalid"] += 1
            continue
        if not is_safe_segment(doc_id):
            log(f"skip {doc_id!r}: id is not usable as a directory name")
            stats["invalid"] += 1
            continue

        folder, filename = parts
        base = root / folder
        if not base.is_dir():
            log(f"skip {doc_id}: folder not found: {base}")
            stats["missing_folder"] += 1
            continue

        wanted.add((folder, doc_id))
        idx = base / doc_id / "index.html"
        existed = idx.exists()
        try:
            changed = write_text_if_changed(idx, render_redirect(f"/{folder}/{filename}"))
        except OSError as e:
            log(f"skip {doc_id}: write failed: {e}")
            stats["invalid"] += 1
            continue
        if not changed:
            stats["skipped"] += 1
        elif existed:
            stats["updated"] += 1
            log(f"updated /{folder}/{doc_id}/ -> /{folder}/{filename}")
        else:
            stats["created"] += 1
            log(f"created /{folder}/{doc_id}/ -> /{folder}/{filename}")

    # stale shims: anything we generated that the table no longer routes there
    scan = set(folders or []) | {f for f, _ in wanted}
    for folder in sorted(scan):
        base = root / folder
        if not base.is_dir():
            continue
        for d in sorted(p for p in base.iterdir() if p.is_dir()):
            if (folder, d.name) in wanted or not is_generated_shim(d):
                continue
            try:
                shutil.rmtree(d)
                stats["removed"] += 1
                log(f"removed stale shim {d}")
            except OSError as e:
                log(f"remove error {d}: {e}")
    return stats

def generate_redirects(root: Path, policy="all") -> dict:
    root = Path(root)
    routes = load_routes(route_file(root, policy))
    return sync_redirects(root, routes, folders=get_all_content_folders(root))

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Create /<folder>/<doc-id>/ redirect shims from the route table")
    ap.add_argument("--root", default=".", help="Site root (default: current directory)")
    ap.add_argument("--policy", choices=sorted(ROUTE_POLICIES), default="all",
                    help="Which route table to read")
    args = ap.parse_args(argv)
    try:
        stats = generate_redirects(Path(args.root), args.policy)
    except ConfigError as e:
        log(f"ERROR: {e}")
        return 1
    log("done; " + ", ".join(f"{k}={v}" for k, v in stats.items()))
    return 0

if __name__ == "__main__":
    sys.exit(main())
