# sitescripts/generate_sitemap.py
# sitemap.xml from the active entries of every folder manifest.

import sys, argparse
from pathlib import Path

import jinja2

from .generate_manifests import manifest_path
from .site_config import load_site_config, automation_enabled, base_url, publish_mode
from .template_metadata import get_all_content_folders
from .utils import ConfigError, load_json, write_text_if_changed

def log(*args): print("[sitemap]", *args, flush=True)

OUTPUT_FILE = "sitemap.xml"

SITEMAP_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{% for u in urls %}  <url><loc>{{ u.loc }}</loc>{% if u.lastmod %}<lastmod>{{ u.lastmod }}</lastmod>{% endif %}</url>
{% endfor %}</urlset>
"""

def is_active_entry(entry: dict, mode: str) -> bool:
    status = str(entry.get("doc-status") or "").strip().lower()
    if status:
        return status == "active"
    # without doc-status in the schema only a live manifest is known to be all-active
    return mode == "live"

def active_entries(root: Path, config: dict) -> list:
    """[(folder, entry)] for every active manifest entry, manifests in folder order."""
    root = Path(root)
    mode = publish_mode(config)
    out = []
    for folder in get_all_content_folders(root):
        path = manifest_path(root, folder)
        if not path.exists():
            log(f"missing manifest in folder: {folder}")
            continue
        try:
            entries = load_json(path)
        except (OSError, ValueError) as e:
            log(f"skip {path}: {e}")
            continue
        for entry in entries if isinstance(entries, list) else []:
            if isinstance(entry, dict) and entry.get("filename") and is_active_entry(entry, mode):
                out.append((folder, entry))
    return out

def active_urls(root: Path, config: dict) -> list:
    prefix = base_url(config)
    return [f"{prefix}/{folder}/{entry['filename']}" for folder, entry in active_entries(root, config)]

def render_sitemap(urls: list) -> str:
    return jinja2.Template(SITEMAP_TEMPLATE, autoescape=True).render(urls=urls)

def generate_sitemap(root: Path, config: dict):
    """Returns the number of URLs written, or None when disabled."""
    root = Path(root)
    if not automation_enabled(config, "generateSitemap"):
        log("sitemap generation disabled via site-config.json")
        return None

    prefix = base_url(config)
    urls = [
        {"loc": f"{prefix}/{folder}/{entry['filename']}", "lastmod": entry.get("lastModified", "")}
        for folder, entry in active_entries(root, config)
    ]
    urls.sort(key=lambda u: u["loc"])

    out = root / OUTPUT_FILE
    if write_text_if_changed(out, render_sitemap(urls)):
        log(f"wrote {out} with {len(urls)} active entries")
    else:
        log(f"no change: {out} ({len(urls)} entries)")
    return len(urls)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Generate sitemap.xml from folder manifests")
    ap.add_argument("--root", default=".", help="Site root (default: current directory)")
    args = ap.parse_args(argv)
    root = Path(args.root)
    try:
        generate_sitemap(root, load_site_config(root))
    except ConfigError as e:
        log(f"ERROR: {e}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
