# sitescripts/build_site.py
"""
One build pass over the site root:

  discover -> parse-schema -> extract   (collect_folders, once)
  manifests  <folder>/<folder>.json
  routes     page-routes.json / qr-routes.json
  redirects  <folder>/<doc-id>/index.html
  sitemap    sitemap.xml
  render     _listings/<folder>.html
  archive    web.archive.org submissions

Stages are picked with --stages (default: manifests,routes,redirects,sitemap).
Item-level failures are logged and counted; the exit code is non-zero only
for fatal configuration errors and duplicate document ids.
"""

import sys, argparse
from pathlib import Path

from .archive_active_pages import archive_active_pages
from .generate_manifests import collect_folders, generate_manifests
from .generate_redirects import generate_redirects
from .generate_routes import ROUTE_POLICIES, generate_routes
from .generate_sitemap import generate_sitemap
from .render_listing import generate_listings
from .site_config import load_site_config
from .utils import ConfigError, DuplicateIdError

def log(*args): print("[build]", *args, flush=True)

STAGES = ("manifests", "routes", "redirects", "sitemap", "render", "archive")
DEFAULT_STAGES = ("manifests", "routes", "redirects", "sitemap")

def parse_stages(value: str) -> list:
    stages = [s.strip() for s in (value or "").split(",") if s.strip()]
    unknown = [s for s in stages if s not in STAGES]
    if unknown:
        raise argparse.ArgumentTypeError(f"unknown stage(s): {', '.join(unknown)}; choose from {', '.join(STAGES)}")
    return stages

def run_build(root: Path, config: dict, stages=DEFAULT_STAGES, policy="all", allow_duplicates=False) -> dict:
    """
    Run the selected stages in pipeline order. Returns a summary dict keyed by
    stage; raises ConfigError / DuplicateIdError for fatal problems.
    """
    root = Path(root)
    summary = {}

    scans, failed = collect_folders(root)
    summary["discover"] = {"folders": len(scans), "failed": len(failed),
                           "documents": sum(len(s.documents) for s in scans)}

    if "manifests" in stages:
        summary["manifests"] = generate_manifests(root, config, scans=scans)
        summary["manifests"]["skipped"] += len(failed)
    if "routes" in stages:
        routes = generate_routes(root, scans, policy, allow_duplicates)
        summary["routes"] = {"routes": len(routes), "file": ROUTE_POLICIES[policy][0]}
    if "redirects" in stages:
        summary["redirects"] = generate_redirects(root, policy)
    if "sitemap" in stages:
        n = generate_sitemap(root, config)
        summary["sitemap"] = None if n is None else {"urls": n}
    if "render" in stages:
        summary["render"] = generate_listings(root, config, [s.folder for s in scans])
    if "archive" in stages:
        summary["archive"] = archive_active_pages(root, config)
    return summary

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the site maintenance pipeline")
    ap.add_argument("--root", default=".", help="Site root (default: current directory)")
    ap.add_argument("--stages", type=parse_stages, default=list(DEFAULT_STAGES),
                    help=f"Comma-separated stages to run ({', '.join(STAGES)})")
    ap.add_argument("--mode", choices=("live", "draft", "all"), help="Override mode.publish")
    ap.add_argument("--policy", choices=sorted(ROUTE_POLICIES), default="all",
                    help="Route inclusion policy: all ids or certified only")
    ap.add_argument("--allow-duplicates", action="store_true",
                    help="Warn on duplicate document ids instead of failing")
    args = ap.parse_args(argv)

    root = Path(args.root)
    try:
        config = load_site_config(root)
        if args.mode:
            config["mode"]["publish"] = args.mode
        summary = run_build(root, config, args.stages, args.policy, args.allow_duplicates)
    except (ConfigError, DuplicateIdError) as e:
        log(f"ERROR: {e}")
        return 1

    for stage, counts in summary.items():
        if counts is None:
            log(f"{stage}: disabled")
        else:
            log(f"{stage}: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
    return 0

if __name__ == "__main__":
    sys.exit(main())
