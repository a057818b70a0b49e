# sitescripts/generate_routes.py
"""
Global document-id -> "<folder>/<filename>" routing table.

One aggregation, two inclusion policies:
  all        -> page-routes.json  every document carrying an id, any status
  certified  -> qr-routes.json    ... that is also marked doc-certified

A document id used twice anywhere on the site is an error (DuplicateIdError);
--allow-duplicates keeps the first one seen and warns instead.
"""

import sys, argparse
from pathlib import Path

from .generate_manifests import collect_folders
from .utils import ConfigError, DuplicateIdError, dump_json, write_text_atomic

def log(*args): print("[routes]", *args, flush=True)

def include_all(doc) -> bool:
    return bool(doc.doc_id)

def include_certified(doc) -> bool:
    return bool(doc.doc_id) and doc.certified

ROUTE_POLICIES = {
    "all": ("page-routes.json", include_all),
    "certified": ("qr-routes.json", include_certified),
}

def route_file(root: Path, policy: str) -> Path:
    return Path(root) / ROUTE_POLICIES[policy][0]

def aggregate_routes(scans: list, include=include_all, allow_duplicates=False) -> dict:
    routes = {}
    collisions = {}
    for scan in scans:
        for doc in scan.documents:
            if not include(doc):
                continue
            target = f"{scan.folder}/{doc.filename}"
            if doc.doc_id in routes:
                collisions.setdefault(doc.doc_id, [routes[doc.doc_id]]).append(target)
                continue
            routes[doc.doc_id] = target

    if collisions:
        if not allow_duplicates:
            raise DuplicateIdError(collisions)
        for doc_id, paths in sorted(collisions.items()):
            log(f"WARN duplicate id {doc_id}: keeping {paths[0]}, ignoring {', '.join(paths[1:])}")
    return routes

def write_routes(root: Path, policy: str, routes: dict) -> Path:
    out = route_file(root, policy)
    write_text_atomic(out, dump_json(routes, sort_keys=True))
    return out

def generate_routes(root: Path, scans: list, policy="all", allow_duplicates=False) -> dict:
    _, include = ROUTE_POLICIES[policy]
    routes = aggregate_routes(scans, include, allow_duplicates=allow_duplicates)
    out = write_routes(root, policy, routes)
    log(f"wrote {out} ({len(routes)} routes)")
    return routes

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Build the document-id routing table")
    ap.add_argument("--root", default=".", help="Site root (default: current directory)")
    ap.add_argument("--policy", choices=sorted(ROUTE_POLICIES), default="all",
                    help="all -> page-routes.json, certified -> qr-routes.json")
    ap.add_argument("--allow-duplicates", action="store_true",
                    help="Warn on duplicate ids instead of failing (first one wins)")
    args = ap.parse_args(argv)

    root = Path(args.root)
    try:
        scans, _ = collect_folders(root)
        generate_routes(root, scans, args.policy, args.allow_duplicates)
    except (ConfigError, DuplicateIdError) as e:
        log(f"ERROR: {e}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
