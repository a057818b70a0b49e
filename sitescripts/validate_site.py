# sitescripts/validate_site.py
import sys, argparse
from pathlib import Path

from .extract_metadata import RECOGNIZED_STATUSES
from .generate_manifests import collect_folders, manifest_path
from .generate_redirects import is_generated_shim
from .generate_routes import ROUTE_POLICIES, route_file
from .render_listing import parse_date
from .utils import ConfigError, load_json

def check_site(root: Path) -> tuple:
    """(errors, warnings) as lists of messages."""
    root = Path(root)
    errors, warnings = [], []

    scans, failed = collect_folders(root)
    for folder, reason in failed:
        errors.append(f"{folder}: template unreadable: {reason}")

    seen_ids = {}
    for scan in scans:
        folder = scan.folder
        date_keys = [f.key for f in scan.fields if f.style == "date"]

        for filename, reason in scan.skipped:
            warnings.append(f"{folder}/{filename}: {reason}")

        for doc in scan.documents:
            where = f"{folder}/{doc.filename}"
            if not doc.has_recognized_status:
                warnings.append(f"{where}: status {doc.status or 'missing'!r} is not one of {', '.join(RECOGNIZED_STATUSES)}")
            for key in date_keys:
                value = doc.values.get(key)
                if value and parse_date(value) is None:
                    warnings.append(f"{where}: {key} {value!r} is not a recognizable date")
            if doc.doc_id:
                seen_ids.setdefault(doc.doc_id, []).append(where)

        mf = manifest_path(root, folder)
        if not mf.exists():
            errors.append(f"{folder}: missing manifest {mf.name}")
        else:
            try:
                entries = load_json(mf)
            except ValueError as e:
                errors.append(f"{mf}: invalid JSON: {e}")
                entries = []
            for entry in entries if isinstance(entries, list) else []:
                name = entry.get("filename", "") if isinstance(entry, dict) else ""
                if not (root / folder / name).is_file():
                    errors.append(f"{mf}: entry {name!r} has no file on disk")

    for doc_id, paths in sorted(seen_ids.items()):
        if len(paths) > 1:
            errors.append(f"duplicate document id {doc_id}: {', '.join(paths)}")

    for policy in sorted(ROUTE_POLICIES):
        rf = route_file(root, policy)
        if not rf.exists():
            continue
        try:
            routes = load_json(rf)
        except ValueError as e:
            errors.append(f"{rf}: invalid JSON: {e}")
            continue
        if not isinstance(routes, dict):
            errors.append(f"{rf}: not a JSON object")
            continue
        for doc_id, target in sorted(routes.items()):
            if not (root / str(target)).is_file():
                errors.append(f"{rf.name}: {doc_id} -> {target} does not exist")
            shim = root / str(target).split("/")[0] / doc_id
            if shim.is_dir() and not (shim / "index.html").exists():
                errors.append(f"alias missing index.html: {shim}")
            elif shim.is_dir() and not is_generated_shim(shim):
                warnings.append(f"{shim}: directory shadows clean path for {doc_id}")

    return errors, warnings

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Check manifests, route tables and shims against the content")
    ap.add_argument("--root", default=".", help="Site root (default: current directory)")
    args = ap.parse_args(argv)

    try:
        errors, warnings = check_site(Path(args.root))
    except ConfigError as e:
        print(f"[ERR] {e}")
        return 1
    for w in warnings:
        print(f"[WARN] {w}")
    for e in errors:
        print(f"[ERR] {e}")
    print(f"[validate] done; errors={len(errors)}, warnings={len(warnings)}")
    return 1 if errors else 0

if __name__ == "__main__":
    sys.exit(main())
