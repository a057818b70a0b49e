# sitescripts/generate_manifests.py
"""
Build <folder>/<folder>.json for every content folder.

- Reads the folder template to learn which doc-* fields exist
- Extracts those fields from every document in the folder
- Keeps documents whose doc-status is accepted by the publish mode
  (live -> active; draft/all -> active + draft)
- Rewrites the manifest in full on every run; unchanged inputs give
  byte-identical output
"""

import sys, argparse
from dataclasses import dataclass, field
from pathlib import Path

from .extract_metadata import extract_document, list_content_documents
from .site_config import load_site_config, accepted_statuses
from .template_metadata import get_all_content_folders, load_template_fields
from .utils import ConfigError, dump_json, write_text_atomic

def log(*args): print("[manifests]", *args, flush=True)

@dataclass
class FolderScan:
    folder: str
    fields: list
    documents: list = field(default_factory=list)
    skipped: list = field(default_factory=list)  # (filename, reason)

def manifest_path(root: Path, folder: str) -> Path:
    return Path(root) / folder / f"{folder}.json"

# ----- Scan ------------------------------------------------------------------
def collect_folder(root: Path, folder: str) -> FolderScan:
    """Template read errors propagate; per-document errors are recorded and skipped."""
    root = Path(root)
    scan = FolderScan(folder=folder, fields=load_template_fields(root, folder))
    for path in list_content_documents(root / folder, folder):
        try:
            scan.documents.append(extract_document(path, scan.fields))
        except (OSError, UnicodeDecodeError) as e:
            reason = f"unreadable: {e}"
            scan.skipped.append((path.name, reason))
            log(f"skip {folder}/{path.name}: {reason}")
    return scan

def collect_folders(root: Path, folders=None) -> tuple:
    """(scans, failed) where failed is [(folder, reason)]."""
    folders = get_all_content_folders(root) if folders is None else folders
    scans, failed = [], []
    for folder in folders:
        try:
            scans.append(collect_folder(root, folder))
        except (OSError, UnicodeDecodeError) as e:
            failed.append((folder, str(e)))
            log(f"skip folder {folder}: {e}")
    return scans, failed

# ----- Build -----------------------------------------------------------------
def build_manifest(documents: list, fields: list, accepted) -> list:
    entries = []
    for doc in documents:
        if doc.status not in accepted:
            continue
        entry = {"filename": doc.filename, "lastModified": doc.last_modified}
        for f in fields:
            if f.key in doc.values:
                entry[f.key] = doc.values[f.key]
        entries.append(entry)
    return entries

def write_manifest(root: Path, folder: str, entries: list) -> Path:
    out = manifest_path(root, folder)
    write_text_atomic(out, dump_json(entries))
    return out

def generate_manifests(root: Path, config: dict, scans=None) -> dict:
    """Write every folder manifest; returns per-run counts."""
    root = Path(root)
    accepted = accepted_statuses(config)
    failed = []
    if scans is None:
        scans, failed = collect_folders(root)

    stats = {"folders": 0, "entries": 0, "excluded": 0, "skipped": len(failed)}
    for scan in scans:
        entries = build_manifest(scan.documents, scan.fields, accepted)
        excluded = len(scan.documents) - len(entries)
        out = write_manifest(root, scan.folder, entries)
        log(f"wrote {out} ({len(entries)} entries, {excluded} excluded by status)")
        for doc in scan.documents:
            if not doc.has_recognized_status:
                log(f"excluded {scan.folder}/{doc.filename}: status {doc.status or 'missing'!r} not recognized")
        stats["folders"] += 1
        stats["entries"] += len(entries)
        stats["excluded"] += excluded
        stats["skipped"] += len(scan.skipped)
    return stats

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Build <folder>/<folder>.json manifests from document <meta> tags")
    ap.add_argument("--root", default=".", help="Site root (default: current directory)")
    ap.add_argument("--mode", choices=("live", "draft", "all"), help="Override mode.publish from site-config.json")
    args = ap.parse_args(argv)

    root = Path(args.root)
    try:
        config = load_site_config(root)
        if args.mode:
            config["mode"]["publish"] = args.mode
        stats = generate_manifests(root, config)
    except ConfigError as e:
        log(f"ERROR: {e}")
        return 1
    log("done; " + ", ".join(f"{k}={v}" for k, v in stats.items()))
    return 0

if __name__ == "__main__":
    sys.exit(main())
