# sitescripts/archive_active_pages.py
"""
Submit every active document to the Internet Archive's save endpoint.

URLs come from the folder manifests (same set as sitemap.xml). Requests go
out in batches of MAX_CONCURRENT with a short pause between batches to stay
under the archive's rate limit. A failed URL is logged and counted; it never
stops the run.
"""

import sys, time, argparse, urllib.parse
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import requests

from .generate_sitemap import active_urls
from .site_config import load_site_config, automation_enabled
from .utils import ConfigError

def log(*args): print("[webarchive]", *args, flush=True)

ARCHIVE_ENDPOINT = "https://web.archive.org/save/"
MAX_CONCURRENT = 5
BATCH_PAUSE = 1.5
TIMEOUT = 60

HEADERS = {
    "User-Agent": "sitescripts-webarchive/1.0 (+https://web.archive.org/)",
}

def archive_url(session, url: str, timeout=TIMEOUT) -> bool:
    target = ARCHIVE_ENDPOINT + urllib.parse.quote(url, safe=":/")
    log(f"archiving: {url}")
    try:
        r = session.get(target, headers=HEADERS, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        log(f"failed: {url}: {e}")
        return False
    log(f"archived: {url}")
    return True

def archive_in_batches(urls: list, session=None, batch_size=MAX_CONCURRENT, pause=BATCH_PAUSE) -> dict:
    session = session or requests.Session()
    stats = {"archived": 0, "failed": 0}
    with ThreadPoolExecutor(max_workers=batch_size) as pool:
        for i in range(0, len(urls), batch_size):
            batch = urls[i:i + batch_size]
            for ok in pool.map(lambda u: archive_url(session, u), batch):
                stats["archived" if ok else "failed"] += 1
            if pause and i + batch_size < len(urls):
                time.sleep(pause)
    return stats

def archive_active_pages(root: Path, config: dict, session=None, pause=BATCH_PAUSE):
    """Returns counts, or None when disabled."""
    if not automation_enabled(config, "archiveToInternetArchive"):
        log("archive.org publishing disabled via site-config.json")
        return None
    urls = active_urls(root, config)
    log(f"preparing to archive {len(urls)} active URLs")
    stats = archive_in_batches(urls, session=session, pause=pause)
    log(f"archive complete; archived={stats['archived']}, failed={stats['failed']}")
    return stats

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Submit active documents to web.archive.org")
    ap.add_argument("--root", default=".", help="Site root (default: current directory)")
    args = ap.parse_args(argv)
    root = Path(args.root)
    try:
        archive_active_pages(root, load_site_config(root))
    except ConfigError as e:
        log(f"ERROR: {e}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
