# sitescripts/utils.py
import os, re, json, tempfile
from pathlib import Path

# -------------------------
# Errors
# -------------------------
class ConfigError(RuntimeError):
    """Required input is missing or the configuration is unusable."""

class DuplicateIdError(RuntimeError):
    def __init__(self, collisions: dict):
        self.collisions = collisions
        parts = [f"{doc_id}: {', '.join(paths)}" for doc_id, paths in sorted(collisions.items())]
        super().__init__("duplicate document ids -> " + "; ".join(parts))

# -------------------------
# String helpers
# -------------------------
TRUTHY = {"true", "yes", "1", "on"}

def is_truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY

def humanize_label(key: str) -> str:
    """doc-publish-date -> Publish Date"""
    raw = re.sub(r"^doc-", "", key or "")
    raw = re.sub(r"[-_]+", " ", raw).strip()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), raw)

def is_safe_segment(s: str) -> bool:
    """A single URL/path segment: no separators, not . or .."""
    s = s or ""
    if not s.strip() or s in {".", ".."}:
        return False
    return not re.search(r"[/\\\x00]", s)

# -------------------------
# File writes
# -------------------------
def write_text_if_changed(path: Path, content: str) -> bool:
    old = path.read_text("utf-8") if path.exists() else None
    if old == content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return True

def write_text_atomic(path: Path, content: str):
    """Write to a temp file beside `path`, then rename over it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise

def dump_json(data, sort_keys=False) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=sort_keys) + "\n"

def load_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)
