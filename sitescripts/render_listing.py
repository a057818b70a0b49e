# sitescripts/render_listing.py
"""
Static document listings: the same cards publish.js builds in the browser,
rendered ahead of time into _listings/<folder>.html.

Each card shows the title, a pushpin when pinned, the template's metadata
fields (solo fields one per line, grouped fields inline) and a link to the
document. Pinned cards come first; both blocks are newest-first by doc-date.

Dates written as YYYY-MM-DD are calendar dates. They are never turned into
UTC instants, so 2025-05-21 shows as May 21, 2025 in every timezone.
"""

import re, sys, html, argparse
import datetime as dt
from pathlib import Path

import jinja2

from .generate_manifests import manifest_path
from .site_config import load_site_config, publish_mode
from .template_metadata import SOLO_GROUP, get_all_content_folders, group_fields, load_template_fields
from .utils import ConfigError, is_truthy, load_json, write_text_if_changed

def log(*args): print("[listing]", *args, flush=True)

LISTINGS_DIR = "_listings"
TM_MARKER = '<span class="tm">&trade;</span>'
PUSHPIN_SRC = "/images/pushpin.png"
FALLBACK_HTML = '<div id="live-notices">Failed to load content.</div>\n'

MONTHS = ("January", "February", "March", "April", "May", "June", "July",
          "August", "September", "October", "November", "December")

ENTRY_TEMPLATE = """<div class="notice">
{% if pinned %}  <img src="{{ pushpin }}" alt="Pinned" class="pinned">
{% endif %}  <h2>{{ title }}</h2>
{% for block in blocks %}{% if block.solo %}{% for m in block["items"] %}  <p class="{{ m.css }}">{{ m.html|safe }}</p>
{% endfor %}{% else %}  <div class="meta-group">{% for m in block["items"] %}<span class="{{ m.css }}">{{ m.html|safe }}</span>{% endfor %}</div>
{% endif %}{% endfor %}  <a href="/{{ folder }}/{{ filename }}">View Full Document →</a>
</div>
"""

LISTING_TEMPLATE = """<div id="live-notices" data-folder="{{ folder }}">
<div id="pinned-notices">
{% for card in pinned %}{{ card|safe }}
{% endfor %}</div>
<div id="regular-notices">
{% for card in regular %}{{ card|safe }}
{% endfor %}</div>
</div>
"""

# ----- Dates -----------------------------------------------------------------
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TOKEN_FORMAT = re.compile(r"\b(yyyy|yy|MMMM|MMM|MM|M|dd|d)\b")
_FALLBACK_FORMATS = ("%B %d, %Y", "%d %B %Y", "%m/%d/%Y", "%b %d, %Y")

def parse_date(raw: str):
    """Calendar date for a metadata value, or None."""
    raw = (raw or "").strip()
    if not raw:
        return None
    if _ISO_DATE.match(raw):
        try:
            return dt.date.fromisoformat(raw)
        except ValueError:
            return None
    try:
        # the date as written; a trailing offset is not applied
        return dt.datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return dt.datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None

def apply_format(d: dt.date, fmt: str) -> str:
    tokens = {
        "yyyy": f"{d.year:04d}",
        "yy": f"{d.year % 100:02d}",
        "MMMM": MONTHS[d.month - 1],
        "MMM": MONTHS[d.month - 1][:3],
        "MM": f"{d.month:02d}",
        "M": str(d.month),
        "dd": f"{d.day:02d}",
        "d": str(d.day),
    }
    return _TOKEN_FORMAT.sub(lambda m: tokens[m.group(0)], fmt)

def guess_locale_from_example(example: str):
    if re.search(r"[A-Za-z]+\s+\d{1,2},\s+\d{4}", example or ""):
        return "en-US"   # May 21, 2025
    if re.search(r"\d{1,2}\s+[A-Za-z]+\s+\d{4}", example or ""):
        return "en-GB"   # 21 May 2025
    if re.search(r"\d{2}/\d{2}/\d{4}", example or ""):
        return "en-US"   # 05/21/2025
    return None

def format_locale_date(d: dt.date, locale: str) -> str:
    if locale == "en-GB":
        return f"{d.day} {MONTHS[d.month - 1]} {d.year}"
    return f"{MONTHS[d.month - 1]} {d.day}, {d.year}"

def process_date(raw: str, format_hint="", default_locale="en-US", default_format="") -> str:
    d = parse_date(raw)
    if d is None:
        log(f"WARN unparsable date {raw!r}; shown as written")
        return raw
    hint = format_hint or default_format
    if _TOKEN_FORMAT.search(hint or ""):
        return apply_format(d, hint)
    return format_locale_date(d, guess_locale_from_example(hint) or default_locale)

# ----- Values ----------------------------------------------------------------
def value_html(value: str) -> str:
    """Markup for a metadata value; only the trademark marker survives as HTML."""
    return TM_MARKER.join(html.escape(html.unescape(part), quote=False) for part in value.split(TM_MARKER))

def render_value(label, value, solo=False, style=None, format_hint="", display=None) -> str:
    display = display or {}
    if style == "date":
        value = process_date(
            value, format_hint,
            default_locale=display.get("defaultLocale", "en-US"),
            default_format=display.get("defaultDateFormat", ""),
        )
    markup = value_html(value)
    label = html.escape(label)
    return f"<strong>{label}:</strong> {markup}" if solo else f"{label}: {markup}"

# ----- Entries ---------------------------------------------------------------
def is_pinned(entry: dict) -> bool:
    return is_truthy(entry.get("doc-pinned"))

def filter_for_mode(entries: list, mode: str) -> list:
    def keep(e):
        status = str(e.get("doc-status") or "").strip().lower()
        if mode == "all":
            return True
        if mode == "draft":
            return status == "draft"
        return status in ("", "active")
    return [e for e in entries if keep(e)]

def sort_entries(entries: list) -> list:
    def date_key(e):
        return parse_date(str(e.get("doc-date") or "")) or dt.date.min
    pinned = sorted((e for e in entries if is_pinned(e)), key=date_key, reverse=True)
    regular = sorted((e for e in entries if not is_pinned(e)), key=date_key, reverse=True)
    return pinned + regular

def render_entry(entry: dict, grouped: dict, folder: str, config: dict) -> str:
    display = config.get("display", {})
    blocks = []
    for group, fields in grouped.items():
        items = []
        for f in fields:
            if f.key == "doc-title" or not entry.get(f.key):
                continue
            items.append({
                "css": "meta " + f.style if f.style else "meta",
                "html": render_value(f.label, str(entry[f.key]), group == SOLO_GROUP,
                                     f.style, f.format_hint, display),
            })
        if items:
            blocks.append({"solo": group == SOLO_GROUP, "items": items})

    return jinja2.Template(ENTRY_TEMPLATE, autoescape=True).render(
        pinned=is_pinned(entry) and display.get("enablePushpinIcon", True),
        pushpin=PUSHPIN_SRC,
        title=html.unescape(str(entry.get("doc-title") or "Untitled")),
        blocks=blocks,
        folder=folder,
        filename=entry.get("filename", ""),
    )

def render_listing(fields: list, entries: list, folder: str, config: dict) -> str:
    grouped = group_fields(fields)
    visible = sort_entries(filter_for_mode(entries, publish_mode(config)))
    pinned = [render_entry(e, grouped, folder, config) for e in visible if is_pinned(e)]
    regular = [render_entry(e, grouped, folder, config) for e in visible if not is_pinned(e)]
    return jinja2.Template(LISTING_TEMPLATE, autoescape=True, keep_trailing_newline=True).render(
        folder=folder, pinned=pinned, regular=regular,
    )

def render_folder_listing(root: Path, folder: str, config: dict) -> str:
    try:
        fields = load_template_fields(root, folder)
        entries = load_json(manifest_path(root, folder))
        if not isinstance(entries, list):
            raise ValueError("manifest is not a JSON array")
    except (OSError, ValueError) as e:
        log(f"WARN {folder}: failed to load template or manifest: {e}")
        return FALLBACK_HTML
    return render_listing(fields, entries, folder, config)

def generate_listings(root: Path, config: dict, folders=None) -> dict:
    root = Path(root)
    folders = get_all_content_folders(root) if folders is None else folders
    stats = {"written": 0, "unchanged": 0}
    for folder in folders:
        out = root / LISTINGS_DIR / f"{folder}.html"
        if write_text_if_changed(out, render_folder_listing(root, folder, config)):
            stats["written"] += 1
            log(f"wrote {out}")
        else:
            stats["unchanged"] += 1
    return stats

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Render static listing fragments into _listings/")
    ap.add_argument("--root", default=".", help="Site root (default: current directory)")
    ap.add_argument("--folder", action="append", help="Only this content folder (repeatable)")
    args = ap.parse_args(argv)
    root = Path(args.root)
    try:
        stats = generate_listings(root, load_site_config(root), args.folder)
    except ConfigError as e:
        log(f"ERROR: {e}")
        return 1
    log("done; " + ", ".join(f"{k}={v}" for k, v in stats.items()))
    return 0

if __name__ == "__main__":
    sys.exit(main())
