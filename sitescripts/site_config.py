# sitescripts/site_config.py
"""
Load site-config.json from the site root, deep-merged over defaults.

The returned dict is passed explicitly to every stage; nothing here is cached
at module level.

Environment overrides (CI friendly):
  PUBLISH_MODE   -> mode.publish   (live | draft | all)
  SITE_BASE_URL  -> site.baseUrl
"""

import os, copy, json
from pathlib import Path

from .utils import ConfigError

def log(*args): print("[config]", *args, flush=True)

CONFIG_NAME = "site-config.json"

PUBLISH_MODES = ("live", "draft", "all")

DEFAULT_CONFIG = {
    "site": {
        "baseUrl": "https://williamsfamilyestate.org",
    },
    "css": {
        "autoOrganize": True,
        "allowInlineOverrides": True,
    },
    "display": {
        "defaultDateFormat": "MMMM d, yyyy",
        "defaultLocale": "en-US",
        "enablePushpinIcon": True,
    },
    "mode": {
        "debug": False,
        "publish": "live",
    },
    "automation": {
        "generateSitemap": True,
        "archiveToInternetArchive": True,
    },
}

def deep_merge(target: dict, source: dict) -> dict:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            target[key] = deep_merge(target[key], value)
        else:
            target[key] = value
    return target

def load_site_config(root: Path, env=None) -> dict:
    env = os.environ if env is None else env
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = Path(root) / CONFIG_NAME
    if path.exists():
        try:
            parsed = json.loads(path.read_text("utf-8"))
            if not isinstance(parsed, dict):
                raise ValueError("top level is not an object")
            for section, value in parsed.items():
                if isinstance(config.get(section), dict) and not isinstance(value, dict):
                    log(f"{path}: section {section!r} must be an object, got {value!r}; using defaults")
                    continue
                deep_merge(config, {section: value})
        except (OSError, ValueError) as e:
            log(f"{path} invalid ({e}); using defaults")
    else:
        log(f"{path} not found; using defaults")

    if env.get("PUBLISH_MODE", "").strip():
        config["mode"]["publish"] = env["PUBLISH_MODE"].strip()
    if env.get("SITE_BASE_URL", "").strip():
        config["site"]["baseUrl"] = env["SITE_BASE_URL"].strip()

    publish_mode(config)
    return config

def publish_mode(config: dict) -> str:
    mode = str(config.get("mode", {}).get("publish") or "live").strip().lower()
    if mode not in PUBLISH_MODES:
        raise ConfigError(f"mode.publish must be one of {', '.join(PUBLISH_MODES)}; got {mode!r}")
    return mode

def accepted_statuses(config: dict) -> frozenset:
    """Statuses that make it into a folder manifest."""
    if publish_mode(config) == "live":
        return frozenset({"active"})
    return frozenset({"active", "draft"})

def automation_enabled(config: dict, key: str) -> bool:
    return bool(config.get("automation", {}).get(key, False))

def base_url(config: dict) -> str:
    return str(config.get("site", {}).get("baseUrl") or "").rstrip("/")
