import json
from typing import Any, Dict, Iterable, Optional

DEFAULTS: Dict[str, Any] = {
    "host": "127.0.0.1",
    "port": 8080,
    "cache_size": 10,
    "escape_radius": 2.0,
    "workers": 1,
    "default_palette": "gray",
    "log_file": None,
}

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if not config_path:
        return dict(DEFAULTS)
    with open(config_path, "r", encoding="utf-8") as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ValueError("Config JSON must be an object.")
    return cfg

def normalise_config(cfg: Dict[str, Any], palettes: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    out = dict(DEFAULTS)
    out.update(cfg)

    out["host"] = str(out["host"])
    out["port"] = int(out["port"])
    out["cache_size"] = int(out["cache_size"])
    out["escape_radius"] = float(out["escape_radius"])
    out["workers"] = int(out["workers"])
    out["default_palette"] = str(out["default_palette"])
    out["log_file"] = str(out["log_file"]) if out["log_file"] else None

    for k in ("port", "cache_size", "workers"):
        if out[k] <= 0:
            raise ValueError(f"{k} must be positive.")
    if out["escape_radius"] <= 0:
        raise ValueError("escape_radius must be positive.")
    if palettes is not None and out["default_palette"] not in palettes:
        raise ValueError(f"Unknown default_palette: {out['default_palette']}")
    return out
