from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from mandelweb.cache import Fingerprint

# Image size in pixels
MIN_SX, MAX_SX, DFL_SX = 320, 5120, 640
MIN_SY, MAX_SY, DFL_SY = 240, 4096, 480
# Iterations per pixel
MIN_ITER, MAX_ITER, DFL_ITER = 16, 10240, 64
# Function domain: real in [MIN_X, MAX_X], imaginary in [MIN_Y, MAX_Y]
MIN_X, MAX_X = -2.0, 1.0
MIN_Y, MAX_Y = -1.2, 1.2
DFL_X0, DFL_X1 = MIN_X, MAX_X
DFL_Y0, DFL_Y1 = MIN_Y, MAX_Y

DFL_PALETTE = "gray"


@dataclass(frozen=True)
class Params:
    sx: int = DFL_SX
    sy: int = DFL_SY
    iter: int = DFL_ITER
    x0: float = DFL_X0
    y0: float = DFL_Y0
    x1: float = DFL_X1
    y1: float = DFL_Y1
    pal: str = DFL_PALETTE

    def url(self) -> str:
        return (f"sx={self.sx}&sy={self.sy}&iter={self.iter}"
                f"&x0={self.x0!r}&y0={self.y0!r}&x1={self.x1!r}&y1={self.y1!r}&pal={self.pal}")

    def fingerprint(self) -> Fingerprint:
        return Fingerprint(width=self.sx, height=self.sy, max_iter=self.iter,
                           x0=self.x0, y0=self.y0, x1=self.x1, y1=self.y1)


_INT_RE = re.compile(r"[+-]?[0-9]+")

def _clamp(v, lo, hi):
    return min(max(v, lo), hi)

def val_int(raw: Any, lo: int, hi: int, dfl: int) -> int:
    # Plain decimal only: int() would also take " 5 " and "1_000".
    if not isinstance(raw, str) or not _INT_RE.fullmatch(raw):
        return dfl
    v = int(raw)
    return _clamp(v, lo, hi)

def val_float(raw: Any, lo: float, hi: float, dfl: float) -> float:
    try:
        v = float(raw)
    except (TypeError, ValueError):
        return dfl
    if v != v:  # nan
        return dfl
    return _clamp(v, lo, hi)


def get_params(form: Mapping[str, Any], palettes: Optional[Iterable[str]] = None,
               default_palette: str = DFL_PALETTE) -> Params:
    """Build Params from request values. Missing or malformed values take
    their defaults, out-of-range values are clamped."""
    pal = form.get("pal") or default_palette
    if palettes is not None and pal not in palettes:
        pal = default_palette
    return Params(
        sx=val_int(form.get("sx"), MIN_SX, MAX_SX, DFL_SX),
        sy=val_int(form.get("sy"), MIN_SY, MAX_SY, DFL_SY),
        iter=val_int(form.get("iter"), MIN_ITER, MAX_ITER, DFL_ITER),
        x0=val_float(form.get("x0"), MIN_X, MAX_X, DFL_X0),
        x1=val_float(form.get("x1"), MIN_X, MAX_X, DFL_X1),
        y0=val_float(form.get("y0"), MIN_Y, MAX_Y, DFL_Y0),
        y1=val_float(form.get("y1"), MIN_Y, MAX_Y, DFL_Y1),
        pal=pal,
    )
