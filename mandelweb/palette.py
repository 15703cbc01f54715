from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, MutableSequence, NamedTuple, Optional, Sequence, Tuple


class Color(NamedTuple):
    r: int
    g: int
    b: int
    a: int


class ControlPoint(NamedTuple):
    idx: int
    color: Color


Palette = Tuple[Color, ...]

TRANSPARENT = Color(0, 0, 0, 0)


def _tdiv(a: int, b: int) -> int:
    # Integer division truncating towards zero (b > 0).
    q = abs(a) // b
    return -q if a < 0 else q


def linterp(pal: MutableSequence[Optional[Color]], lo: int = 0, hi: Optional[int] = None) -> None:
    """Fill ``pal[lo+1:hi]`` by interpolating between ``pal[lo]`` and ``pal[hi]``.

    ``hi`` is inclusive and defaults to the last slot. Both end slots must
    already hold a ``Color``. Spans of two slots or fewer are left alone.
    """
    if hi is None:
        hi = len(pal) - 1
    n = hi - lo + 1
    if n <= 2:
        return
    s, e = pal[lo], pal[hi]
    deltas = [ec - sc for sc, ec in zip(s, e)]
    for i in range(1, n - 1):
        pal[lo + i] = Color(*(sc + _tdiv(i * d, n - 1) for sc, d in zip(s, deltas)))


def lin_grad(pts: Sequence[ControlPoint], pal: MutableSequence[Optional[Color]]) -> None:
    """Fill ``pal`` with a gradient passing through the control points.

    ``pts`` must be sorted by index and every index must be a valid slot of
    ``pal``. Nothing is extrapolated: slots before the first point and after
    the last one are left untouched.

        pts: (0, black) (255, red) (510, black)

        +---+---+       +---+---+---+       +---+---+
        | 0 | 1   ...    FE | FF| FE   ...    1 | 0 |   red channel
        +---+---+       +---+---+---+       +---+---+
          0   1          254 255 256         509 510
    """
    if len(pts) < 2:
        raise ValueError("lin_grad: at least 2 control points are required")
    pal[pts[0].idx] = pts[0].color
    for prev, cur in zip(pts, pts[1:]):
        pal[cur.idx] = cur.color
        linterp(pal, prev.idx, cur.idx)


def lin_grad2(colors: Sequence[Color], size: int) -> List[Color]:
    """Spread ``colors`` evenly over ``size`` slots and interpolate between them.

    The first color lands on slot 0, the last on slot ``size - 1`` and the
    others at equal distances in between. Between 2 and ``size`` colors must
    be given.
    """
    n = len(colors)
    if n < 2 or n > size:
        raise ValueError(f"lin_grad2: need between 2 and {size} colors, got {n}")
    pal: List[Optional[Color]] = [None] * size
    pal[0] = colors[0]
    p = 0
    for i in range(1, n - 1):
        c = i * size // (n - 1)
        pal[c] = colors[i]
        linterp(pal, p, c)
        p = c
    pal[size - 1] = colors[n - 1]
    linterp(pal, p, size - 1)
    return pal  # type: ignore[return-value]


def gray_pal(size: int, alpha: int, reverse: bool = False) -> List[Color]:
    s = Color(0, 0, 0, alpha)
    e = Color(alpha, alpha, alpha, alpha)
    if reverse:
        s, e = e, s
    return lin_grad2([s, e], size)


def _hex(code: int) -> Color:
    return Color((code >> 24) & 0xff, (code >> 16) & 0xff, (code >> 8) & 0xff, code & 0xff)


_GRADIENTS_256 = {
    "gold1": [
        (0, 0x000000ff),
        (220, 0x775500ff),
        (245, 0xffff00ff),
        (255, 0xffffffff),
    ],
    "gold2": [
        (0, 0x000000ff),
        (75, 0x772200ff),
        (100, 0xffff00ff),
        (125, 0xffffffff),
        (150, 0x772200ff),
        (200, 0x000000ff),
        (225, 0x772200ff),
        (240, 0xffff00ff),
        (255, 0xffffffff),
    ],
    "blue1": [
        (0, 0x000000ff),
        (220, 0x000055ff),
        (245, 0x4444ffff),
        (255, 0xffffffff),
    ],
    "blue2": [
        (0, 0x000000ff),
        (50, 0x222255ff),
        (100, 0x101055ff),
        (150, 0xffffffff),
        (175, 0x5555ffff),
        (200, 0x222277ff),
        (225, 0x000020ff),
        (240, 0x222277ff),
        (255, 0xffffffff),
    ],
}


def build_palettes(size: int = 256) -> Mapping[str, Palette]:
    if size != 256:
        raise ValueError("build_palettes: the gradient tables are laid out for 256 slots")
    out = {
        "gray": tuple(gray_pal(size, 0xff, False)),
        "grayr": tuple(gray_pal(size, 0xff, True)),
    }
    for name, table in _GRADIENTS_256.items():
        pal: List[Optional[Color]] = [None] * size
        lin_grad([ControlPoint(idx, _hex(code)) for idx, code in table], pal)
        out[name] = tuple(pal)  # type: ignore[arg-type]
    return MappingProxyType(out)
