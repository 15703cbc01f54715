from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Sequence, Tuple

import numpy as np
from PIL import Image

from mandelweb.cache import Fingerprint
from mandelweb.palette import TRANSPARENT, Color, Palette
from mandelweb.renderers.escape import render_iterations
from mandelweb.util.logging_setup import get_logger


@dataclass(frozen=True, eq=False)
class MandelImage:
    """A rendered region of the complex plane.

    ``pix`` holds the iteration count of every pixel (row-major, shape
    ``(height, width)``). ``histo[i]`` is the number of pixels with exactly
    ``i`` iterations. ``cnhisto[i]`` is the fraction of escaped pixels with
    at most ``i`` iterations. The three arrays are read-only and are shared
    between an image and its repalette'd copies.
    """

    c0: complex
    c1: complex
    max_iter: int
    radius: float
    palette: Palette
    width: int
    height: int
    pix: np.ndarray
    histo: np.ndarray
    cnhisto: np.ndarray

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x: int, y: int) -> Color:
        if not self._inside(x, y):
            return TRANSPARENT
        it = int(self.pix[y, x])
        if it == self.max_iter:
            return self.palette[0]
        idx = int(self.cnhisto[it] * (len(self.palette) - 1))
        return self.palette[idx]

    def opaque(self) -> bool:
        return all(c.a == 0xff for c in self.palette)

    def repalette(self, palette: Sequence[Color]) -> "MandelImage":
        return replace(self, palette=tuple(palette))

    def fingerprint(self) -> Fingerprint:
        return Fingerprint(
            width=self.width,
            height=self.height,
            max_iter=self.max_iter,
            x0=self.c0.real,
            y0=self.c0.imag,
            x1=self.c1.real,
            y1=self.c1.imag,
        )

    def color_indices(self) -> np.ndarray:
        # Same mapping as at(), for all pixels at once.
        scaled = (self.cnhisto * (len(self.palette) - 1)).astype(np.intp)
        scaled = np.append(scaled, 0)  # slot max_iter: in the set
        return scaled[self.pix]

    def to_image(self) -> Image.Image:
        lut = np.array(self.palette, dtype=np.uint8).reshape(-1, 4)
        return Image.fromarray(lut[self.color_indices()])


def _cumulative_histogram(histo: np.ndarray, max_iter: int) -> np.ndarray:
    # Pixels in the set (slot max_iter) always get palette[0], and counting
    # them would push every escaped pixel towards the low end of the palette.
    escaped = histo[:max_iter]
    cnhisto = np.cumsum(escaped, dtype=np.float64)
    total = int(escaped.sum())
    if total > 0:
        cnhisto /= total
    # total == 0: nothing escaped, cnhisto stays all zeros and is never read.
    return cnhisto


def render_mandel(
    width: int,
    height: int,
    palette: Sequence[Color],
    c0: complex,
    c1: complex,
    max_iter: int,
    radius: float,
    *,
    workers: int = 1,
) -> MandelImage:
    if max_iter <= 0 or radius <= 0 or width <= 0 or height <= 0:
        raise ValueError("render_mandel: invalid parameters")
    logger = get_logger("mandel")
    c0, c1 = complex(c0), complex(c1)

    start = time.perf_counter()
    pix = render_iterations(
        width=width, height=height, c0=c0, c1=c1, max_iter=max_iter, radius=radius, workers=workers
    )
    histo = np.bincount(pix.ravel(), minlength=max_iter + 1).astype(np.int64)
    cnhisto = _cumulative_histogram(histo, max_iter)
    for arr in (pix, histo, cnhisto):
        arr.flags.writeable = False
    logger.info("Rendered %sx%s iter=%s c0=%s c1=%s in %.3fs",
                width, height, max_iter, c0, c1, time.perf_counter() - start)

    return MandelImage(
        c0=c0,
        c1=c1,
        max_iter=max_iter,
        radius=float(radius),
        palette=tuple(palette),
        width=width,
        height=height,
        pix=pix,
        histo=histo,
        cnhisto=cnhisto,
    )
