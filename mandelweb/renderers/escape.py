from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np
from numba import njit

from mandelweb.util.logging_setup import get_logger

@njit(nogil=True)
def _escape_rows(out, y0, y1, re0, im0, dx, dy, max_iter, radius):
    # out[py, px] is the number of completed iterations before |z| > radius,
    # or max_iter if the orbit never left the disc.
    width = out.shape[1]
    for py in range(y0, y1):
        im = im0 + py * dy
        for px in range(width):
            c = complex(re0 + px * dx, im)
            z = 0j
            n = 0
            while n < max_iter:
                z = z * z + c
                if abs(z) > radius:
                    break
                n += 1
            out[py, px] = n

def _bands(height: int, band_height: int) -> List[Tuple[int, int]]:
    bands: List[Tuple[int, int]] = []
    y = 0
    while y < height:
        y1 = min(height, y + band_height)
        bands.append((y, y1))
        y = y1
    return bands

def render_iterations(
    *,
    width: int,
    height: int,
    c0: complex,
    c1: complex,
    max_iter: int,
    radius: float,
    workers: int = 1,
    band_height: int = 32,
) -> np.ndarray:
    logger = get_logger("escape")

    dx = (c1.real - c0.real) / width
    dy = (c1.imag - c0.imag) / height
    out = np.zeros((height, width), dtype=np.int32)

    args = (float(c0.real), float(c0.imag), float(dx), float(dy), int(max_iter), float(radius))
    if workers <= 1:
        _escape_rows(out, 0, height, *args)
        return out

    bands = _bands(height, band_height)
    logger.debug("Escape-time pass %sx%s iter=%s bands=%s workers=%s", width, height, max_iter, len(bands), workers)
    # Bands cover disjoint rows of out; the kernel releases the GIL.
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="escape") as pool:
        futures = [pool.submit(_escape_rows, out, y0, y1, *args) for y0, y1 in bands]
        for f in futures:
            f.result()
    return out
