from __future__ import annotations

from typing import Sequence

from mandelweb.cache import RenderCache
from mandelweb.mandel import MandelImage, render_mandel
from mandelweb.palette import Color
from mandelweb.params import Params
from mandelweb.util.logging_setup import get_logger

def render_cached(
    cache: RenderCache,
    params: Params,
    palette: Sequence[Color],
    *,
    radius: float = 2.0,
    workers: int = 1,
) -> MandelImage:
    """Return the image for ``params`` colored with ``palette``, rendering it
    only if the cache has no image for the same region, size and iterations."""
    logger = get_logger("pipeline")
    fp = params.fingerprint()

    img = cache.lookup(fp)
    if img is None:
        logger.debug("Cache miss %s", fp)
        img = render_mandel(
            params.sx, params.sy, palette,
            complex(params.x0, params.y0), complex(params.x1, params.y1),
            params.iter, radius, workers=workers,
        )
        cache.add(img)
    else:
        logger.debug("Cache hit %s", fp)

    # Cached images keep whatever palette they were first rendered with.
    return img.repalette(palette)
