from __future__ import annotations

import argparse
import logging
from typing import Optional

from mandelweb.config import load_config, normalise_config
from mandelweb.mandel import render_mandel
from mandelweb.palette import build_palettes
from mandelweb.params import get_params
from mandelweb.util.logging_setup import configure_root_logging, get_logger

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mandelweb", description="Render the Mandelbrot set and serve it over HTTP.")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG","INFO","WARNING","ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default=None, help="Rotating log file path (overrides config.log_file).")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("serve", help="Serve the viewer page and rendered PNGs over HTTP.")
    s.add_argument("laddr", nargs="?", default=None, help="Listen address, [host]:port (defaults to config host/port).")

    r = sub.add_parser("render", help="Render a single image to a PNG file.")
    r.add_argument("output", type=str, help="Output PNG file.")
    for name in ("sx", "sy", "iter", "x0", "y0", "x1", "y1", "pal"):
        r.add_argument(f"--{name}", type=str, default=None)

    return p

def _split_laddr(laddr: str, host: str):
    h, sep, port = laddr.rpartition(":")
    if not sep:
        raise ValueError(f"Bad listen address: {laddr}")
    return (h or host), int(port)

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    logger = get_logger()

    try:
        pals = build_palettes()
        cfg = normalise_config(load_config(args.config), pals)
        configure_root_logging(level=log_level, log_file=args.log_file or cfg["log_file"])

        if args.cmd == "serve":
            from mandelweb.web.server import create_app

            host, port = cfg["host"], cfg["port"]
            if args.laddr:
                host, port = _split_laddr(args.laddr, host)
            app = create_app(cfg)
            logger.info("Listening on http://%s:%s", host, port)
            app.run(host=host, port=port, threaded=True)
            return 0

        if args.cmd == "render":
            form = {k: getattr(args, k) for k in ("sx", "sy", "iter", "x0", "y0", "x1", "y1", "pal")}
            p = get_params({k: v for k, v in form.items() if v is not None}, pals, cfg["default_palette"])
            img = render_mandel(p.sx, p.sy, pals[p.pal], complex(p.x0, p.y0), complex(p.x1, p.y1),
                                p.iter, cfg["escape_radius"], workers=cfg["workers"])
            img.to_image().save(args.output, format="PNG")
            logger.info("Image written: %s (%s)", args.output, p.url())
            return 0

        raise RuntimeError("Unknown command.")
    except ValueError as e:
        logger.error("%s", e)
        return 2

if __name__ == "__main__":
    raise SystemExit(main())
