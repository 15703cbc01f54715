from __future__ import annotations

from io import BytesIO
from typing import Any, Dict

from flask import Flask, Response, current_app, jsonify, render_template_string, request

from mandelweb.cache import RenderCache
from mandelweb.config import normalise_config
from mandelweb.palette import build_palettes
from mandelweb.params import get_params
from mandelweb.pipeline import render_cached
from mandelweb.util.logging_setup import get_logger

MAIN_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Mandelbrot Set</title>
</head>
<body>
    <form action="/" method="get">
        <label>Size <input name="sx" value="{{ p.sx }}" size="5"> x <input name="sy" value="{{ p.sy }}" size="5"></label>
        <label>Iterations <input name="iter" value="{{ p.iter }}" size="6"></label>
        <label>Re <input name="x0" value="{{ p.x0 }}"> .. <input name="x1" value="{{ p.x1 }}"></label>
        <label>Im <input name="y0" value="{{ p.y0 }}"> .. <input name="y1" value="{{ p.y1 }}"></label>
        <select name="pal">
        {% for name in palettes %}
            <option value="{{ name }}"{% if name == p.pal %} selected{% endif %}>{{ name }}</option>
        {% endfor %}
        </select>
        <button type="submit">Render</button>
    </form>
    <img src="/mandel?{{ p.url() }}" width="{{ p.sx }}" height="{{ p.sy }}" alt="Mandelbrot set">
</body>
</html>
"""


def _state() -> Dict[str, Any]:
    return current_app.extensions["mandelweb"]


def index():
    st = _state()
    p = get_params(request.args, st["palettes"], st["cfg"]["default_palette"])
    return render_template_string(MAIN_TEMPLATE, p=p, palettes=sorted(st["palettes"]))


def mandel():
    st = _state()
    cfg = st["cfg"]
    p = get_params(request.args, st["palettes"], cfg["default_palette"])
    img = render_cached(
        st["cache"], p, st["palettes"][p.pal],
        radius=cfg["escape_radius"], workers=cfg["workers"],
    )
    buf = BytesIO()
    img.to_image().save(buf, format="PNG")
    return Response(buf.getvalue(), mimetype="image/png")


def palettes():
    return jsonify(sorted(_state()["palettes"]))


def create_app(cfg: Dict[str, Any]) -> Flask:
    pals = build_palettes()
    cfg = normalise_config(cfg, pals)

    app = Flask(__name__)
    app.extensions["mandelweb"] = {
        "cfg": cfg,
        "palettes": pals,
        "cache": RenderCache(cfg["cache_size"]),
    }
    app.add_url_rule("/", "index", index)
    app.add_url_rule("/mandel", "mandel", mandel)
    app.add_url_rule("/palettes", "palettes", palettes)

    get_logger("server").info("App ready cache_size=%s radius=%s workers=%s palettes=%s",
                              cfg["cache_size"], cfg["escape_radius"], cfg["workers"], ",".join(sorted(pals)))
    return app
