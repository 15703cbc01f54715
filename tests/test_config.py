import json

import pytest

from mandelweb.config import DEFAULTS, load_config, normalise_config


def test_defaults():
    assert load_config(None) == DEFAULTS
    assert normalise_config({}) == DEFAULTS


def test_load_file(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"port": "9000", "escape_radius": 4, "workers": 2}), encoding="utf-8")
    cfg = normalise_config(load_config(str(path)))
    assert cfg["port"] == 9000
    assert cfg["escape_radius"] == 4.0
    assert cfg["workers"] == 2
    assert cfg["cache_size"] == 10


def test_not_an_object(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


@pytest.mark.parametrize("key,value", [
    ("port", 0),
    ("cache_size", -1),
    ("workers", 0),
    ("escape_radius", 0.0),
    ("port", "eighty"),
])
def test_invalid_values(key, value):
    with pytest.raises(ValueError):
        normalise_config({key: value})


def test_unknown_default_palette():
    with pytest.raises(ValueError):
        normalise_config({"default_palette": "plaid"}, ["gray"])
    assert normalise_config({"default_palette": "gray"}, ["gray"])["default_palette"] == "gray"
