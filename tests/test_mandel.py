import numpy as np
import pytest

from mandelweb.cache import Fingerprint
from mandelweb.palette import TRANSPARENT, Color, build_palettes, gray_pal
from mandelweb.mandel import render_mandel

GRAY = tuple(gray_pal(256, 0xff))


@pytest.fixture(scope="module")
def img():
    return render_mandel(160, 120, GRAY, complex(-2.0, -1.2), complex(1.0, 1.2), 16, 2.0)


def test_mandel(img):
    assert img.bounds == (160, 120)
    assert img.pix.shape == (120, 160)
    assert len(img.histo) == 16 + 1
    assert len(img.cnhisto) == 16
    assert int(img.histo.sum()) == 160 * 120
    assert int(img.histo[16]) > 0


def test_iterations_in_range(img):
    assert img.pix.min() >= 0
    assert img.pix.max() <= 16
    assert np.array_equal(np.bincount(img.pix.ravel(), minlength=17), img.histo)


def test_cumulative_histogram(img):
    assert np.all(np.diff(img.cnhisto) >= 0)
    assert img.cnhisto[0] >= 0.0
    assert img.cnhisto[-1] == 1.0
    escaped = img.histo[:16].sum()
    assert img.cnhisto[3] == pytest.approx(img.histo[:4].sum() / escaped)


@pytest.mark.parametrize("args", [
    (0, 10, 16, 2.0),
    (10, 0, 16, 2.0),
    (10, 10, 0, 2.0),
    (10, 10, 16, 0.0),
    (-1, 10, 16, 2.0),
    (10, 10, 16, -2.0),
])
def test_invalid_parameters(args):
    w, h, it, r = args
    with pytest.raises(ValueError):
        render_mandel(w, h, GRAY, complex(-2, -1), complex(1, 1), it, r)


def test_in_set_pixels_use_first_color(img):
    y, x = np.argwhere(img.pix == img.max_iter)[0]
    assert img.at(int(x), int(y)) == GRAY[0]


def test_escaped_pixel_color(img):
    y, x = np.argwhere(img.pix < img.max_iter)[0]
    it = img.pix[y, x]
    assert img.at(int(x), int(y)) == GRAY[int(img.cnhisto[it] * 255)]


def test_escape_on_first_iteration():
    m = render_mandel(1, 1, GRAY, complex(3.0, 0.0), complex(4.0, 1.0), 8, 2.0)
    assert int(m.pix[0, 0]) == 0
    assert list(m.histo) == [1, 0, 0, 0, 0, 0, 0, 0, 0]
    assert np.all(m.cnhisto == 1.0)
    assert m.at(0, 0) == GRAY[255]


def test_all_pixels_in_set():
    m = render_mandel(8, 8, GRAY, complex(-0.1, -0.1), complex(0.1, 0.1), 16, 2.0)
    assert int(m.histo[16]) == 64
    assert int(m.histo[:16].sum()) == 0
    assert np.all(m.cnhisto == 0.0)
    assert not np.any(np.isnan(m.cnhisto))
    assert all(m.at(x, y) == GRAY[0] for x in range(8) for y in range(8))


def test_at_outside_image(img):
    assert img.at(-1, 0) == TRANSPARENT
    assert img.at(0, -1) == TRANSPARENT
    assert img.at(160, 0) == TRANSPARENT
    assert img.at(0, 120) == TRANSPARENT


def test_buffers_are_read_only(img):
    with pytest.raises(ValueError):
        img.pix[0, 0] = 3
    with pytest.raises(ValueError):
        img.histo[0] = 3
    with pytest.raises(ValueError):
        img.cnhisto[0] = 0.5


def test_repalette(img):
    red = tuple(Color(0xff, i, i, 0xff) for i in range(16))
    r = img.repalette(red)
    assert r.pix is img.pix
    assert r.histo is img.histo
    assert r.cnhisto is img.cnhisto
    assert r.palette == red
    assert img.palette == GRAY

    y, x = np.argwhere(img.pix == img.max_iter)[0]
    assert img.at(int(x), int(y)) == GRAY[0]
    assert r.at(int(x), int(y)) == red[0]


def test_opaque(img):
    assert img.opaque()
    assert not img.repalette(gray_pal(16, 0x80)).opaque()


def test_fingerprint(img):
    assert img.fingerprint() == Fingerprint(160, 120, 16, -2.0, -1.2, 1.0, 1.2)


def test_to_image_matches_at():
    pal = build_palettes()["gold2"]
    m = render_mandel(40, 30, pal, complex(-2.0, -1.2), complex(1.0, 1.2), 64, 2.0)
    im = m.to_image()
    assert im.mode == "RGBA"
    assert im.size == (40, 30)
    for y in range(30):
        for x in range(40):
            assert im.getpixel((x, y)) == tuple(m.at(x, y))


def test_workers_give_same_result(img):
    m = render_mandel(160, 120, GRAY, complex(-2.0, -1.2), complex(1.0, 1.2), 16, 2.0, workers=4)
    assert np.array_equal(m.pix, img.pix)
    assert np.array_equal(m.histo, img.histo)
    assert np.array_equal(m.cnhisto, img.cnhisto)


def test_radius_changes_counts():
    small = render_mandel(32, 24, GRAY, complex(-2.0, -1.2), complex(1.0, 1.2), 32, 2.0)
    large = render_mandel(32, 24, GRAY, complex(-2.0, -1.2), complex(1.0, 1.2), 32, 100.0)
    assert np.all(large.pix >= small.pix)
