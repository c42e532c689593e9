import base64

import fitz

from takeoff import rasterize

from .conftest import make_pdf


def test_page_count():
    doc = rasterize.open_pdf(make_pdf(pages=3))
    assert rasterize.page_count(doc) == 3


def test_page_scale_never_upscales():
    assert rasterize.page_scale(612, 792, 1536) == 1.0
    assert rasterize.page_scale(3072, 1536, 1536) == 0.5
    assert rasterize.page_scale(1000, 4000, 2000) == 0.5


def test_large_sheet_is_downscaled_to_max_dimension():
    doc = rasterize.open_pdf(make_pdf(width=3072, height=1536))
    jpeg = rasterize.page_to_jpeg(doc, 1)

    image = fitz.Pixmap(jpeg)
    assert (image.width, image.height) == (1536, 768)


def test_data_url_is_base64_jpeg():
    doc = rasterize.open_pdf(make_pdf())
    url = rasterize.page_to_data_url(doc, 1, quality=50)

    prefix = "data:image/jpeg;base64,"
    assert url.startswith(prefix)
    raw = base64.b64decode(url[len(prefix):])
    assert raw[:2] == b"\xff\xd8"
    assert rasterize.data_url_size_kb(url) == round(len(url) * 0.75 / 1024)
