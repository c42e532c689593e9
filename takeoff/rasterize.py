import base64
import logging

import fitz
from django.conf import settings

logger = logging.getLogger(__name__)


# =================== PDF PAGE PROCESSING ===================
def open_pdf(data: bytes):
    return fitz.open(stream=data, filetype="pdf")


def page_count(doc) -> int:
    return doc.page_count


def page_scale(width: float, height: float, max_dimension: int) -> float:
    largest = max(width, height)
    if largest > max_dimension:
        return max_dimension / largest
    return 1.0


def page_to_jpeg(doc, page_number: int, max_dimension: int = None, quality: int = None) -> bytes:
    """Render a 1-based page to JPEG, never larger than ``max_dimension`` px."""
    max_dimension = max_dimension or settings.RASTER_MAX_DIMENSION
    quality = quality or settings.RASTER_JPEG_QUALITY

    page = doc.load_page(page_number - 1)
    rect = page.rect
    scale = page_scale(rect.width, rect.height, max_dimension)
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    return pix.tobytes(output="jpeg", jpg_quality=quality)


def page_to_data_url(doc, page_number: int, **kwargs) -> str:
    jpeg = page_to_jpeg(doc, page_number, **kwargs)
    return "data:image/jpeg;base64," + base64.b64encode(jpeg).decode("ascii")


def data_url_size_kb(data_url: str) -> int:
    return round(len(data_url) * 0.75 / 1024)
