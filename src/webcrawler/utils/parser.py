"""
HTML Parser Utilities

Functions for extracting page metadata and raw links from HTML.
"""

import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning
from bs4.builder import ParserRejectedMarkup

from webcrawler.core.errors import ExtractionError
from webcrawler.models.page import ExtractedPage

warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)


def _strip_nul(text: str) -> str:
    return text.replace("\x00", " ")


def _first_attr(value) -> str | None:
    # Multi-valued attributes come back as lists
    if isinstance(value, list):
        return value[0] if value else None
    return value


def extract_page(html: str) -> ExtractedPage:
    """
    Extract title, meta description and raw hrefs from HTML.

    Best effort: missing elements yield None / an empty list. Hrefs are
    returned unresolved, in document order.

    Args:
        html: Raw HTML string

    Returns:
        ExtractedPage

    Raises:
        ExtractionError: If the parser rejects the markup outright
    """
    try:
        soup = BeautifulSoup(_strip_nul(html), "html.parser")
    except ParserRejectedMarkup as e:
        raise ExtractionError(None, str(e)) from e

    title = None
    if soup.title is not None:
        title = soup.title.get_text().strip() or None

    description = None
    meta = soup.find("meta", attrs={"name": "description"})
    if meta is not None:
        description = _first_attr(meta.get("content"))

    hrefs = []
    for a in soup.find_all("a", href=True):
        href = _first_attr(a.get("href"))
        if href is not None:
            hrefs.append(href)

    return ExtractedPage(title=title, description=description, hrefs=hrefs)
