"""
enrichment.py
-------------

Fetch a tool's landing page and extract a catalog suggestion (name,
description, preview image, favicon) from its OpenGraph and meta tags.
"""

from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from app.logger import logger

USER_AGENT = "Mozilla/5.0 VaultXBot"


class EnrichmentError(Exception):
    """Raised when the page cannot be fetched."""


def parse_html(html):
    return BeautifulSoup(html, "html.parser")


def _meta(soup, **attrs):
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    return (tag.get("content") or "").strip()


def _title(soup):
    if soup.title is None or soup.title.string is None:
        return ""
    return soup.title.string.strip()


def _icon_href(soup):
    # ``rel`` is multi-valued: "icon", "shortcut icon", "apple-touch-icon"...
    for link in soup.find_all("link", href=True):
        rel = [value.lower() for value in link.get("rel") or []]
        if "icon" in rel:
            return link["href"].strip()
    return ""


def extract_suggestion(url, html):
    """
    Build a tool suggestion from already-fetched ``html``.

    OpenGraph tags win over ``<title>`` and the description meta. Relative
    image and icon links are resolved against ``url``.
    """
    soup = parse_html(html)
    image = _meta(soup, property="og:image")
    icon = _icon_href(soup)
    return {
        "name": _meta(soup, property="og:title")
        or _title(soup)
        or urlparse(url).netloc
        or url,
        "website": url,
        "description": _meta(soup, property="og:description")
        or _meta(soup, name="description"),
        "og_image_url": urljoin(url, image) if image else "",
        "favicon_url": urljoin(url, icon) if icon else "",
    }


def enrich_from_url(url, timeout=10):
    """
    Download ``url`` and return a catalog suggestion.

    Raises:
        EnrichmentError: on network failure or a non-2xx response.
    """
    try:
        response = requests.get(
            url, headers={"User-Agent": USER_AGENT}, timeout=timeout
        )
    except requests.exceptions.Timeout as e:
        logger.error("Timeout fetching page for enrichment.", url=url)
        raise EnrichmentError("Timed out fetching page") from e
    except requests.exceptions.RequestException as e:
        logger.error("Error fetching page for enrichment.", url=url, error=str(e))
        raise EnrichmentError(f"Failed to fetch page: {e}") from e

    if not response.ok:
        logger.warning(
            "Enrichment target returned an error.",
            url=url,
            status_code=response.status_code,
        )
        raise EnrichmentError(
            f"Page returned status {response.status_code}"
        )
    return extract_suggestion(url, response.text)
