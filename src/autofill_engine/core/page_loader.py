"""Builds a :class:`LiveDocument` from a file, a URL or a rendered page."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import AutofillConfig
from .dom import LiveDocument

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) autofill-engine"


class PageLoadError(Exception):
    """Raised when a page cannot be fetched or rendered."""


def load_document_from_file(path: Path, url: str = "") -> LiveDocument:
    path = Path(path)
    try:
        html = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PageLoadError(f"cannot read {path}: {exc}") from exc
    return LiveDocument.from_html(html, url=url or path.resolve().as_uri())


def fetch_static_html(url: str, timeout_ms: int) -> str:
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout_ms / 1000)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise PageLoadError(f"failed to fetch {url}: {exc}") from exc
    return response.text


def render_html(url: str, *, headless: bool, timeout_ms: int) -> str:
    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=headless)
            try:
                page = browser.new_page()
                page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
                return page.content()
            finally:
                browser.close()
    except PlaywrightError as exc:
        raise PageLoadError(f"failed to render {url}: {exc}") from exc


def load_document_from_url(
    url: str,
    *,
    render: bool = False,
    config: Optional[AutofillConfig] = None,
) -> LiveDocument:
    config = config or AutofillConfig()
    logger.debug("Loading %s (render=%s)", url, render)
    if render:
        html = render_html(url, headless=config.headless, timeout_ms=config.navigation_timeout_ms)
    else:
        html = fetch_static_html(url, config.navigation_timeout_ms)
    return LiveDocument.from_html(html, url=url)


def load_document(source: str, *, render: bool = False, config: Optional[AutofillConfig] = None) -> LiveDocument:
    """Treats ``source`` as a URL when it has an http(s) scheme, else as a path."""

    if source.startswith(("http://", "https://")):
        return load_document_from_url(source, render=render, config=config)
    return load_document_from_file(Path(source))
