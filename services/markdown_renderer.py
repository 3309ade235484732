"""Render model output (Markdown) to HTML for the result panel."""

from __future__ import annotations

import re
from urllib.parse import urlsplit
from xml.etree.ElementTree import Element

import markdown
from markdown.treeprocessors import Treeprocessor

EXTENSIONS = ["tables", "fenced_code", "sane_lists"]
SAFE_SCHEMES = {"", "http", "https", "mailto"}
URL_ATTRIBUTES = {"a": "href", "img": "src"}

_IGNORED_URL_CHARS = re.compile(r"[\x00-\x20\x7f]+")


def is_safe_url(url: str) -> bool:
    """True for relative URLs and http(s)/mailto links."""
    # Browsers ignore whitespace and control characters inside a scheme.
    cleaned = _IGNORED_URL_CHARS.sub("", url or "")
    try:
        scheme = urlsplit(cleaned).scheme.lower()
    except ValueError:
        return False
    return scheme in SAFE_SCHEMES


class UnsafeUrlFilter(Treeprocessor):
    """Drop link and image URLs with a scheme outside SAFE_SCHEMES."""

    def run(self, root: Element) -> None:
        for element in root.iter():
            attribute = URL_ATTRIBUTES.get(element.tag)
            if attribute is None or attribute not in element.attrib:
                continue
            if not is_safe_url(element.attrib[attribute]):
                del element.attrib[attribute]


def _build_renderer() -> markdown.Markdown:
    md = markdown.Markdown(extensions=EXTENSIONS, output_format="html")
    # Raw HTML from the model is shown as text, never injected.
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    # Runs after the inline processor (priority 20) has built the links.
    md.treeprocessors.register(UnsafeUrlFilter(md), "unsafe_url_filter", 5)
    return md


def render_markdown(text: str) -> str:
    """Convert Markdown text to an HTML fragment."""
    if not text:
        return ""
    return _build_renderer().convert(text)
