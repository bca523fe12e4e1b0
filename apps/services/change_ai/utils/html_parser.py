"""
HTML Parsing Utilities

BeautifulSoup passes for turning a product page into model-sized text, and
for pulling embedded JSON-LD blocks out of it. All functions are
best-effort: html.parser repairs malformed markup and nothing here raises.
"""

import json
import logging
import re
from typing import Any, Iterator, List

from bs4 import BeautifulSoup, Comment

logger = logging.getLogger(__name__)

NOISE_TAGS = ("script", "style")
JSON_LD_TYPE = "application/ld+json"

WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_MAX_LENGTH = 50000
TRUNCATION_MARKER = "..."


def _is_json_ld(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower() == JSON_LD_TYPE


def _strip_noise(html: str) -> BeautifulSoup:
    """Parse the page and drop script/style elements and comments."""
    soup = BeautifulSoup(html, "html.parser")

    for tag in NOISE_TAGS:
        for elem in soup.find_all(tag):
            elem.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    return soup


def clean_html(html: str) -> str:
    """Drop script/style blocks and comments, collapse whitespace."""
    cleaned = str(_strip_noise(html))
    return WHITESPACE_RE.sub(" ", cleaned).strip()


def extract_text_content(html: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Reduce HTML to its visible text.

    Element text is joined with spaces, whitespace runs collapse, and the
    result is cut to ``max_length`` characters with TRUNCATION_MARKER
    appended when it was longer. The cut is a plain character count.
    """
    text = _strip_noise(html).get_text(" ")
    text = WHITESPACE_RE.sub(" ", text).strip()
    if len(text) > max_length:
        text = text[:max_length] + TRUNCATION_MARKER
    return text


def extract_json_ld(html: str) -> List[Any]:
    """
    Parse every <script type="application/ld+json"> block in the page.

    Blocks whose body is not valid JSON are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")

    results: List[Any] = []
    for script in soup.find_all("script", type=_is_json_ld):
        body = script.get_text().strip()
        if not body:
            continue
        try:
            results.append(json.loads(body))
        except json.JSONDecodeError:
            logger.debug("Skipping JSON-LD block that is not valid JSON")
            continue
    return results


def iter_json_ld_nodes(blocks: List[Any]) -> Iterator[dict]:
    """
    Walk parsed JSON-LD blocks in document order.

    Top-level arrays and @graph containers are expanded so nested nodes
    are seen as well.
    """
    for block in blocks:
        if isinstance(block, list):
            yield from iter_json_ld_nodes(block)
        elif isinstance(block, dict):
            yield block
            graph = block.get("@graph")
            if isinstance(graph, list):
                yield from iter_json_ld_nodes(graph)
