"""
Markup extraction helpers shared by the scraping providers.

Everything here is stateless and works on BeautifulSoup documents parsed with
the stdlib html.parser backend.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

Node = Union[BeautifulSoup, Tag]

INFO_SEPARATOR = " / "

FULL_DATE_RE = re.compile(r'(\d{4})年(\d{1,2})月(\d{1,2})日')
YEAR_MONTH_RE = re.compile(r'(\d{4})年(\d{1,2})月')
YEAR_ONLY_RE = re.compile(r'(\d{4})年')
EPISODES_RE = re.compile(r'\d+话')
FLOAT_RE = re.compile(r'\d+(?:\.\d+)?')

# Bangumi encodes cover size in the path: /s/ small, /m/ medium, /l/ large
LOW_RES_SEGMENT_RE = re.compile(r'/s/|/m/')


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, 'html.parser')


def select_one(node: Optional[Node], selector: str) -> Optional[Tag]:
    if node is None:
        return None
    return node.select_one(selector)


def select_all(node: Optional[Node], selector: str, limit: Optional[int] = None) -> List[Tag]:
    if node is None:
        return []
    found = node.select(selector)
    return found[:limit] if limit is not None else found


def extract_text(node: Optional[Node], selector: Optional[str] = None) -> Optional[str]:
    """Trimmed text of node (or of its first match for selector); None when empty."""
    target = select_one(node, selector) if selector else node
    if target is None:
        return None
    text = target.get_text().strip()
    return text or None


def extract_attr(node: Optional[Node], attr: str, selector: Optional[str] = None) -> Optional[str]:
    target = select_one(node, selector) if selector else node
    if target is None:
        return None
    value = target.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    if value is None:
        return None
    value = value.strip()
    return value or None


def absolutize_url(url: Optional[str], scheme: str = "https") -> Optional[str]:
    """Resolve a protocol-relative URL ("//host/path")."""
    if not url:
        return None
    if url.startswith("//"):
        return f"{scheme}:{url}"
    return url


def upgrade_image_resolution(url: Optional[str]) -> Optional[str]:
    """Swap the first small/medium size segment in an image path for the large one."""
    if not url:
        return None
    return LOW_RES_SEGMENT_RE.sub("/l/", url, count=1)


def parse_float(text: Optional[str]) -> float:
    """Leading number in text, 0.0 when there is none."""
    if not text:
        return 0.0
    match = FLOAT_RE.search(text)
    if not match:
        return 0.0
    return float(match.group(0))


def paragraphize(text: Optional[str]) -> Optional[str]:
    """
    Restore paragraph breaks lost when markup line breaks are flattened.

    Non-breaking spaces and runs of four or more whitespace characters become
    newlines.
    """
    if text is None:
        return None
    text = text.replace("\u00a0", "\n")
    text = re.sub(r'\s{4,}', "\n", text)
    return text.strip() or None


@dataclass
class InfoLine:
    """Typed tokens recovered from a slash-delimited listing info line."""
    release_date: Optional[str] = None
    year: Optional[str] = None
    duration: Optional[str] = None
    staff: Optional[str] = None


def split_info_line(text: Optional[str]) -> InfoLine:
    """
    Split "2022年11月11日 / 12话 / 新海诚 / CoMix Wave Films" into typed parts.

    Date tokens are checked from most to least specific; an episode-count
    token becomes the duration; everything else is credit text joined with
    " / ". Later tokens of the same kind overwrite earlier ones.
    """
    info = InfoLine()
    if not text:
        return info

    credits: List[str] = []
    for part in text.split(INFO_SEPARATOR):
        token = part.strip()
        if not token:
            continue

        full = FULL_DATE_RE.search(token)
        month = YEAR_MONTH_RE.search(token)
        year = YEAR_ONLY_RE.search(token)

        if full:
            y, m, d = full.groups()
            info.release_date = f"{y}-{int(m):02d}-{int(d):02d}"
            info.year = y
        elif month:
            y, m = month.groups()
            info.release_date = f"{y}-{int(m):02d}-01"
            info.year = y
        elif year:
            info.year = year.group(1)
            info.release_date = f"{info.year}-01-01"
        elif EPISODES_RE.search(token):
            info.duration = token
        else:
            credits.append(token)

    if credits:
        info.staff = INFO_SEPARATOR.join(credits)
    return info
