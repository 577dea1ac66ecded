"""
Font loading for template renders.

Frame images are rendered from markup, and the renderer needs the raw
font files.  :func:`load_google_font_all_variants` asks the Google
Fonts CSS2 API for every weight in both normal and italic styles,
parses the returned ``@font-face`` rules and downloads each referenced
font file once.  Results are cached per family.

Network errors and non-2xx responses propagate to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Dict, List, Optional, Tuple

import httpx

from frame_studio_api.app.core.config import settings
from frame_studio_api.app.schemas.template import FontResource

logger = logging.getLogger(__name__)

WEIGHTS = (100, 300, 400, 500, 700, 900)

_FONT_FACE_RE = re.compile(r"@font-face\s*\{(.*?)\}", re.S)
_STYLE_RE = re.compile(r"font-style:\s*([a-z]+)")
_WEIGHT_RE = re.compile(r"font-weight:\s*(\d+)")
_SRC_RE = re.compile(r"src:\s*url\(['\"]?([^'\")]+)['\"]?\)")

# Downloaded fonts per family, kept for the life of the process.
_FONT_CACHE: Dict[str, List[FontResource]] = {}


def build_stylesheet_url(family: str) -> str:
    """Return the CSS2 API URL requesting all weights and styles of ``family``."""
    variants = ";".join(f"{ital},{weight}" for ital in (0, 1) for weight in WEIGHTS)
    return f"{settings.google_fonts_url}?family={family.replace(' ', '+')}:ital,wght@{variants}"


def parse_font_faces(css: str) -> List[Tuple[str, int, str]]:
    """Extract ``(style, weight, url)`` triples from a stylesheet.

    Only the first source of each style/weight pair is kept.
    """
    faces: List[Tuple[str, int, str]] = []
    seen = set()
    for block in _FONT_FACE_RE.findall(css):
        style = _STYLE_RE.search(block)
        weight = _WEIGHT_RE.search(block)
        src = _SRC_RE.search(block)
        if not (style and weight and src):
            continue
        key = (style.group(1), int(weight.group(1)))
        if key in seen:
            continue
        seen.add(key)
        faces.append((key[0], key[1], src.group(1)))
    return faces


async def load_google_font_all_variants(
    family: str,
    client: Optional[httpx.AsyncClient] = None,
) -> List[FontResource]:
    """Download every weight and style of a Google font family.

    Parameters
    ----------
    family : str
        Font family name, e.g. ``"Roboto"``.
    client : Optional[httpx.AsyncClient]
        HTTP client to reuse.  A short-lived client is created when
        omitted.

    Returns
    -------
    List[FontResource]
        One resource per style/weight pair, in stylesheet order.  Pairs
        sharing a source URL share the downloaded bytes.
    """
    cached = _FONT_CACHE.get(family)
    if cached is not None:
        return list(cached)

    if client is None:
        async with httpx.AsyncClient(timeout=30) as own_client:
            return await load_google_font_all_variants(family, own_client)

    response = await client.get(build_stylesheet_url(family))
    response.raise_for_status()
    faces = parse_font_faces(response.text)

    # Variable fonts serve one file for many weights.
    urls = list(dict.fromkeys(url for _, _, url in faces))

    async def _fetch(url: str) -> bytes:
        font_response = await client.get(url)
        font_response.raise_for_status()
        return font_response.content

    payloads = dict(zip(urls, await asyncio.gather(*(_fetch(url) for url in urls))))
    fonts = [
        FontResource(name=family, weight=weight, style=style, data=payloads[url])
        for style, weight, url in faces
    ]
    _FONT_CACHE[family] = fonts
    logger.info("Loaded %s variants of font %s from %s files", len(fonts), family, len(urls))
    return list(fonts)


def clear_font_cache() -> None:
    """Forget every downloaded font family."""
    _FONT_CACHE.clear()
