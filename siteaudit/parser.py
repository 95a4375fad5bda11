"""
Pattern-based HTML scanning.

Tags are located with regular expressions over the raw markup and their
attributes are read from the matched tag text only, so attributes of one tag
never leak into another. A tag that does not match (unterminated, malformed)
is skipped; nothing in here raises on odd markup.
"""

import re
from functools import lru_cache
from typing import Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

MODERN_IMAGE_RE = re.compile(r"\.(webp|avif)(?=$|[?#])", re.IGNORECASE)
WEBP_RE = re.compile(r"\.webp(?=$|[?#])", re.IGNORECASE)
AVIF_RE = re.compile(r"\.avif(?=$|[?#])", re.IGNORECASE)
LEADING_INT_RE = re.compile(r"\s*(\d+)")


# Tag body up to the closing ">", stepping over quoted values that contain ">".
TAG_BODY = r"""(?:[^>"']|"[^"]*"|'[^']*')*"""

ANY_TAG_RE = re.compile(rf"<([a-zA-Z][\w:-]*){TAG_BODY}>")


@lru_cache(maxsize=None)
def _tag_re(name: str) -> re.Pattern:
    return re.compile(rf"<{name}\b{TAG_BODY}>", re.IGNORECASE)


@lru_cache(maxsize=None)
def _block_re(name: str) -> re.Pattern:
    return re.compile(rf"<{name}\b{TAG_BODY}>([\s\S]*?)</{name}\s*>", re.IGNORECASE)


@lru_cache(maxsize=None)
def _attr_re(name: str) -> re.Pattern:
    return re.compile(
        rf"""\s{re.escape(name)}(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?(?=[\s/>]|$)""",
        re.IGNORECASE,
    )


def find_tags(html: str, name: str) -> list[str]:
    """Opening tags named ``name`` in document order, as raw tag text."""
    return _tag_re(name).findall(html)


def iter_tags(html: str):
    """(lower-cased name, raw tag text) for every opening tag."""
    for m in ANY_TAG_RE.finditer(html):
        yield m.group(1).lower(), m.group(0)


def count_tags(html: str, name: str) -> int:
    return len(find_tags(html, name))


def find_blocks(html: str, name: str) -> list[re.Match]:
    """``<name ...>inner</name>`` blocks; group 1 holds the inner markup."""
    return list(_block_re(name).finditer(html))


def attr(tag: str, name: str) -> Optional[str]:
    """Value of attribute ``name`` within a single tag's text.

    Returns None when the attribute is absent and "" for a bare boolean
    attribute (``<script async>``).
    """
    m = _attr_re(name).search(tag)
    if not m:
        return None
    for value in m.groups():
        if value is not None:
            return value
    return ""


def has_attr(tag: str, name: str) -> bool:
    return attr(tag, name) is not None


def rel_tokens(tag: str) -> list[str]:
    return (attr(tag, "rel") or "").lower().split()


def find_links(html: str, rel: str) -> list[str]:
    """``<link>`` tags whose rel list contains ``rel``."""
    rel = rel.lower()
    return [tag for tag in find_tags(html, "link") if rel in rel_tokens(tag)]


def find_meta(html: str, key: str, value: str) -> Optional[str]:
    """First ``<meta>`` tag with ``key="value"`` (case-insensitive)."""
    value = value.lower()
    for tag in find_tags(html, "meta"):
        found = attr(tag, key)
        if found is not None and found.strip().lower() == value:
            return tag
    return None


def meta_content(html: str, name: str) -> Optional[str]:
    """``content`` of ``<meta name=...>``; None when the tag or content is absent."""
    tag = find_meta(html, "name", name)
    if tag is None:
        return None
    return attr(tag, "content")


def root_lang(html: str) -> Optional[str]:
    """Non-empty ``lang`` of the first ``<html>`` tag."""
    tags = find_tags(html, "html")
    if not tags:
        return None
    lang = (attr(tags[0], "lang") or "").strip()
    return lang or None


def text_of(fragment: str) -> str:
    """Visible text of a markup fragment with whitespace collapsed."""
    if "<" not in fragment and "&" not in fragment:
        return " ".join(fragment.split())
    soup = BeautifulSoup(fragment, "lxml")
    return soup.get_text(separator=" ", strip=True)


def _int_prefix(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    m = LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else None


def _is_third_party(src: str, base_url: Optional[str]) -> bool:
    if not base_url:
        return False
    try:
        page_host = urlparse(base_url).hostname
        host = urlparse(urljoin(base_url, src)).hostname
    except ValueError:
        # unparseable src, e.g. an unclosed IPv6 bracket
        return False
    return bool(host) and host != page_host


def extract_resources(html: str, base_url: Optional[str] = None) -> dict:
    """Inventory scripts, stylesheets, images and iframes in document order."""
    result = {
        "scripts": [],
        "stylesheets": [],
        "images": [],
        "iframes": [],
    }

    for tag in find_tags(html, "script"):
        src = attr(tag, "src") or None
        result["scripts"].append({
            "src": src,
            "isInline": not src,
            "isAsync": has_attr(tag, "async"),
            "isDefer": has_attr(tag, "defer"),
            "isModule": (attr(tag, "type") or "").strip().lower() == "module",
            "isThirdParty": bool(src) and _is_third_party(src, base_url),
        })

    for tag in find_tags(html, "link"):
        rels = rel_tokens(tag)
        href = attr(tag, "href")
        if not href:
            continue
        if "stylesheet" in rels:
            result["stylesheets"].append({"href": href, "isPreload": False})
        elif "preload" in rels and (attr(tag, "as") or "").lower() == "style":
            result["stylesheets"].append({"href": href, "isPreload": True})

    for tag in find_tags(html, "img"):
        src = attr(tag, "src") or None
        alt = attr(tag, "alt")
        width = _int_prefix(attr(tag, "width"))
        height = _int_prefix(attr(tag, "height"))
        result["images"].append({
            "src": src,
            "hasAlt": alt is not None,
            "altText": alt,
            "hasEmptyAlt": alt is not None and not alt.strip(),
            "hasDimensions": width is not None and height is not None,
            "width": width,
            "height": height,
            "hasLazyLoading": (attr(tag, "loading") or "").strip().lower() == "lazy",
            "hasSrcset": has_attr(tag, "srcset"),
            "isWebP": bool(src and WEBP_RE.search(src)),
            "isAvif": bool(src and AVIF_RE.search(src)),
            "isModernFormat": bool(src and MODERN_IMAGE_RE.search(src)),
        })

    for tag in find_tags(html, "iframe"):
        result["iframes"].append({
            "src": attr(tag, "src") or None,
            "hasLazyLoading": (attr(tag, "loading") or "").strip().lower() == "lazy",
        })

    return result
