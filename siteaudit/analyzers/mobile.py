"""Mobile-friendliness analyzer, 15% weight."""

import re

from ..parser import count_tags, find_links, find_meta, find_tags, has_attr, meta_content, rel_tokens
from .findings import Scorecard

FONT_SIZE_RE = re.compile(r"font-size:\s*(\d+)px", re.IGNORECASE)
SMALL_PADDING_RE = re.compile(r"padding:\s*[0-3]px", re.IGNORECASE)
MEDIA_QUERY_RE = re.compile(r"@media[^{]*\{", re.IGNORECASE)
MOBILE_MEDIA_RE = re.compile(r"max-width|min-width|screen", re.IGNORECASE)
# bare width declarations, not max-width/min-width
FIXED_WIDTH_RE = re.compile(r"(?<![\w-])width:\s*(\d{4,})px", re.IGNORECASE)


def _has_touch_icon(html: str) -> bool:
    return any(
        token.startswith("apple-touch-icon")
        for tag in find_tags(html, "link")
        for token in rel_tokens(tag)
    )


def analyze(html: str) -> dict:
    card = Scorecard()
    issue = card.issue

    # Viewport
    viewport = meta_content(html, "viewport") or None
    if viewport is None:
        issue("critical", "Mangler viewport meta-tag", 25)
    else:
        viewport_lower = viewport.lower().replace(" ", "")
        if "width=device-width" not in viewport_lower:
            issue("warning", "Viewport mangler width=device-width", 10)
        else:
            card.success("Viewport er korrekt konfigurert")

        if "maximum-scale=1" in viewport_lower or "user-scalable=no" in viewport_lower:
            issue("warning", "Viewport blokkerer zoom (dårlig for tilgjengelighet)", 5)

        if "initial-scale" not in viewport_lower:
            issue("info", "Viewport mangler initial-scale=1", 2)

    # Font sizes
    tiny_fonts = len([size for size in FONT_SIZE_RE.findall(html) if int(size) < 12])
    if tiny_fonts > 5:
        issue("warning", "Flere elementer har for liten skriftstørrelse for mobil (<12px)", 5)

    # Tap targets
    if len(SMALL_PADDING_RE.findall(html)) > 3:
        issue("info", "Noen klikkbare elementer kan være for små for touch", 3)

    # Responsive images
    img_tags = find_tags(html, "img")
    responsive_images = len([tag for tag in img_tags if has_attr(tag, "srcset")])
    picture_elements = count_tags(html, "picture")

    if len(img_tags) > 5 and responsive_images == 0 and picture_elements == 0:
        issue("warning", "Ingen responsive bilder (srcset/picture)", 8)
    elif len(img_tags) > 3 and responsive_images < len(img_tags) / 2:
        issue("info", f"Kun {responsive_images}/{len(img_tags)} bilder er responsive", 4)

    # Media queries
    mobile_queries = len([
        mq for mq in MEDIA_QUERY_RE.findall(html) if MOBILE_MEDIA_RE.search(mq)
    ])
    if mobile_queries == 0:
        issue("warning", "Ingen CSS media queries for responsivt design", 10)
    elif mobile_queries < 3:
        issue("info", f"Få media queries: {mobile_queries}", 4)
    else:
        card.success(f"{mobile_queries} responsive media queries")

    # Fixed widths
    fixed_widths = len([w for w in FIXED_WIDTH_RE.findall(html) if int(w) > 500])
    if fixed_widths > 2:
        issue("warning", f"{fixed_widths} elementer har faste bredder som kan bryte mobil-layout", 8)

    # Icons
    has_touch_icon = _has_touch_icon(html)
    if not has_touch_icon:
        issue("info", "Mangler Apple Touch Icon", 3)
    if not find_links(html, "icon"):
        issue("info", "Mangler favicon", 2)

    # Web app manifest
    has_manifest = bool(find_links(html, "manifest"))
    if not has_manifest:
        issue("info", "Mangler Web App Manifest (PWA-støtte)", 5)
    else:
        card.success("Web App Manifest er implementert")

    if not find_meta(html, "name", "theme-color"):
        issue("info", "Mangler theme-color meta-tag", 2)

    return card.result(
        hasViewport=viewport is not None,
        responsiveImages=responsive_images,
        totalImages=len(img_tags),
        mediaQueries=mobile_queries,
        hasManifest=has_manifest,
        hasTouchIcon=has_touch_icon,
    )
