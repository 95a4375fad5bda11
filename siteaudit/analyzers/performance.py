"""Performance analyzer, 25% weight."""

import re

from ..parser import find_blocks, find_links, find_tags
from .findings import Scorecard, round_half_up

# The first images in document order are assumed to be above the fold.
ABOVE_THE_FOLD_IMAGES = 3

CRITICAL_CSS_RE = re.compile(r"body|html|header|nav|hero|main", re.IGNORECASE)


def _inline_css_size(html: str) -> int:
    return sum(len(m.group(0)) for m in find_blocks(html, "style"))


def analyze(response_time: int, html: str, resources: dict) -> dict:
    card = Scorecard()
    issue = card.issue

    # Server response
    if response_time > 3000:
        issue("critical", f"Veldig treg server-respons: {response_time}ms (bør være under 600ms)", 25)
    elif response_time > 1500:
        issue("warning", f"Treg server-respons: {response_time}ms (bør være under 600ms)", 15)
    elif response_time > 600:
        issue("info", f"Server-respons kan forbedres: {response_time}ms", 8)
    else:
        card.success(f"Rask server-respons: {response_time}ms")

    # Document size
    html_size = len(html.encode("utf-8"))
    html_size_kb = round_half_up(html_size / 1024)
    if html_size > 500000:
        issue("critical", f"HTML-dokumentet er for stort: {html_size_kb}KB (bør være under 100KB)", 15)
    elif html_size > 200000:
        issue("warning", f"HTML-dokumentet er stort: {html_size_kb}KB", 10)
    elif html_size > 100000:
        issue("info", f"HTML-dokumentet er litt stort: {html_size_kb}KB", 5)

    # JavaScript
    scripts = resources.get("scripts", [])
    total_scripts = len(scripts)
    blocking_scripts = len([
        s for s in scripts
        if not s["isInline"] and not s["isAsync"] and not s["isDefer"]
    ])
    if blocking_scripts > 5:
        issue("critical", f"{blocking_scripts} render-blokkerende scripts (bruk async/defer)", 12)
    elif blocking_scripts > 2:
        issue("warning", f"{blocking_scripts} render-blokkerende scripts", 6)

    if total_scripts > 25:
        issue("warning", f"For mange scripts: {total_scripts} (bør konsolideres)", 8)
    elif total_scripts > 15:
        issue("info", f"Mange scripts: {total_scripts}", 4)

    # CSS
    external_stylesheets = len([
        s for s in resources.get("stylesheets", []) if not s["isPreload"]
    ])
    inline_style_count = len(find_tags(html, "style"))
    inline_css_size = _inline_css_size(html)

    if external_stylesheets > 8:
        issue("warning", f"For mange CSS-filer: {external_stylesheets} (bør kombineres)", 8)
    elif external_stylesheets > 4:
        issue("info", f"Flere CSS-filer: {external_stylesheets}", 4)

    if inline_css_size > 50000:
        issue("warning",
              f"Mye inline CSS ({round_half_up(inline_css_size / 1024)}KB) - bør flyttes til eksterne filer", 7)

    # Images
    images = resources.get("images", [])
    without_dimensions = len([i for i in images if not i["hasDimensions"]])
    without_lazy = len([
        i for i in images[ABOVE_THE_FOLD_IMAGES:] if not i["hasLazyLoading"]
    ])
    without_modern = len([i for i in images if i["src"] and not i["isModernFormat"]])
    without_srcset = len([i for i in images if not i["hasSrcset"]])

    if without_dimensions > 3:
        issue("warning", f"{without_dimensions} bilder mangler width/height (forårsaker layout shift)", 6)
    if without_lazy > 5:
        issue("warning", f"{without_lazy} bilder under fold mangler lazy loading", 5)
    if without_modern > 5 and len(images) > 3:
        issue("info", f"{without_modern} bilder bruker ikke moderne formater (WebP/AVIF)", 5)
    if without_srcset > 5 and len(images) > 3:
        issue("info", f"{without_srcset} bilder mangler responsive srcset", 4)

    # Critical rendering path
    has_critical_css = any(
        CRITICAL_CSS_RE.search(m.group(1)) for m in find_blocks(html, "style")
    )
    has_hints = bool(find_links(html, "preconnect") or find_links(html, "dns-prefetch"))

    if not has_critical_css and external_stylesheets > 0:
        issue("info", "Mangler kritisk inline CSS for raskere first paint", 3)
    if not has_hints:
        issue("info", "Mangler preconnect/dns-prefetch for tredjepartsressurser", 2)

    # Third-party scripts
    third_party = len([s for s in scripts if s.get("isThirdParty")])
    if third_party > 10:
        issue("warning", f"Mange tredjepartscripts: {third_party} (påvirker ytelse)", 5)

    # Iframes
    iframes_without_lazy = len([
        i for i in resources.get("iframes", []) if not i["hasLazyLoading"]
    ])
    if iframes_without_lazy > 0:
        issue("info", f"{iframes_without_lazy} iframes mangler lazy loading", 3)

    return card.result(
        responseTime=response_time,
        htmlSize=html_size_kb,
        totalScripts=total_scripts,
        blockingScripts=blocking_scripts,
        totalStylesheets=external_stylesheets + inline_style_count,
        totalImages=len(images),
    )
