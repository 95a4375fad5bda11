"""SEO analyzer, 25% weight."""

import re
from urllib.parse import ParseResult

from ..parser import (
    attr, count_tags, find_blocks, find_links, find_meta, find_tags,
    has_attr, meta_content, root_lang,
)
from .findings import Scorecard

OPEN_GRAPH_TAGS = ("og:title", "og:description", "og:image", "og:url")
TITLE_SEPARATORS = ("|", "-", "–")

JSON_LD_RE = re.compile(r"<script\b[^>]*\stype\s*=\s*[\"']?application/ld\+json", re.IGNORECASE)
MICRODATA_RE = re.compile(r"<[a-z][^>]*\sitem(?:scope|type)\b", re.IGNORECASE)
INTERNAL_LINK_RE = re.compile(r"<a\b[^>]*\shref\s*=\s*[\"']/(?!/)", re.IGNORECASE)


def _title(html: str) -> str | None:
    blocks = find_blocks(html, "title")
    if not blocks:
        return None
    return blocks[0].group(1).strip()


def _images_without_alt(html: str) -> int:
    return len([tag for tag in find_tags(html, "img") if not has_attr(tag, "alt")])


def analyze(html: str, parsed_url: ParseResult) -> dict:
    """Score on-page search signals. ``parsed_url`` is the page as requested."""
    card = Scorecard()
    issue = card.issue

    # Title
    title = _title(html)
    if title is None:
        issue("critical", "Mangler title-tag", 15)
    else:
        if len(title) < 10:
            issue("warning", f"Title er for kort: {len(title)} tegn (anbefalt 50-60)", 10)
        elif len(title) > 70:
            issue("warning", f"Title er for lang: {len(title)} tegn (anbefalt 50-60)", 5)
        elif 50 <= len(title) <= 60:
            card.success(f"Optimal title-lengde: {len(title)} tegn")

        if not any(sep in title for sep in TITLE_SEPARATORS):
            issue("info", "Title mangler tydelig struktur (keyword | brand)")

    # Meta description
    description = meta_content(html, "description")
    if description is None:
        issue("critical", "Mangler meta description", 12)
    elif len(description) < 70:
        issue("warning", f"Meta description er for kort: {len(description)} tegn (anbefalt 150-160)", 6)
    elif len(description) > 160:
        issue("info", f"Meta description er litt lang: {len(description)} tegn (kan bli avkortet)", 3)
    elif len(description) >= 140:
        card.success(f"Optimal meta description: {len(description)} tegn")

    # Headings
    h1_count = count_tags(html, "h1")
    h2_count = count_tags(html, "h2")
    if h1_count == 0:
        issue("critical", "Mangler H1-overskrift", 10)
    elif h1_count > 1:
        issue("warning", f"Flere H1-overskrifter: {h1_count} (bør kun ha én)", 5)
    else:
        card.success("Korrekt bruk av H1-overskrift")

    if h2_count == 0 and len(html) > 5000:
        issue("info", "Mangler H2-overskrifter for struktur", 3)

    # Canonical
    if not any(attr(tag, "href") for tag in find_links(html, "canonical")):
        issue("warning", "Mangler canonical URL", 8)
    else:
        card.success("Canonical URL er definert")

    # Open Graph
    og_found = len([og for og in OPEN_GRAPH_TAGS if find_meta(html, "property", og)])
    if og_found == 0:
        issue("warning", "Mangler Open Graph-tags (påvirker deling på sosiale medier)", 8)
    elif og_found < len(OPEN_GRAPH_TAGS):
        issue("info", f"Ufullstendige Open Graph-tags ({og_found}/{len(OPEN_GRAPH_TAGS)})", 4)
    else:
        card.success("Komplett Open Graph-implementasjon")

    # Twitter Card
    if not (find_meta(html, "name", "twitter:card") or find_meta(html, "property", "twitter:card")):
        issue("info", "Mangler Twitter Card-tags", 4)

    # Image alt texts
    images_without_alt = _images_without_alt(html)
    if images_without_alt > 0:
        issue("warning", f"{images_without_alt} bilder mangler alt-tekst",
              min(10, images_without_alt * 2))

    # Structured data
    has_structured_data = bool(JSON_LD_RE.search(html) or MICRODATA_RE.search(html))
    if not has_structured_data:
        issue("info", "Mangler strukturert data (Schema.org)", 5)
    else:
        card.success("Strukturert data er implementert")

    # Language
    if not root_lang(html):
        issue("info", "Mangler språkdeklarasjon (lang-attributt)", 3)

    # Robots
    robots = meta_content(html, "robots") or ""
    if "noindex" in robots.lower():
        issue("warning", "Siden er satt til noindex (vil ikke indekseres)")

    # Internal links
    internal_links = len(INTERNAL_LINK_RE.findall(html))
    if internal_links < 3 and len(html) > 5000:
        issue("info", "Få interne lenker (bør ha flere for bedre SEO)", 2)

    return card.result(
        titleLength=len(title) if title is not None else 0,
        descriptionLength=len(description) if description is not None else 0,
        h1Count=h1_count,
        h2Count=h2_count,
        imagesWithoutAlt=images_without_alt,
        hasStructuredData=has_structured_data,
        hasOpenGraph=og_found == len(OPEN_GRAPH_TAGS),
        internalLinks=internal_links,
    )
