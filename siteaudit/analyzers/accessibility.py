"""Accessibility analyzer, 15% weight."""

import re

from ..parser import attr, count_tags, find_blocks, find_tags, has_attr, root_lang, text_of
from .findings import Scorecard

NON_TEXT_INPUT_TYPES = {"hidden", "submit", "button", "image"}
GENERIC_LINK_TEXTS = {"klikk her", "les mer", "her", "link", "click here", "read more"}

LANDMARK_PATTERNS = {
    "main": re.compile(r"<main\b[^>]*>|role=[\"']main[\"']", re.IGNORECASE),
    "navigation": re.compile(r"<nav\b[^>]*>|role=[\"']navigation[\"']", re.IGNORECASE),
    "banner": re.compile(r"<header\b[^>]*>|role=[\"']banner[\"']", re.IGNORECASE),
    "contentinfo": re.compile(r"<footer\b[^>]*>|role=[\"']contentinfo[\"']", re.IGNORECASE),
}

SKIP_ANCHOR_RE = re.compile(r"<a\b[^>]*href=[\"']#(main|content|skip)[^\"']*[\"'][^>]*>", re.IGNORECASE)
SKIP_TEXT_RE = re.compile(r"skip.*(link|nav|content)", re.IGNORECASE)
OUTLINE_NONE_RE = re.compile(r"outline:\s*(?:none|0(?!\d))", re.IGNORECASE)
FOCUS_RULE_RE = re.compile(r":focus", re.IGNORECASE)
LIGHT_TEXT_COLOR_RE = re.compile(r"(?<![\w-])color:\s*#[def][def][def]", re.IGNORECASE)
ONCLICK_RE = re.compile(r"<(?:div|span)\b[^>]*\sonclick", re.IGNORECASE)
POSITIVE_TABINDEX_RE = re.compile(r"tabindex=[\"']?[1-9]", re.IGNORECASE)


def _unlabeled_inputs(html: str) -> int:
    labelled_ids = {
        (attr(tag, "for") or "").strip()
        for tag in find_tags(html, "label")
    }
    labelled_ids.discard("")

    unlabeled = 0
    for tag in find_tags(html, "input"):
        if (attr(tag, "type") or "").strip().lower() in NON_TEXT_INPUT_TYPES:
            continue
        if has_attr(tag, "aria-label") or has_attr(tag, "aria-labelledby"):
            continue
        input_id = (attr(tag, "id") or "").strip()
        if input_id and input_id in labelled_ids:
            continue
        unlabeled += 1
    return unlabeled


def _heading_counts(html: str) -> dict[int, int]:
    return {level: count_tags(html, f"h{level}") for level in range(1, 7)}


def _first_skipped_level(counts: dict[int, int]) -> tuple[int, int] | None:
    """(from, to) of the first jump of more than one heading level."""
    last_level = 0
    for level in range(1, 7):
        if not counts[level]:
            continue
        if last_level and level > last_level + 1:
            return last_level, level
        last_level = level
    return None


def _generic_links(html: str) -> int:
    return len([
        m for m in find_blocks(html, "a")
        if text_of(m.group(1)).lower() in GENERIC_LINK_TEXTS
    ])


def analyze(html: str) -> dict:
    card = Scorecard()
    issue = card.issue

    # Language
    lang = root_lang(html)
    if not lang:
        issue("warning", "Mangler lang-attributt på html-elementet", 8)
    else:
        card.success(f"Språk er definert: {lang}")

    # Image alt attributes
    img_tags = find_tags(html, "img")
    images_without_alt = len([tag for tag in img_tags if not has_attr(tag, "alt")])
    if images_without_alt > 0:
        issue("warning", f"{images_without_alt} bilder mangler alt-attributt",
              min(15, images_without_alt * 3))
    elif img_tags:
        card.success("Alle bilder har alt-attributt")

    # Form labels
    unlabeled = _unlabeled_inputs(html)
    if unlabeled > 0:
        issue("warning", f"{unlabeled} skjemafelt mangler tilknyttet label", min(12, unlabeled * 3))

    # Heading hierarchy
    headings = _heading_counts(html)
    if headings[1] == 0:
        issue("warning", "Mangler H1-overskrift", 5)

    skipped = _first_skipped_level(headings)
    if skipped:
        issue("info", f"Overskriftsnivå hoppes over (H{skipped[0]} til H{skipped[1]})", 3)

    # Landmarks
    landmarks = len([p for p in LANDMARK_PATTERNS.values() if p.search(html)])
    if landmarks < 2:
        issue("warning", "Få ARIA landmarks (main, nav, header, footer)", 6)
    elif landmarks == len(LANDMARK_PATTERNS):
        card.success("God bruk av semantiske landmarks")

    # Skip link
    has_skip_link = bool(SKIP_ANCHOR_RE.search(html) or SKIP_TEXT_RE.search(html))
    if not has_skip_link and len(html) > 10000:
        issue("info", "Mangler skip-link for tastaturnavigasjon", 5)

    # Link text
    generic_links = _generic_links(html)
    if generic_links > 3:
        issue("info", f'{generic_links} lenker har generisk tekst ("klikk her", "les mer")', 5)

    # Focus indicators
    if OUTLINE_NONE_RE.search(html) and not FOCUS_RULE_RE.search(html):
        issue("warning", "Focus-indikatorer kan være fjernet uten erstatning", 5)

    # Contrast; a rough check without rendering
    if len(LIGHT_TEXT_COLOR_RE.findall(html)) > 3:
        issue("info", "Mulig dårlig fargekontrast (veldig lyse farger)", 3)

    # Tables
    if count_tags(html, "table") > 0 and count_tags(html, "th") == 0:
        issue("warning", "Tabeller mangler header-celler (th)", 5)

    # Clickable non-interactive elements
    if len(ONCLICK_RE.findall(html)) > 2:
        issue("warning", "Klikkbare div/span-elementer bør være buttons eller lenker", 4)

    if POSITIVE_TABINDEX_RE.search(html):
        issue("info", "Positiv tabindex kan forstyrre naturlig tab-rekkefølge", 3)

    return card.result(
        hasLang=bool(lang),
        imagesWithoutAlt=images_without_alt,
        landmarks=landmarks,
        hasSkipLink=has_skip_link,
        headingStructure=", ".join(
            f"H{level}:{count}" for level, count in headings.items() if count
        ),
    )
