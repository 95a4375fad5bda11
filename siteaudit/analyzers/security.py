"""Security analyzer, 20% weight."""

import re
from collections.abc import Mapping
from urllib.parse import ParseResult

from ..parser import attr, find_tags, has_attr, iter_tags, rel_tokens
from .findings import Scorecard

ONE_YEAR = 31536000

MAX_AGE_RE = re.compile(r"max-age\s*=\s*\"?(\d+)", re.IGNORECASE)
INSECURE_URL_RE = re.compile(r"\s*http://(?!localhost)", re.IGNORECASE)
INSECURE_CSS_URL_RE = re.compile(r"url\(\s*[\"']?\s*http://(?!localhost)", re.IGNORECASE)
# Attributes that make the browser load something; navigation links and xmlns do not.
LOADING_ATTRS = ("src", "poster", "data")
EMAIL_RE = re.compile(r"(?<![a-zA-Z0-9._%+-])[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
SERVER_PRODUCT_RE = re.compile(r"apache|nginx|iis", re.IGNORECASE)
VERSION_RE = re.compile(r"\d+\.\d+")


def _is_insecure(url) -> bool:
    return bool(url) and INSECURE_URL_RE.match(url) is not None


def _insecure_resources(html: str) -> int:
    """Resources the page loads over plain http: src-like attributes, every
    srcset candidate, link hrefs other than navigation and CSS url() values."""
    count = 0
    for name, tag in iter_tags(html):
        count += len([key for key in LOADING_ATTRS if _is_insecure(attr(tag, key))])
        srcset = attr(tag, "srcset")
        if srcset:
            count += len([c for c in srcset.split(",") if _is_insecure(c)])
        if name == "link" and not {"canonical", "alternate"} & set(rel_tokens(tag)):
            count += int(_is_insecure(attr(tag, "href")))
    return count + len(INSECURE_CSS_URL_RE.findall(html))


def analyze(parsed_url: ParseResult, headers: Mapping[str, str], html: str) -> dict:
    """Score transport security, response headers and risky markup."""
    card = Scorecard()
    issue = card.issue
    headers_lower = {k.lower(): v for k, v in headers.items()}
    is_https = parsed_url.scheme.lower() == "https"

    # HTTPS
    if not is_https:
        issue("critical", "Siden bruker ikke HTTPS", 30)
    else:
        card.success("HTTPS er aktivert")

    # HSTS
    hsts = headers_lower.get("strict-transport-security")
    if not hsts:
        issue("warning", "Mangler HSTS-header (Strict-Transport-Security)", 12)
    else:
        max_age = MAX_AGE_RE.search(hsts)
        if max_age and int(max_age.group(1)) < ONE_YEAR:
            issue("info", f"HSTS max-age bør være minst 1 år ({ONE_YEAR} sekunder)", 4)
        else:
            card.success("HSTS er korrekt konfigurert")

        if "includesubdomains" not in hsts.lower():
            issue("info", "HSTS mangler includeSubDomains")

    # Content Security Policy
    csp = headers_lower.get("content-security-policy")
    if not csp:
        issue("warning", "Mangler Content-Security-Policy header", 10)
    else:
        card.success("CSP er implementert")
        csp_lower = csp.lower()
        if "unsafe-inline" in csp_lower and "script-src" in csp_lower:
            issue("info", "CSP tillater unsafe-inline for scripts", 3)
        if "unsafe-eval" in csp_lower:
            issue("info", "CSP tillater unsafe-eval", 3)

    # Clickjacking
    xfo = headers_lower.get("x-frame-options")
    if not xfo and "frame-ancestors" not in (csp or "").lower():
        issue("warning", "Mangler clickjacking-beskyttelse (X-Frame-Options)", 8)
    else:
        card.success("Clickjacking-beskyttelse er aktiv")

    # MIME sniffing
    xcto = headers_lower.get("x-content-type-options")
    if not xcto:
        issue("warning", "Mangler X-Content-Type-Options: nosniff", 6)
    else:
        card.success("MIME-type sniffing er blokkert")

    if not headers_lower.get("referrer-policy"):
        issue("info", "Mangler Referrer-Policy header", 4)

    if not (headers_lower.get("permissions-policy") or headers_lower.get("feature-policy")):
        issue("info", "Mangler Permissions-Policy header", 4)

    if not headers_lower.get("x-xss-protection"):
        issue("info", "Mangler X-XSS-Protection header (legacy)", 2)

    # Mixed content
    insecure_refs = _insecure_resources(html)
    if insecure_refs > 0 and is_https:
        issue("warning", f"{insecure_refs} ressurser lastes over HTTP (mixed content)", 5)

    # Exposed addresses
    if len(EMAIL_RE.findall(html)) > 3:
        issue("info", "E-postadresser er synlige i kildekoden (spam-risiko)", 2)

    # Forms posting over http
    insecure_forms = len([
        tag for tag in find_tags(html, "form")
        if (attr(tag, "action") or "").strip().lower().startswith("http://")
    ])
    if insecure_forms > 0:
        issue("critical", f"{insecure_forms} skjema sender data over HTTP", 8)

    # Password fields
    password_fields = [
        tag for tag in find_tags(html, "input")
        if (attr(tag, "type") or "").strip().lower() == "password"
    ]
    if any(not has_attr(tag, "autocomplete") for tag in password_fields):
        issue("info", "Passord-felt mangler autocomplete-attributt")

    # Stack disclosure
    server = headers_lower.get("server")
    if server and SERVER_PRODUCT_RE.search(server) and VERSION_RE.search(server):
        issue("info", "Server-versjon er synlig i headers", 2)
    if headers_lower.get("x-powered-by"):
        issue("info", "X-Powered-By header eksponerer teknologi", 2)

    return card.result(
        https=is_https,
        hsts=bool(hsts),
        csp=bool(csp),
        xfo=bool(xfo),
        xcto=bool(xcto),
    )
