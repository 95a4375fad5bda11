from urllib.parse import urlparse

import httpx

from siteaudit.analyzers import security

HTTPS = urlparse("https://example.com/")
HTTP = urlparse("http://example.com/")

HARDENED = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Content-Security-Policy": "default-src 'self'; frame-ancestors 'none'",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=()",
    "X-XSS-Protection": "1; mode=block",
}


def messages(result):
    return [d["message"] for d in result["details"]]


def test_hardened_https_site_scores_100():
    result = security.analyze(HTTPS, httpx.Headers(HARDENED), "")
    assert result["score"] == 100
    assert all(d["severity"] == "success" for d in result["details"])


def test_plain_http_caps_the_score():
    result = security.analyze(HTTP, httpx.Headers(HARDENED), "")
    assert result["score"] == 70
    assert result["metrics"]["https"] is False


def test_no_security_headers():
    result = security.analyze(HTTPS, {}, "")
    # hsts 12, csp 10, clickjacking 8, nosniff 6, referrer 4, permissions 4, xss 2
    assert result["score"] == 100 - 46
    assert result["metrics"] == {
        "https": True, "hsts": False, "csp": False, "xfo": False, "xcto": False,
    }


def test_no_headers_over_http():
    assert security.analyze(HTTP, {}, "")["score"] == 100 - 46 - 30


def test_header_lookup_is_case_insensitive():
    headers = {k.upper(): v for k, v in HARDENED.items()}
    assert security.analyze(HTTPS, headers, "")["score"] == 100


def test_short_hsts_without_subdomains():
    headers = dict(HARDENED, **{"Strict-Transport-Security": "max-age=300"})
    result = security.analyze(HTTPS, headers, "")
    assert result["score"] == 96
    assert "HSTS mangler includeSubDomains" in messages(result)


def test_weak_csp():
    headers = dict(HARDENED, **{
        "Content-Security-Policy": "script-src 'self' 'unsafe-inline' 'unsafe-eval'",
    })
    # X-Frame-Options still covers clickjacking
    assert security.analyze(HTTPS, headers, "")["score"] == 94


def test_frame_ancestors_replaces_x_frame_options():
    headers = {k: v for k, v in HARDENED.items() if k != "X-Frame-Options"}
    result = security.analyze(HTTPS, headers, "")
    assert result["score"] == 100
    assert result["metrics"]["xfo"] is False


def test_mixed_content_ignores_namespaces_and_localhost():
    html = (
        '<svg xmlns="http://www.w3.org/2000/svg"></svg>'
        '<img src="http://cdn.example.com/a.png">'
        '<script src="http://localhost:3000/dev.js"></script>'
    )
    result = security.analyze(HTTPS, HARDENED, html)
    assert result["score"] == 95
    assert "1 ressurser lastes over HTTP (mixed content)" in messages(result)


def test_mixed_content_counts_loaded_resources_only():
    html = (
        '<a href="http://partner.example.net/">Partner</a>'
        '<link rel="canonical" href="http://example.com/">'
        '<link rel="stylesheet" href="http://cdn.example.net/a.css">'
        '<img src="/a.png" srcset="http://cdn.example.net/a.png 1x, http://cdn.example.net/a@2x.png 2x">'
        '<video poster="http://cdn.example.net/p.jpg"></video>'
        '<div style="background: url(\'http://cdn.example.net/bg.png\')"></div>'
    )
    result = security.analyze(HTTPS, HARDENED, html)
    assert result["score"] == 95
    assert "5 ressurser lastes over HTTP (mixed content)" in messages(result)


def test_mixed_content_only_applies_to_https_pages():
    html = '<img src="http://cdn.example.com/a.png">'
    assert security.analyze(HTTP, HARDENED, html)["score"] == 70


def test_insecure_form_is_critical():
    html = '<form method="post" action="http://example.com/login"></form>'
    result = security.analyze(HTTPS, HARDENED, html)
    # a form target is not a loaded resource, so no mixed-content penalty on top
    assert result["score"] == 92
    assert not any("mixed content" in m for m in messages(result))
    assert {"severity": "critical", "message": "1 skjema sender data over HTTP"} in result["details"]


def test_password_without_autocomplete_is_informational():
    result = security.analyze(HTTPS, HARDENED, '<input type="password" name="pw">')
    assert result["score"] == 100
    assert "Passord-felt mangler autocomplete-attributt" in messages(result)


def test_exposed_email_addresses():
    html = " ".join(f"post{i}@example.com" for i in range(4))
    assert security.analyze(HTTPS, HARDENED, html)["score"] == 98


def test_stack_disclosure():
    headers = dict(HARDENED, Server="Apache/2.4.57 (Debian)", **{"X-Powered-By": "PHP/8.2"})
    assert security.analyze(HTTPS, headers, "")["score"] == 96
    assert security.analyze(HTTPS, dict(HARDENED, Server="nginx"), "")["score"] == 100
