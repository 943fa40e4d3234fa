"""
HTML sanitizer for entry content shown to the reader.

Allow-list based: known-dangerous elements are removed with their
content, unknown elements are unwrapped (their text survives), and only
allow-listed attributes with safe URL schemes are kept.
"""

from urllib.parse import urlparse

from bs4 import BeautifulSoup, Comment

# Removed together with everything inside them
DROP_TAGS = {
    "script", "style", "iframe", "frame", "frameset", "object", "embed",
    "applet", "form", "input", "button", "select", "textarea", "noscript",
    "link", "meta", "base", "svg", "math", "template",
}

ALLOWED_TAGS = {
    "a", "abbr", "acronym", "b", "blockquote", "br", "caption", "cite", "code",
    "dd", "del", "details", "div", "dl", "dt", "em", "figcaption", "figure",
    "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins", "kbd", "li",
    "mark", "ol", "p", "pre", "q", "s", "samp", "small", "span", "strong",
    "sub", "summary", "sup", "table", "tbody", "td", "tfoot", "th", "thead",
    "time", "tr", "u", "ul",
}

ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
    "abbr": {"title"},
    "acronym": {"title"},
    "img": {"src", "alt", "title", "width", "height"},
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan", "scope"},
    "time": {"datetime"},
    "ol": {"start"},
}

URL_ATTRIBUTES = {"href", "src"}
SAFE_URL_SCHEMES = {"", "http", "https", "mailto"}


def _is_safe_url(value: str) -> bool:
    # Browsers ignore embedded whitespace and control characters in schemes
    cleaned = "".join(ch for ch in value if ch.isprintable() and not ch.isspace())
    try:
        scheme = urlparse(cleaned).scheme.lower()
    except ValueError:
        return False
    return scheme in SAFE_URL_SCHEMES


def sanitize_html(html: str | None) -> str:
    """Return html reduced to the allow-listed tags and attributes."""
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    # Re-search after each removal, a dropped tag may contain another
    tag = soup.find(list(DROP_TAGS))
    while tag is not None:
        tag.decompose()
        tag = soup.find(list(DROP_TAGS))

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue

        allowed = ALLOWED_ATTRIBUTES.get(tag.name, set())
        for attr in list(tag.attrs):
            if attr not in allowed:
                del tag.attrs[attr]
            elif attr in URL_ATTRIBUTES and not _is_safe_url(str(tag.attrs[attr])):
                del tag.attrs[attr]

        if tag.name == "a" and tag.get("href"):
            tag["rel"] = "noopener noreferrer"
            tag["target"] = "_blank"

    return str(soup)
