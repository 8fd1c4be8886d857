import re

from bs4 import BeautifulSoup, Comment, Tag

# Tags whose entire subtree should be removed from authored rich text
_REMOVE_TAGS = {
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "embed",
    "applet",
    "link",
    "meta",
    "base",
    "form",
    "template",
}

# Event-handler attributes (onclick, onerror, ...)
_EVENT_ATTR_RE = re.compile(r"^on\w+$", re.IGNORECASE)

# URL-bearing attributes that must not carry a script scheme
_URL_ATTRS = ("href", "src", "action", "formaction", "xlink:href")
_SCRIPT_SCHEME_RE = re.compile(r"^\s*(javascript|vbscript|data:text/html)", re.IGNORECASE)


def sanitize_rich_text(html: str) -> str:
    """Strip scripting from CMS rich-text HTML and return the cleaned markup.

    Layout and inline styling chosen by the author are preserved; only
    active content (scripts, embeds, event handlers, ``javascript:`` URLs)
    and HTML comments are removed.
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(_REMOVE_TAGS):
        tag.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        junk = [attr for attr in tag.attrs if _EVENT_ATTR_RE.match(attr)]
        for attr in junk:
            del tag[attr]
        for attr in _URL_ATTRS:
            value = tag.get(attr)
            if isinstance(value, str) and _SCRIPT_SCHEME_RE.match(value):
                del tag[attr]

    # lxml wraps fragments in <html><body>; return only the fragment
    body = soup.body
    if body is None:
        return ""
    return "".join(str(child) for child in body.children)
