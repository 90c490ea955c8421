# -*- coding: utf-8 -*-
# notices/services/markup.py
# Purpose:
# Output-context cleaning for notice content.
# - text and attributes: left to template autoescaping
# - URLs: clean_url (scheme allow-list)
# - author-supplied markup: clean_html (tag/attribute allow-list)

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment
from django.utils.safestring import SafeString, mark_safe

ALLOWED_SCHEMES = {"http", "https", "mailto", "tel", "ftp", "ftps"}

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")

# Removed together with their content.
_DROP_TAGS = {"script", "style", "iframe", "object", "embed", "form", "input", "button", "textarea", "select", "link", "meta", "base"}

_GLOBAL_ATTRS = {"class", "id", "title", "style", "role", "aria-label", "aria-hidden", "dir", "lang"}

_ALLOWED_TAGS = {
    "a": {"href", "target", "rel", "name"},
    "abbr": set(),
    "b": set(),
    "blockquote": {"cite"},
    "br": set(),
    "code": set(),
    "del": set(),
    "div": {"align"},
    "em": set(),
    "h1": set(),
    "h2": set(),
    "h3": set(),
    "h4": set(),
    "h5": set(),
    "h6": set(),
    "hr": set(),
    "i": set(),
    "img": {"src", "alt", "width", "height", "loading"},
    "li": set(),
    "ol": set(),
    "p": {"align"},
    "pre": set(),
    "s": set(),
    "small": set(),
    "span": set(),
    "strong": set(),
    "sub": set(),
    "sup": set(),
    "table": set(),
    "tbody": set(),
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan", "scope"},
    "thead": set(),
    "tr": set(),
    "u": set(),
    "ul": set(),
}

_URL_ATTRS = {"href", "src", "cite"}


def clean_url(url) -> str:
    """Return url if its scheme is allowed (or it is relative), else ""."""
    text = _CONTROL_CHARS_RE.sub("", str(url or "")).strip()
    if not text:
        return ""
    text = text.replace(" ", "%20")
    match = _SCHEME_RE.match(text)
    if match and match.group(1).lower() not in ALLOWED_SCHEMES:
        return ""
    return text


def clean_html(markup) -> SafeString:
    text = str(markup or "")
    if not text.strip():
        return mark_safe("")

    soup = BeautifulSoup(text, "html.parser")

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        if tag.decomposed:
            continue
        name = (tag.name or "").lower()
        if name in _DROP_TAGS:
            tag.decompose()
            continue
        if name not in _ALLOWED_TAGS:
            tag.unwrap()
            continue

        allowed = _ALLOWED_TAGS[name] | _GLOBAL_ATTRS
        for attr in list(tag.attrs):
            key = attr.lower()
            if key not in allowed:
                del tag.attrs[attr]
                continue
            if key in _URL_ATTRS:
                cleaned = clean_url(tag.attrs[attr])
                if cleaned:
                    tag.attrs[attr] = cleaned
                else:
                    del tag.attrs[attr]
            elif key == "style" and re.search(r"expression\s*\(|url\s*\(\s*['\"]?\s*javascript:", str(tag.attrs[attr]), re.I):
                del tag.attrs[attr]

    return mark_safe(str(soup))
