"""
Input sanitization for user-written text.

Forum posts, chat messages and profile fields are rendered by the web client,
so markup is cleaned with bleach before it is stored.
"""

import html
from typing import List, Optional

import bleach

# Formatting kept in forum content
ALLOWED_TAGS = [
    "p",
    "br",
    "strong",
    "b",
    "em",
    "i",
    "u",
    "ul",
    "ol",
    "li",
    "blockquote",
    "code",
    "pre",
]

# No attributes allowed (prevents event handlers)
ALLOWED_ATTRIBUTES: dict[str, list[str]] = {}


def sanitize_html(content: Optional[str]) -> Optional[str]:
    """
    Keep only whitelisted formatting tags.

    Examples:
        >>> sanitize_html('<script>alert("XSS")</script>Safe')
        'alert("XSS")Safe'
        >>> sanitize_html('<p>Use <code>git rebase</code></p>')
        '<p>Use <code>git rebase</code></p>'
    """
    if content is None:
        return None

    return bleach.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True,
    )


def sanitize_plain_text(content: Optional[str]) -> Optional[str]:
    """
    Strip all tags; for titles, names and chat messages.

    The result is text, not markup, so entities bleach produces are decoded
    and values like "R&D" are stored and matched as typed.

    Examples:
        >>> sanitize_plain_text('<b>Linear</b> Algebra')
        'Linear Algebra'
        >>> sanitize_plain_text('R&D')
        'R&D'
    """
    if content is None:
        return None

    return html.unescape(bleach.clean(content, tags=[], strip=True))


def sanitize_tags(tags: List[str]) -> List[str]:
    """Plain-text, trimmed, non-empty, de-duplicated discussion tags."""
    cleaned: List[str] = []
    for tag in tags:
        value = (sanitize_plain_text(tag) or "").strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def sanitize_url(url: Optional[str]) -> Optional[str]:
    """
    Reject ``javascript:`` and other non-web schemes.

    Only http, https and relative URLs survive; anything else becomes "".

    Examples:
        >>> sanitize_url('javascript:alert(1)')
        ''
        >>> sanitize_url('https://meet.example.com/abc')
        'https://meet.example.com/abc'
    """
    if url is None:
        return None

    url = url.strip()
    if url.lower().startswith(("http://", "https://")):
        return url

    # Relative URLs are allowed
    if url.startswith("/") or ":" not in url.split("/")[0]:
        return url
    return ""
