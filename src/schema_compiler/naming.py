"""Naming conventions shared by descriptors and emitters."""

from __future__ import annotations

import re

# Word boundaries: separators, lower->Upper transitions, acronym ends, digits
_WORD_RE = re.compile(r"[A-Z]?[a-z]+|[0-9]+|[A-Z]+(?=[A-Z][a-z]|[0-9]|$)")


def split_words(text: str) -> list[str]:
    """Split an identifier into words.

    >>> split_words("movie_comments")
    ['movie', 'comments']
    >>> split_words("HTTPRequests-log")
    ['HTTP', 'Requests', 'log']
    """
    words: list[str] = []
    for part in re.split(r"[\s_\-./]+", text):
        if part:
            words.extend(_WORD_RE.findall(part))
    return words


def camel_case(text: str) -> str:
    """``movie_comments`` -> ``movieComments``."""
    words = split_words(text)
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(word[:1].upper() + word[1:].lower() for word in rest)


def upper_first_letter(name: str) -> str:
    """Upper-case the first ASCII letter, leaving any leading ``_`` in place."""
    return re.sub(r"[a-zA-Z]", lambda m: m.group(0).upper(), name, count=1)
