"""
Identifier case conversion used to derive default SQL column names.

The converter maps upper-camel or mixed-camel source identifiers to lower_snake.
It is deliberately simple: a word boundary is placed before an uppercase
character that either follows a lowercase character or precedes one, and the
first two characters never introduce a boundary.

Lowercasing is done one character at a time and always yields one character per
input character, so "İ" becomes "i" rather than "i" plus a combining dot.

Examples:
    >>> from sqeel.naming import to_snake_case
    >>> to_snake_case("HelloThere")
    'hello_there'
    >>> to_snake_case("SweetIDThatIsAwesome")
    'sweet_id_that_is_awesome'
    >>> to_snake_case("ID")
    'id'
"""

from __future__ import annotations

__all__ = [
    "to_snake_case",
    "split_words",
]


def _lower_char(ch: str) -> str:
    # str.lower() may expand a character (U+0130 -> "i" + U+0307); keep the base letter.
    return ch.lower()[0]


def split_words(s: str) -> list[str]:
    """
    Split a camel-case identifier into its words, preserving case.

    Args:
        s (str): Source identifier.

    Returns:
        list[str]: Words in order; empty for an empty string.
    """
    words: list[str] = []
    last = 0
    n = len(s)
    for i in range(2, n):
        ch = s[i]
        if ch.isupper() and (s[i - 1].islower() or (i + 1 < n and s[i + 1].islower())):
            words.append(s[last:i])
            last = i
    if last < n:
        words.append(s[last:])
    return words


def to_snake_case(s: str) -> str:
    """
    Convert a camel-case identifier to lower_snake.

    Args:
        s (str): Source identifier (e.g., a dataclass field or Go-style exported name).

    Returns:
        str: Lowercased words joined by "_".

    Examples:
        >>> to_snake_case("UserID")
        'user_id'
        >>> to_snake_case("AB")
        'ab'
    """
    return "".join(_lower_char(ch) for ch in "_".join(split_words(s)))
